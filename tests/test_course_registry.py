# tests/test_course_registry.py

import json
import os

from loguru import logger

from core.courses_logic import CoursesLogic
from core.response import ErrorCode
from models.course import Course
from models.course_registry import CourseRegistry
from models.instructor import Instructor
from conftest import DEFAULT_SECTION, make_student


def test_create_writes_empty_files(tmp_path):
    response = CourseRegistry.create(str(tmp_path))

    assert response.success
    registry = response.data["registry"]
    assert not registry.has_unsaved_changes

    for filename in ["courses.json", "instructors.json", "students.json"]:
        with open(tmp_path / filename) as f:
            assert json.load(f) == []


def test_add_course_marks_registry_dirty(sample_registry, sample_course):
    response = sample_registry.add_course(sample_course)

    assert response.success
    assert sample_registry.get_course("CS2103") is sample_course
    assert sample_registry.has_unsaved_changes


def test_add_duplicate_course_fails(sample_registry, sample_course):
    sample_registry.add_course(sample_course)

    response = sample_registry.add_course(Course("CS2103", "Another Name"))

    assert not response.success
    assert response.error is ErrorCode.ALREADY_EXISTS
    assert response.status_code == 409
    assert sample_registry.get_course("CS2103").name == "Software Engineering"


def test_add_student_requires_course(sample_registry):
    response = sample_registry.add_student(make_student("1", "A"))

    assert not response.success
    assert response.is_not_found
    assert sample_registry.students == {}


def test_duplicate_email_in_course_is_rejected(populated_registry):
    response = populated_registry.add_student(
        make_student("Tutorial 9", "Team Q", email="cara.lim@example.com")
    )
    assert response.success

    duplicate = populated_registry.add_student(
        make_student("Tutorial 3", "Team R", email="CARA.LIM@example.com")
    )

    assert duplicate.error is ErrorCode.ALREADY_EXISTS


def test_get_students_for_course_is_sorted(populated_registry):
    students = populated_registry.get_students_for_course("CS2103")

    assert [s.name for s in students] == [
        "Eve Goh",
        "Alice Tan",
        "Ben Ong",
        "Cara Lim",
        "Dan Wu",
    ]
    assert populated_registry.get_students_for_course("CS9999") == []


def test_get_students_for_section(populated_registry):
    students = populated_registry.get_students_for_section("Tutorial 1", "CS2103")

    assert [s.name for s in students] == ["Alice Tan", "Ben Ong", "Cara Lim"]


def test_get_unregistered_students(populated_registry):
    students = populated_registry.get_unregistered_students_for_course("CS2103")

    assert [s.name for s in students] == ["Eve Goh", "Ben Ong"]


def test_find_student_normalizes_email(populated_registry):
    student = populated_registry.get_students_for_course("CS2103")[1]

    response = populated_registry.find_student("CS2103", student.email.upper())

    assert response.success
    assert response.data["record"] is student


def test_find_missing_record(populated_registry):
    response = populated_registry.find_course_by_id("CS9999")

    assert response.is_not_found
    assert response.status_code == 404


def test_get_courses_keeps_order_and_skips_unknown(populated_registry):
    populated_registry.add_course(Course("CS1010", "Programming Methodology"))

    courses = populated_registry.get_courses(["CS1010", "missing", "CS2103"])

    assert [c.id for c in courses] == ["CS1010", "CS2103"]


def test_instructor_queries(populated_registry):
    archived = Course("CS1010", "Programming Methodology", archived=True)
    populated_registry.add_course(archived)
    populated_registry.add_instructor(
        Instructor("prof.g", "CS1010", "Prof Lee", "lee@example.com")
    )

    assert len(populated_registry.get_instructors_for_google_id("prof.g")) == 2

    active = populated_registry.get_instructors_for_google_id(
        "prof.g", omit_archived=True
    )
    assert [i.course_id for i in active] == ["CS2103"]

    assert populated_registry.get_instructor_for_google_id("CS2103", "prof.g")
    assert populated_registry.get_instructor_for_google_id("CS2103", "nobody") is None


def test_instructor_archive_flag_overrides_course(populated_registry):
    instructor = populated_registry.get_instructor_for_google_id("CS2103", "prof.g")
    instructor.archived = True

    assert populated_registry.get_instructors_for_google_id("prof.g", True) == []


def test_update_course(populated_registry):
    response = populated_registry.update_course(Course("CS2103", "Renamed"))

    assert response.success
    assert populated_registry.get_course("CS2103").name == "Renamed"

    missing = populated_registry.update_course(Course("CS9999", "Missing"))
    assert missing.is_not_found


def test_remove_student(populated_registry):
    student = populated_registry.get_students_for_course("CS2103")[0]

    assert populated_registry.remove_student(student).success
    assert populated_registry.remove_student(student).is_not_found


def test_delete_roster_for_course(populated_registry):
    assert populated_registry.delete_students_for_course("CS2103") == 5
    assert populated_registry.delete_instructors_for_course("CS2103") == 1
    assert populated_registry.delete_students_for_course("CS2103") == 0
    assert populated_registry.get_course("CS2103") is not None


def test_save_and_load_round_trip(populated_registry):
    assert populated_registry.save().success
    assert not populated_registry.has_unsaved_changes

    response = CourseRegistry.load(populated_registry.path)

    assert response.success
    loaded = response.data["registry"]
    assert not loaded.has_unsaved_changes
    assert loaded.courses.keys() == populated_registry.courses.keys()
    assert loaded.instructors.keys() == populated_registry.instructors.keys()
    assert loaded.students == populated_registry.students


def test_load_missing_directory(tmp_path):
    response = CourseRegistry.load(str(tmp_path / "nowhere"))

    assert not response.success
    assert response.error is ErrorCode.NOT_FOUND


def test_load_corrupt_file(sample_registry):
    with open(os.path.join(sample_registry.path, "courses.json"), "w") as f:
        f.write("{not json")

    response = CourseRegistry.load(sample_registry.path)

    assert response.error is ErrorCode.INVALID_INPUT


def test_load_rejects_orphaned_student(sample_registry):
    with open(os.path.join(sample_registry.path, "students.json"), "w") as f:
        json.dump([make_student("1", "A").to_dict()], f)

    response = CourseRegistry.load(sample_registry.path)

    assert response.error is ErrorCode.INVALID_FIELD_VALUE


def test_load_reports_missing_field(sample_registry):
    with open(os.path.join(sample_registry.path, "courses.json"), "w") as f:
        json.dump([{"name": "No id"}], f)

    response = CourseRegistry.load(sample_registry.path)

    assert not response.success
    assert response.error is ErrorCode.INVALID_FIELD_VALUE


def test_import_data_bundle(sample_registry, tmp_path):
    bundle_path = tmp_path / "bundle.json"
    student = make_student("1", "A").to_dict()
    del student["section"]
    bundle = {
        "courses": [{"id": "CS2103", "name": "Software Engineering"}],
        "instructors": [
            {
                "google_id": "prof.g",
                "course_id": "CS2103",
                "name": "Prof Lee",
                "email": "lee@example.com",
            }
        ],
        "students": [student],
    }
    bundle_path.write_text(json.dumps(bundle))

    response = sample_registry.import_data_bundle(str(bundle_path))

    assert response.success
    assert response.data["imported"] == {"courses": 1, "instructors": 1, "students": 1}
    imported = sample_registry.get_students_for_course("CS2103")[0]
    assert imported.section == DEFAULT_SECTION
    assert sample_registry.has_unsaved_changes


def test_import_data_bundle_rejects_non_object(sample_registry, tmp_path):
    bundle_path = tmp_path / "bundle.json"
    bundle_path.write_text("[]")

    response = sample_registry.import_data_bundle(str(bundle_path))

    assert response.error is ErrorCode.INVALID_INPUT


def test_import_data_bundle_missing_file(sample_registry, tmp_path):
    response = sample_registry.import_data_bundle(str(tmp_path / "missing.json"))

    assert response.is_not_found
    assert response.status_code == 404


def test_import_data_bundle_fails_on_duplicate(populated_registry, tmp_path):
    bundle_path = tmp_path / "bundle.json"
    bundle_path.write_text(
        json.dumps({"courses": [{"id": "CS2103", "name": "Software Engineering"}]})
    )

    response = populated_registry.import_data_bundle(str(bundle_path))

    assert response.error is ErrorCode.INVALID_FIELD_VALUE


def write_bundle(tmp_path, bundle):
    bundle_path = tmp_path / "bundle.json"
    bundle_path.write_text(json.dumps(bundle))
    return str(bundle_path)


def test_import_null_section_uses_default_section(populated_registry, tmp_path):
    student = make_student("1", "A", name="Nia Lo").to_dict()
    student["section"] = None

    response = populated_registry.import_data_bundle(
        write_bundle(tmp_path, {"students": [student]})
    )

    assert response.success
    stored = populated_registry.find_student("CS2103", student["email"]).data["record"]
    assert stored.section == DEFAULT_SECTION

    summary = CoursesLogic(populated_registry).get_course_summary("CS2103")
    assert summary.data["details"].stats.students_total == 6


def test_import_null_team_is_rejected(populated_registry, tmp_path):
    student = make_student("1", "A", name="Nia Lo").to_dict()
    student["team"] = None

    response = populated_registry.import_data_bundle(
        write_bundle(tmp_path, {"students": [student]})
    )

    assert response.error is ErrorCode.INVALID_FIELD_VALUE
    assert len(populated_registry.get_students_for_course("CS2103")) == 5


def test_load_rejects_null_team(populated_registry):
    populated_registry.save()
    path = os.path.join(populated_registry.path, "students.json")
    with open(path) as f:
        students = json.load(f)
    students[0]["team"] = None
    with open(path, "w") as f:
        json.dump(students, f)

    response = CourseRegistry.load(populated_registry.path)

    assert response.error is ErrorCode.INVALID_FIELD_VALUE


def test_import_logs_progress_every_hundred_records(populated_registry, tmp_path):
    students = [
        make_student("1", "A", name=f"Student {i}").to_dict() for i in range(250)
    ]
    messages = []
    sink_id = logger.add(messages.append, level="INFO", format="{message}")

    try:
        response = populated_registry.import_data_bundle(
            write_bundle(tmp_path, {"students": students})
        )
    finally:
        logger.remove(sink_id)

    assert response.data["imported"]["students"] == 250
    progress = [m.strip() for m in messages if "student records" in m]
    assert progress == ["Imported 100 student records", "Imported 200 student records"]


def test_get_records(populated_registry):
    everything = populated_registry.get_records(populated_registry.students)
    unregistered = populated_registry.get_records(
        populated_registry.students, lambda s: not s.registered
    )

    assert len(everything.data["records"]) == 5
    assert sorted(s.name for s in unregistered.data["records"]) == ["Ben Ong", "Eve Goh"]


def test_get_records_reports_failing_predicate(populated_registry):
    response = populated_registry.get_records(
        populated_registry.courses, lambda c: 1 / 0
    )

    assert response.error is ErrorCode.INTERNAL_ERROR


def test_find_and_remove_instructor(populated_registry):
    found = populated_registry.find_instructor("CS2103", "prof.g")

    assert found.success
    instructor = found.data["record"]

    assert populated_registry.remove_instructor(instructor).success
    assert populated_registry.find_instructor("CS2103", "prof.g").is_not_found
    assert populated_registry.remove_instructor(instructor).is_not_found
    assert populated_registry.get_instructors_for_course("CS2103") == []
