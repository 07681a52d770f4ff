# tests/test_courses_logic.py

import pytest

from core.response import ErrorCode
from models.course import Course
from models.instructor import Instructor
from models.roster import RosterStats
from conftest import DEFAULT_SECTION, make_student

ALICE_GOOGLE_ID = "g.tutorial_1.team_a.alice_tan"


# === course lifecycle ===


def test_create_course(logic):
    response = logic.create_course("CS1010", "Programming Methodology")

    assert response.success
    assert response.data["course"].id == "CS1010"
    assert logic.is_course_present("CS1010")


def test_create_course_rejects_invalid_id(logic):
    response = logic.create_course("CS 1010", "Programming Methodology")

    assert response.error is ErrorCode.INVALID_FIELD_VALUE
    assert not logic.is_course_present("CS 1010")


def test_create_duplicate_course(logic):
    response = logic.create_course("CS2103", "Software Engineering")

    assert response.error is ErrorCode.ALREADY_EXISTS
    assert response.status_code == 409


def test_create_course_and_instructor(logic):
    response = logic.create_course_and_instructor(
        "new.g", "CS1010", "Programming Methodology", "Dr Tan", "tan@example.com"
    )

    assert response.success
    assert response.data["instructor"].id == "CS1010/new.g"
    assert logic.registry.get_instructor_for_google_id("CS1010", "new.g")


def test_create_course_and_instructor_rolls_back_on_bad_instructor(logic):
    response = logic.create_course_and_instructor(
        "new.g", "CS1010", "Programming Methodology", "Dr Tan", "not-an-email"
    )

    assert response.error is ErrorCode.INVALID_FIELD_VALUE
    assert not logic.is_course_present("CS1010")


@pytest.mark.parametrize(
    "course_id, expected",
    [
        ("CS2103-demo", True),
        ("alice.tan-demo42", True),
        ("CS2103", False),
        ("-demo", False),
        ("CS2103-demo-x", False),
    ],
)
def test_is_sample_course(logic, course_id, expected):
    assert logic.is_sample_course(course_id) is expected


def test_verify_course_is_present(logic):
    assert logic.verify_course_is_present("CS2103").data["course"].id == "CS2103"

    missing = logic.verify_course_is_present("CS9999")
    assert missing.is_not_found
    assert missing.status_code == 404


def test_set_archive_status(logic):
    assert logic.set_archive_status_of_course("CS2103", True).success
    assert logic.get_course("CS2103").is_archived

    assert logic.set_archive_status_of_course("CS9999", True).is_not_found


def test_delete_course_cascade(logic):
    response = logic.delete_course_cascade("CS2103")

    assert response.success
    assert response.data["deleted"] == {"students": 5, "instructors": 1}
    assert not logic.is_course_present("CS2103")
    assert logic.registry.students == {}
    assert logic.registry.instructors == {}
    assert logic.delete_course_cascade("CS2103").is_not_found


# === roster views ===


def test_get_course_summary(logic):
    response = logic.get_course_summary("CS2103")

    details = response.data["details"]
    assert details.course.id == "CS2103"
    assert [s.name for s in details.sections] == [
        DEFAULT_SECTION,
        "Tutorial 1",
        "Tutorial 2",
    ]
    assert details.stats == RosterStats(
        students_total=5, unregistered_total=2, teams_total=4, sections_total=2
    )


def test_get_course_details_matches_summary(logic):
    summary = logic.get_course_summary("CS2103").data["details"]
    details = logic.get_course_details("CS2103").data["details"]

    assert details.stats == summary.stats


def test_get_course_summary_for_missing_course(logic):
    assert logic.get_course_summary("CS9999").is_not_found
    assert logic.get_sections_for_course("CS9999").is_not_found
    assert logic.get_teams_for_course("CS9999").is_not_found
    assert logic.get_total_enrolled_in_course("CS9999").is_not_found


def test_get_course_summary_without_stats(logic):
    details = logic.get_course_summary_without_stats("CS2103").data["details"]

    assert details.sections == []
    assert details.stats == RosterStats()


def test_get_sections_for_course(logic):
    response = logic.get_sections_for_course("CS2103")

    assert "stats" not in response.data
    tutorial_1 = response.data["sections"][1]
    assert [t.name for t in tutorial_1.teams] == ["Team A", "Team B"]
    assert [s.name for s in tutorial_1.teams[0].members] == ["Alice Tan", "Ben Ong"]


def test_get_sections_for_course_with_stats(logic):
    response = logic.get_sections_for_course("CS2103", with_stats=True)

    assert response.data["stats"].sections_total == 2
    assert len(response.data["sections"]) == 3


def test_get_section_for_course(logic):
    section = logic.get_section_for_course("Tutorial 1", "CS2103").data["section"]

    assert section.name == "Tutorial 1"
    assert [(t.name, len(t)) for t in section.teams] == [("Team A", 2), ("Team B", 1)]

    empty = logic.get_section_for_course("Tutorial 9", "CS2103").data["section"]
    assert empty.teams == []


def test_get_teams_for_course_merges_sections(logic):
    logic.registry.add_student(make_student("Tutorial 2", "Team A", name="Fay Ho"))

    teams = logic.get_teams_for_course("CS2103").data["teams"]

    assert [(t.name, len(t)) for t in teams] == [
        ("Team A", 3),
        ("Team B", 1),
        ("Team C", 1),
        ("Team Z", 1),
    ]
    assert logic.get_number_of_teams("CS2103").data["count"] == 4


def test_section_names_and_counts(logic):
    assert logic.get_section_names_for_course("CS2103").data["section_names"] == [
        "Tutorial 1",
        "Tutorial 2",
    ]
    assert logic.get_number_of_sections("CS2103").data["count"] == 2
    assert logic.get_total_enrolled_in_course("CS2103").data["count"] == 5
    assert logic.get_total_unregistered_in_course("CS2103").data["count"] == 2
    assert logic.has_indicated_sections("CS2103").data["has_sections"]


def test_course_without_sections(logic):
    logic.create_course("CS1010", "Programming Methodology")
    logic.registry.add_student(
        make_student(DEFAULT_SECTION, "Team A", course_id="CS1010")
    )

    assert not logic.has_indicated_sections("CS1010").data["has_sections"]
    assert logic.get_number_of_sections("CS1010").data["count"] == 0


# === export ===


def test_get_course_student_list_as_csv(logic):
    response = logic.get_course_student_list_as_csv("CS2103", "prof.g")

    assert response.success
    assert response.data["csv"] == (
        'Course ID,"CS2103"\n'
        'Course Name,"Software Engineering"\n'
        "\n"
        "\n"
        "Section,Team,Full Name,Last Name,Status,Email\n"
        '"None","Team Z","Eve Goh","Goh","Yet to join","none.team_z.eve_goh@example.com"\n'
        '"Tutorial 1","Team A","Alice Tan","Tan","Joined","tutorial_1.team_a.alice_tan@example.com"\n'
        '"Tutorial 1","Team A","Ben Ong","Ong","Yet to join","tutorial_1.team_a.ben_ong@example.com"\n'
        '"Tutorial 1","Team B","Cara Lim","Lim","Joined","tutorial_1.team_b.cara_lim@example.com"\n'
        '"Tutorial 2","Team C","Dan Wu","Wu","Joined","tutorial_2.team_c.dan_wu@example.com"\n'
    )


def test_csv_without_sections_escapes_values(logic):
    logic.create_course_and_instructor(
        "prof.g", "CS1010", 'Intro "Programming"', "Prof Lee", "lee@example.com"
    )
    logic.registry.add_student(
        make_student(
            DEFAULT_SECTION,
            "Team, One",
            name="Jo   Ann  Lee",
            course_id="CS1010",
            email="jo@example.com",
        )
    )

    csv_text = logic.get_course_student_list_as_csv("CS1010", "prof.g").data["csv"]

    assert csv_text.splitlines() == [
        'Course ID,"CS1010"',
        'Course Name,"Intro ""Programming"""',
        "",
        "",
        "Team,Full Name,Last Name,Status,Email",
        '"Team, One","Jo Ann Lee","Lee","Joined","jo@example.com"',
    ]


def test_csv_requires_course_instructor(logic):
    assert logic.get_course_student_list_as_csv("CS2103", "stranger.g").is_not_found
    assert logic.get_course_student_list_as_csv("CS9999", "prof.g").is_not_found


# === instructor and student views ===


@pytest.fixture
def second_course(logic):
    logic.create_course("CS1010", "Programming Methodology")
    logic.registry.add_instructor(
        Instructor("prof.g", "CS1010", "Prof Lee", "lee@example.com", archived=True)
    )
    return logic.get_course("CS1010")


def test_get_courses_for_student_account(logic):
    response = logic.get_courses_for_student_account(ALICE_GOOGLE_ID)

    assert [c.id for c in response.data["courses"]] == ["CS2103"]
    assert logic.get_courses_for_student_account("nobody.g").is_not_found


def test_get_courses_for_instructor(logic, second_course):
    all_courses = logic.get_courses_for_instructor("prof.g")
    active = logic.get_courses_for_instructor("prof.g", omit_archived=True)

    assert {c.id for c in all_courses} == {"CS2103", "CS1010"}
    assert [c.id for c in active] == ["CS2103"]
    assert logic.get_courses_for_instructor("nobody.g") == []


def test_get_course_summaries_for_instructor(logic, second_course):
    summaries = logic.get_course_summaries_for_instructor("prof.g").data["summaries"]

    assert summaries["CS2103"].stats.students_total == 5
    assert summaries["CS1010"].stats == RosterStats()
    assert logic.get_course_summaries_for_instructor("nobody.g").is_not_found


def test_get_course_summaries_without_stats_for_instructor(logic, second_course):
    response = logic.get_course_summaries_without_stats_for_instructor(
        "prof.g", omit_archived=True
    )

    summaries = response.data["summaries"]
    assert list(summaries) == ["CS2103"]
    assert summaries["CS2103"].sections == []


def test_archived_courses_for_instructor(logic, second_course):
    archived = logic.get_archived_courses_for_instructor("prof.g")

    assert [c.id for c in archived] == ["CS1010"]
    assert logic.is_course_archived("CS1010", "prof.g")
    assert not logic.is_course_archived("CS2103", "prof.g")
    assert not logic.is_course_archived("CS9999", "prof.g")


def test_course_flag_applies_when_instructor_flag_unset(logic):
    logic.set_archive_status_of_course("CS2103", True)

    assert logic.is_course_archived("CS2103", "prof.g")
    assert logic.is_course_archived("CS2103", "stranger.g")


def test_extract_active_and_archived_courses(logic, second_course):
    details = list(
        logic.get_course_summaries_for_instructor("prof.g").data["summaries"].values()
    )

    active = logic.extract_active_courses(details, "prof.g")
    archived = logic.extract_archived_courses(details, "prof.g")

    assert [d.course.id for d in active] == ["CS2103"]
    assert [d.course.id for d in archived] == ["CS1010"]


def test_get_archived_course_ids(logic):
    courses = [Course("A1", "One"), Course("A2", "Two", archived=True), Course("A3", "Three")]
    instructors = {
        "A1": Instructor("x.g", "A1", "X", "x@example.com", archived=True),
        "A2": Instructor("x.g", "A2", "X", "x@example.com", archived=False),
    }

    assert logic.get_archived_course_ids(courses, instructors) == ["A1"]


def test_get_course_id_to_section_names_map(logic, second_course):
    mapping = logic.get_course_id_to_section_names_map(
        [logic.get_course("CS2103"), second_course]
    )

    assert mapping == {"CS2103": ["Tutorial 1", "Tutorial 2"], "CS1010": []}


def test_courses_of_deleted_course_are_skipped(logic):
    logic.registry.remove_course(logic.get_course("CS2103"))

    assert logic.get_courses_for_instructor("prof.g") == []
    assert logic.get_archived_courses_for_instructor("prof.g") == []
