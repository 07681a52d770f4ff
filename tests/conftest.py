# tests/conftest.py

import pytest

from core.courses_logic import CoursesLogic
from core.partitioner import RosterPartitioner
from models.course import Course
from models.course_registry import CourseRegistry
from models.instructor import Instructor
from models.student import StudentRecord

DEFAULT_SECTION = "None"


def make_student(
    section: str,
    team: str,
    registered: bool = True,
    name: str = "Student",
    course_id: str = "CS2103",
    email: str | None = None,
) -> StudentRecord:
    slug = f"{section}.{team}.{name}".replace(" ", "_").lower()
    return StudentRecord(
        course_id=course_id,
        email=email or f"{slug}@example.com",
        name=name,
        last_name=name.split(" ")[-1],
        section=section,
        team=team,
        google_id=f"g.{slug}" if registered else None,
    )


@pytest.fixture
def partitioner():
    return RosterPartitioner(DEFAULT_SECTION)


@pytest.fixture
def sample_student():
    return StudentRecord(
        course_id="CS2103",
        email="alice.tan@example.com",
        name="Alice Tan",
        last_name="Tan",
        section="Tutorial 1",
        team="Team A",
        google_id="alice.g",
    )


@pytest.fixture
def sample_course():
    return Course("CS2103", "Software Engineering")


@pytest.fixture
def sample_instructor():
    return Instructor("prof.g", "CS2103", "Prof Lee", "lee@example.com")


@pytest.fixture
def sample_registry(tmp_path):
    registry_response = CourseRegistry.create(str(tmp_path))
    return registry_response.data["registry"]


@pytest.fixture
def populated_registry(sample_registry, sample_course, sample_instructor):
    registry = sample_registry
    registry.add_course(sample_course)
    registry.add_instructor(sample_instructor)

    for student in [
        make_student("Tutorial 2", "Team C", name="Dan Wu"),
        make_student("Tutorial 1", "Team B", name="Cara Lim"),
        make_student("Tutorial 1", "Team A", name="Ben Ong", registered=False),
        make_student("Tutorial 1", "Team A", name="Alice Tan"),
        make_student(DEFAULT_SECTION, "Team Z", name="Eve Goh", registered=False),
    ]:
        registry.add_student(student)

    return registry


@pytest.fixture
def logic(populated_registry):
    return CoursesLogic(populated_registry, RosterPartitioner(DEFAULT_SECTION))
