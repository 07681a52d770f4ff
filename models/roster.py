# models/roster.py

"""
Nested roster structures produced by `core.partitioner.RosterPartitioner`.

A course roster is presented as sections, each holding teams, each holding students:

    CourseDetails
      └── SectionGroup ("Tutorial 1")
            ├── TeamGroup ("Team A") -> [StudentRecord, StudentRecord]
            └── TeamGroup ("Team B") -> [StudentRecord]

These objects are built fresh for every partitioning call and handed to the caller; nothing in
this module is persisted. `RosterStats` is the optional running counter filled in while a course
is partitioned.
"""

from __future__ import annotations

from models.course import Course
from models.student import StudentRecord


class TeamGroup:

    def __init__(self, name: str):
        self._name = name
        self._members: list[StudentRecord] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def members(self) -> list[StudentRecord]:
        return self._members

    def add(self, student: StudentRecord) -> None:
        self._members.append(student)

    def __len__(self) -> int:
        return len(self._members)

    def __repr__(self) -> str:
        return f"TeamGroup({self._name}, {len(self._members)} students)"


class SectionGroup:

    def __init__(self, name: str):
        self._name = name
        self._teams: list[TeamGroup] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def teams(self) -> list[TeamGroup]:
        return self._teams

    @property
    def current_team(self) -> TeamGroup | None:
        return self._teams[-1] if self._teams else None

    @property
    def students(self) -> list[StudentRecord]:
        return [student for team in self._teams for student in team.members]

    def open_team(self, name: str) -> TeamGroup:
        team = TeamGroup(name)
        self._teams.append(team)
        return team

    def add_team(self, team: TeamGroup) -> None:
        self._teams.append(team)

    def __repr__(self) -> str:
        return f"SectionGroup({self._name}, {len(self._teams)} teams)"


class RosterStats:
    """
    Running totals accumulated during one partitioning pass.

    Counters only ever increase. `sections_total` does not count the reserved default section.
    """

    def __init__(
        self,
        students_total: int = 0,
        unregistered_total: int = 0,
        teams_total: int = 0,
        sections_total: int = 0,
    ):
        self.students_total = students_total
        self.unregistered_total = unregistered_total
        self.teams_total = teams_total
        self.sections_total = sections_total

    def to_dict(self) -> dict:
        return {
            "students_total": self.students_total,
            "unregistered_total": self.unregistered_total,
            "teams_total": self.teams_total,
            "sections_total": self.sections_total,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RosterStats):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"RosterStats(students={self.students_total}, unregistered={self.unregistered_total}, "
            f"teams={self.teams_total}, sections={self.sections_total})"
        )


class CourseDetails:
    """A course together with its partitioned roster and roster statistics."""

    def __init__(
        self,
        course: Course,
        sections: list[SectionGroup] | None = None,
        stats: RosterStats | None = None,
    ):
        self._course = course
        self._sections = sections or []
        self._stats = stats or RosterStats()

    @property
    def course(self) -> Course:
        return self._course

    @property
    def sections(self) -> list[SectionGroup]:
        return self._sections

    @sections.setter
    def sections(self, sections: list[SectionGroup]) -> None:
        self._sections = sections

    @property
    def stats(self) -> RosterStats:
        return self._stats

    def __repr__(self) -> str:
        return f"CourseDetails({self._course.id}, {self._stats!r})"
