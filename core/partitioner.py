# core/partitioner.py

"""
Groups a flat list of enrollment records into sections and teams.

`RosterPartitioner` turns a course roster into an ordered nesting of sections -> teams -> students
in a single linear pass, optionally accumulating `RosterStats` along the way.

Sort contract:
    Grouping relies on records with equal keys being contiguous. Records are ordered ascending by
    section, then ascending by team, using plain (code point) string comparison. The partitioner
    applies this ordering itself with a stable sort before grouping, so:
        - input that is already in contract order comes back in exactly the same order;
        - unsorted input is regrouped instead of producing split teams.

The reserved default section label (e.g. "None") forms a group like any other label but is never
counted in `RosterStats.sections_total` and never listed by `list_section_names()`.
"""

from collections.abc import Sequence

from core.settings import settings
from models.roster import RosterStats, SectionGroup, TeamGroup
from models.student import StudentRecord


def section_sort_key(student: StudentRecord) -> tuple[str, str]:
    return (student.section, student.team)


def team_sort_key(student: StudentRecord) -> str:
    return student.team


class RosterPartitioner:
    """
    Stateless grouping of student records; the only configuration is the default section label.

    Notes:
        - The input sequence and its records are never mutated.
        - A supplied `RosterStats` is the only object modified by a call.
    """

    def __init__(self, default_section: str | None = None):
        self._default_section = (
            default_section if default_section is not None else settings.default_section
        )

    @property
    def default_section(self) -> str:
        return self._default_section

    def partition_by_section(
        self,
        students: Sequence[StudentRecord],
        stats: RosterStats | None = None,
    ) -> list[SectionGroup]:
        """
        Partitions students into sections, and each section into teams.

        Args:
            students (Sequence[StudentRecord]): The course roster.
            stats (RosterStats | None): If provided, totals are accumulated into it.

        Returns:
            list[SectionGroup]: Sections in ascending label order, each with its teams in ascending label order.
            An empty input yields an empty list and leaves `stats` untouched.
        """
        ordered = sorted(students, key=section_sort_key)

        sections: list[SectionGroup] = []
        section: SectionGroup | None = None

        for student in ordered:
            if stats is not None:
                stats.students_total += 1
                if not student.registered:
                    stats.unregistered_total += 1

            if section is None:
                section = self._open_section(student, stats)

            elif student.section == section.name:
                team = section.current_team
                if team is not None and student.team == team.name:
                    team.add(student)
                else:
                    self._open_team(section, student, stats)

            else:
                self._close_section(section, sections, stats)
                section = self._open_section(student, stats)

        if section is not None:
            self._close_section(section, sections, stats)

        return sections

    def partition_by_team(self, students: Sequence[StudentRecord]) -> list[TeamGroup]:
        """
        Partitions students into teams, ignoring section boundaries.

        Args:
            students (Sequence[StudentRecord]): The roster, or any subset of it.

        Returns:
            list[TeamGroup]: Teams in ascending label order. Empty for empty input.

        Notes:
            - Two sections that reuse a team label contribute to one `TeamGroup`.
        """
        ordered = sorted(students, key=team_sort_key)

        teams: list[TeamGroup] = []
        team: TeamGroup | None = None

        for student in ordered:
            if team is None or student.team != team.name:
                team = TeamGroup(student.team)
                teams.append(team)

            team.add(student)

        return teams

    def list_section_names(self, students: Sequence[StudentRecord]) -> list[str]:
        """Returns the distinct section labels in ascending order, excluding the default section."""
        return sorted(
            {s.section for s in students if s.section != self._default_section}
        )

    def has_indicated_sections(self, students: Sequence[StudentRecord]) -> bool:
        return any(s.section != self._default_section for s in students)

    # === helper methods ===

    def _open_section(
        self, student: StudentRecord, stats: RosterStats | None
    ) -> SectionGroup:
        section = SectionGroup(student.section)
        self._open_team(section, student, stats)
        return section

    def _open_team(
        self,
        section: SectionGroup,
        student: StudentRecord,
        stats: RosterStats | None,
    ) -> None:
        team = section.open_team(student.team)
        team.add(student)

        if stats is not None:
            stats.teams_total += 1

    def _close_section(
        self,
        section: SectionGroup,
        sections: list[SectionGroup],
        stats: RosterStats | None,
    ) -> None:
        sections.append(section)

        if stats is not None and section.name != self._default_section:
            stats.sections_total += 1
