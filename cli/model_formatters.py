# cli/model_formatters.py

# anything that renders roster objects for the console
from textwrap import dedent

import core.formatters as formatters
from models.course import Course
from models.roster import CourseDetails, RosterStats, SectionGroup, TeamGroup
from models.student import StudentRecord

# === course formatters ===


def format_course_oneline(course: Course) -> str:
    status = " [ARCHIVED]" if course.is_archived else ""

    return f"{course.id:<20} | {course.name}{status}"


def format_course_details(details: CourseDetails) -> str:
    header = dedent(
        f"""\
        Course {details.course.id}:
        ... Name: {details.course.name}
        ... Status: {details.course.status}"""
    )

    return f"{header}\n{format_stats(details.stats)}"


# === roster formatters ===


def format_stats(stats: RosterStats) -> str:
    return (
        f"... Students: {stats.students_total} "
        f"({stats.unregistered_total} yet to join)\n"
        f"... Teams: {stats.teams_total}\n"
        f"... Sections: {stats.sections_total}"
    )


def format_student_oneline(student: StudentRecord) -> str:
    status = "" if student.registered else " [YET TO JOIN]"

    return f"{formatters.remove_extra_space(student.name):<24} | {student.email}{status}"


def format_team_block(team: TeamGroup, indent: str = "") -> str:
    heading = f"{indent}{team.name} ({formatters.format_count(len(team), 'student')})"
    members = [f"{indent}   {format_student_oneline(s)}" for s in team.members]

    return "\n".join([heading, *members])


def format_section_block(section: SectionGroup) -> str:
    heading = f"Section: {section.name}"
    teams = [format_team_block(team, "   ") for team in section.teams]

    return "\n".join([heading, *teams])
