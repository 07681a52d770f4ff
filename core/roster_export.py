# core/roster_export.py

"""
Renders a partitioned course roster as a CSV student list.

The layout is a short course header followed by one row per student, in section -> team -> student
order:

    Course ID,"CS2103"
    Course Name,"Software Engineering"


    Section,Team,Full Name,Last Name,Status,Email
    "Tutorial 1","Team A","Alice Tan","Tan","Joined","alice@example.com"

The Section column is emitted only when the course has at least one student in a section other
than the default section. Every value cell goes through `formatters.sanitize_for_csv()`.

Rows are joined by hand rather than with `csv.writer`: value cells are always quoted while the
label cells ("Course ID", the header row) never are, and `csv.writer` applies one quoting policy
to every cell of a row.
"""

import core.formatters as formatters
from models.course import Course
from models.roster import SectionGroup

EOL = "\n"

HEADER_COLUMNS = ["Team", "Full Name", "Last Name", "Status", "Email"]


def build_student_list_csv(
    course: Course,
    sections: list[SectionGroup],
    include_section: bool,
) -> str:
    """
    Builds the CSV student list for one course.

    Args:
        course (Course): The course named in the header.
        sections (list[SectionGroup]): The partitioned roster, as returned by `RosterPartitioner.partition_by_section()`.
        include_section (bool): Whether to emit the Section column.

    Returns:
        str: The CSV text, every line terminated by a newline.
    """
    lines = [
        formatters.format_csv_row(
            ["Course ID", formatters.sanitize_for_csv(course.id)]
        ),
        formatters.format_csv_row(
            ["Course Name", formatters.sanitize_for_csv(course.name)]
        ),
        "",
        "",
    ]

    header = (["Section"] if include_section else []) + HEADER_COLUMNS
    lines.append(formatters.format_csv_row(header))

    for section in sections:
        for team in section.teams:
            for student in team.members:
                cells = [section.name] if include_section else []
                cells += [
                    team.name,
                    formatters.remove_extra_space(student.name),
                    formatters.remove_extra_space(student.last_name),
                    student.registration_status.value,
                    student.email,
                ]
                lines.append(
                    formatters.format_csv_row(
                        [formatters.sanitize_for_csv(cell) for cell in cells]
                    )
                )

    return EOL.join(lines) + EOL
