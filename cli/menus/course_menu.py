# cli/menus/course_menu.py

"""
Course menu for the roster manager CLI.

Provides read-only roster views of one course (summary, sections and teams, teams, section names),
CSV export of the student list, and the archive and delete operations.
"""

import os

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from cli.path_utils import resolve_export_path
from core.courses_logic import CoursesLogic
from models.course import Course


class CourseDeleted(Exception):
    """Raised inside the Course menu loop once its course no longer exists."""


def run(logic: CoursesLogic, course: Course) -> None:
    """
    Top-level loop with dispatch for the Course menu.

    Args:
        logic (CoursesLogic): Course operations over the active registry.
        course (Course): The course being managed.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    title = formatters.format_banner_text(f"{course.id} - {course.name}")
    options = [
        ("View Course Summary", view_summary),
        ("View Sections and Teams", view_sections),
        ("View Teams", view_teams),
        ("List Section Names", view_section_names),
        ("Export Student List (CSV)", export_student_list),
        ("Toggle Archive Status", toggle_archive_status),
        ("Delete Course", delete_course),
    ]
    zero_option = "Return to Roster Store menu"

    while True:
        menu_response = helpers.display_menu(title, options, zero_option)

        if menu_response is MenuSignal.EXIT:
            break

        elif callable(menu_response):
            try:
                menu_response(logic, course)
            except CourseDeleted:
                break

        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")

    helpers.returning_to("Roster Store menu")


# === roster views ===


def view_summary(logic: CoursesLogic, course: Course) -> None:
    response = logic.get_course_summary(course.id)

    if not response.success:
        helpers.display_response_failure(response)
        return

    print(f"\n{model_formatters.format_course_details(response.data['details'])}")


def view_sections(logic: CoursesLogic, course: Course) -> None:
    response = logic.get_sections_for_course(course.id)

    if not response.success:
        helpers.display_response_failure(response)
        return

    sections = response.data["sections"]

    if not sections:
        print("\nNo students are enrolled in this course.")
        return

    for section in sections:
        print(f"\n{model_formatters.format_section_block(section)}")


def view_teams(logic: CoursesLogic, course: Course) -> None:
    response = logic.get_teams_for_course(course.id)

    if not response.success:
        helpers.display_response_failure(response)
        return

    teams = response.data["teams"]

    if not teams:
        print("\nNo students are enrolled in this course.")
        return

    for team in teams:
        print(f"\n{model_formatters.format_team_block(team)}")


def view_section_names(logic: CoursesLogic, course: Course) -> None:
    response = logic.get_section_names_for_course(course.id)

    if not response.success:
        helpers.display_response_failure(response)
        return

    section_names = response.data["section_names"]

    if not section_names:
        print("\nThis course has no sections.")
        return

    print(f"\n{formatters.format_banner_text('Sections')}")
    helpers.display_results(section_names, show_index=True)


# === export ===


def export_student_list(logic: CoursesLogic, course: Course) -> None:
    """
    Writes the course's student list to `<course_id>_students.csv` in a directory chosen by the user.

    Notes:
        - The export is made on behalf of one of the course's instructors, chosen from a list.
        - Leaving the directory blank writes to the roster store directory.
    """
    instructor = helpers.prompt_selection_from_list(
        logic.registry.get_instructors_for_course(course.id),
        "Instructors",
        lambda x: x.name,
        lambda x: f"{x.name:<24} | {x.email}",
    )

    if instructor is None:
        helpers.returning_without_changes()
        return

    response = logic.get_course_student_list_as_csv(course.id, instructor.google_id)

    if not response.success:
        helpers.display_response_failure(response)
        return

    dir_input = helpers.prompt_user_input_or_none(
        "Enter directory for the CSV file (leave blank to use the roster store directory):"
    )
    dir_path = os.path.expanduser(dir_input) if dir_input else logic.registry.path
    export_path = resolve_export_path(course.id, dir_path)

    try:
        with open(export_path, "w", encoding="utf-8") as f:
            f.write(response.data["csv"])

    except OSError as e:
        print(f"\nCould not write {export_path}: {e}")
        return

    print(f"\nStudent list written to {export_path}")


# === course manipulation ===


def toggle_archive_status(logic: CoursesLogic, course: Course) -> None:
    new_status = not course.is_archived
    action = "archive" if new_status else "restore"

    if not helpers.confirm_action(f"Do you want to {action} {course.id}?"):
        helpers.returning_without_changes()
        return

    response = logic.set_archive_status_of_course(course.id, new_status)

    if not response.success:
        helpers.display_response_failure(response)
        return

    print(f"\n{course.id} is now {course.status}.")


def delete_course(logic: CoursesLogic, course: Course) -> None:
    helpers.caution_banner()
    print(f"Deleting {course.id} also removes every enrollment and instructor mapping.")

    if not helpers.confirm_action("Do you want to permanently delete this course?"):
        helpers.returning_without_changes()
        return

    response = logic.delete_course_cascade(course.id)

    if not response.success:
        helpers.display_response_failure(response)
        return

    print(f"\n{response.detail}")

    raise CourseDeleted(course.id)
