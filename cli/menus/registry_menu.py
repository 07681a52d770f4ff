# cli/menus/registry_menu.py

"""
Roster Store menu for the roster manager CLI.

Lists the courses in the loaded `CourseRegistry` and provides options for adding a course,
importing a data bundle, opening the Course menu, and saving the store.
"""

import os
from typing import cast

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from cli.menus import course_menu
from core.courses_logic import CoursesLogic
from models.course_registry import CourseRegistry


def run(registry: CourseRegistry) -> None:
    """
    Top-level loop with dispatch for the Roster Store menu.

    Args:
        registry (CourseRegistry): The active registry.

    Raises:
        RuntimeError: If the menu response is unrecognized.

    Notes:
        - The finally block guarantees a check for unsaved changes before returning.
    """
    logic = CoursesLogic(registry)

    title = formatters.format_banner_text("Roster Store")
    options = [
        ("Add Course", add_course),
        ("Import Data Bundle", import_data_bundle),
        ("Manage a Course", select_and_manage_course),
        ("Save Roster Store", save_registry),
    ]
    zero_option = "Return to Start Menu"

    try:
        while True:
            menu_response = helpers.display_menu(title, options, zero_option)

            if menu_response is MenuSignal.EXIT:
                break

            elif callable(menu_response):
                menu_response(logic)

            else:
                raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")

    finally:
        helpers.prompt_if_dirty(registry)

    helpers.returning_to("Start Menu")


def add_course(logic: CoursesLogic) -> None:
    """
    Prompts for a new course and, optionally, its first instructor.

    Notes:
        - Leaving the instructor Google ID blank creates the course without an instructor.
    """
    course_id = helpers.prompt_user_input_or_cancel(
        "Enter the course ID (e.g. CS2103-FALL25, leave blank to cancel):"
    )

    if course_id is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    course_id = cast(str, course_id)

    course_name = helpers.prompt_user_input_or_cancel(
        "Enter the course name (leave blank to cancel):"
    )

    if course_name is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    course_name = cast(str, course_name)

    google_id = helpers.prompt_user_input_or_none(
        "Enter the instructor's Google ID (leave blank to skip):"
    )

    if google_id is None:
        response = logic.create_course(course_id, course_name)

    else:
        instructor_name = helpers.prompt_user_input("Enter the instructor's name:")
        instructor_email = helpers.prompt_user_input("Enter the instructor's email:")

        response = logic.create_course_and_instructor(
            google_id, course_id, course_name, instructor_name, instructor_email
        )

    if not response.success:
        helpers.display_response_failure(response)
        return

    print(f"\n{response.detail}")


def import_data_bundle(logic: CoursesLogic) -> None:
    bundle_path = helpers.prompt_user_input_or_cancel(
        "Enter path to the JSON data bundle (leave blank to cancel):"
    )

    if bundle_path is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    bundle_path = os.path.abspath(os.path.expanduser(cast(str, bundle_path)))

    print("\nImporting data bundle ...")

    response = logic.registry.import_data_bundle(bundle_path)

    if not response.success:
        helpers.display_response_failure(response)
        return

    print(f"... {response.detail}")


def select_and_manage_course(logic: CoursesLogic) -> None:
    course = helpers.prompt_selection_from_list(
        list(logic.registry.courses.values()),
        "Courses",
        lambda x: x.id,
        model_formatters.format_course_oneline,
    )

    if course is None:
        helpers.returning_without_changes()
        return

    course_menu.run(logic, course)


def save_registry(logic: CoursesLogic) -> None:
    response = logic.registry.save()

    if not response.success:
        helpers.display_response_failure(response)
        return

    print(f"\n{response.detail}")
