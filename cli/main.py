# cli/main.py

"""
Start Menu for the roster manager CLI.

A roster store is a directory holding one saved `CourseRegistry`. From here the user creates a new
store or opens an existing one, then continues in the Roster Store menu.
"""

import os
from textwrap import dedent
from typing import Callable, cast

from loguru import logger

import cli.menu_helpers as helpers
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from cli.menus import registry_menu
from cli.path_utils import dir_is_empty, list_registry_dirs, resolve_save_dir
from core.logging_setup import setup_logging
from core.response import Response
from core.settings import settings
from models.course_registry import CourseRegistry


def run_cli() -> None:
    """
    Top-level loop with dispatch for the Start menu.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    setup_logging(settings.log_level, settings.log_file)
    logger.debug(f"Default section label: {settings.default_section!r}")

    title = formatters.format_banner_text("COURSE ROSTER MANAGER")
    options = [
        ("Create a new roster store", create_registry),
        ("Open an existing roster store", load_registry),
    ]

    while True:
        menu_response = helpers.display_menu(title, options, "Exit Program")

        if menu_response is MenuSignal.EXIT:
            exit_program()

        elif callable(menu_response):
            registry = menu_response()

            if registry is not None:
                registry_menu.run(registry)

        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")


def create_registry() -> CourseRegistry | None:
    """
    Asks for a store name and an optional directory, then writes an empty store there.

    Returns:
        The new `CourseRegistry`, or None if the user cancels.

    Notes:
        - A blank directory places the store at `<settings.data_dir>/<name>`.
        - Writing into a non-empty directory needs explicit confirmation.
    """
    while True:
        name = helpers.prompt_user_input_or_cancel(
            "Enter a name for the roster store (e.g. FALL 2025, leave blank to cancel):"
        )

        if name is MenuSignal.CANCEL:
            return None

        dir_input = helpers.prompt_user_input_or_none(
            "Enter directory to save the roster store (leave blank to use default):"
        )
        dir_path = resolve_save_dir(cast(str, name), dir_input)

        if not dir_is_empty(dir_path) and not _confirm_overwrite():
            continue

        registry = _open_registry("Creating", CourseRegistry.create, dir_path)

        if registry is not None:
            return registry


def load_registry() -> CourseRegistry | None:
    """
    Opens a saved roster store.

    Stores found under `settings.data_dir` are offered first; otherwise, or if the user cancels
    that list, a directory path is requested.

    Returns:
        The loaded `CourseRegistry`, or None if the user cancels.
    """
    known_dirs = list_registry_dirs()

    if known_dirs:
        selected = helpers.prompt_selection_from_list(
            known_dirs, "Roster Stores", formatter=os.path.basename
        )

        if selected is not None:
            registry = _open_registry("Loading", CourseRegistry.load, selected)

            if registry is not None:
                return registry

    while True:
        dir_input = helpers.prompt_user_input_or_cancel(
            "Enter path to the roster store directory (leave blank to cancel):"
        )

        if dir_input is MenuSignal.CANCEL:
            return None

        dir_path = os.path.abspath(os.path.expanduser(cast(str, dir_input)))

        if not os.path.isdir(dir_path):
            print(f"\nDirectory not found: {dir_path}. Please try again.")
            continue

        registry = _open_registry("Loading", CourseRegistry.load, dir_path)

        if registry is not None:
            return registry


def exit_program():
    """
    Displays an exit banner and terminates the CLI program.

    Raises:
        SystemExit: Always.
    """
    print(f"\n{formatters.format_banner_text('Exiting Program')}\n")

    raise SystemExit


# === helper methods ===


def _confirm_overwrite() -> bool:
    print(f"\n{formatters.format_banner_text('WARNING!')}")
    print(
        dedent(
            """\
            The selected directory is not empty and may contain another roster store.
            Saving to this directory overwrites courses.json, instructors.json, and students.json."""
        )
    )

    return helpers.confirm_action("\nDo you wish to continue?")


def _open_registry(
    verb: str, opener: Callable[[str], Response], dir_path: str
) -> CourseRegistry | None:
    print(f"\n{verb} roster store ...")

    response = opener(dir_path)

    if not response.success:
        helpers.display_response_failure(response)
        return None

    registry = response.data["registry"]
    print(f"... {len(registry.courses)} courses ready.")

    return registry


if __name__ == "__main__":
    run_cli()
