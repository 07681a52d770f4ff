# cli/menu_helpers.py

"""
Console interaction shared by the Start, Roster Store, and Course menus.

Every prompt goes through `prompt_user_input()`, which strips the answer. Numbered lists (menus
and record pickers) are 1-based on screen, with "0" reserved for leaving the list.
"""

from enum import Enum
from typing import Any, Callable, Iterable

import core.formatters as formatters
from core.response import Response
from models.course_registry import CourseRegistry

YES_ANSWERS = ("y", "yes")
NO_ANSWERS = ("n", "no")


class MenuSignal(Enum):
    CANCEL = "CANCEL"
    EXIT = "EXIT"


def _parse_menu_index(choice: str, length: int) -> int | None:
    """Converts a 1-based menu answer to a list index, or None if it names no entry."""
    if not choice.isdigit():
        return None

    index = int(choice) - 1

    return index if 0 <= index < length else None


# === display methods ===


def display_menu(
    title: str,
    options: list[tuple[str, Callable[..., Any]]],
    zero_option: str = "Return",
) -> MenuSignal | Callable[..., Any]:
    """
    Shows a numbered menu until the user picks a valid entry.

    Args:
        title (str): Heading printed above the entries.
        options (list[tuple[str, Callable[..., Any]]]): (label, action) pairs, shown from 1.
        zero_option (str, optional): Label of the "0" entry. Defaults to "Return".

    Returns:
        MenuSignal.EXIT for "0", otherwise the action paired with the chosen label.
    """
    while True:
        print(f"\n{title}")

        for number, (label, _) in enumerate(options, 1):
            print(f"{number}. {label}")

        print(f"0. {zero_option}")

        choice = prompt_user_input("\nSelect an option: ")

        if choice == "0":
            return MenuSignal.EXIT

        index = _parse_menu_index(choice, len(options))

        if index is not None:
            return options[index][1]

        print("Invalid selection. Please try again.")


def display_results(
    results: Iterable[Any],
    show_index: bool = False,
    formatter: Callable[[Any], str] = lambda x: str(x),
) -> None:
    for number, result in enumerate(results, 1):
        prefix = f"{number:>2}. " if show_index else ""
        print(f"{prefix}{formatter(result)}")


# === user input ===


def prompt_user_input(prompt: str) -> str:
    return input(f"\n{prompt}\n  >> ").strip()


def prompt_user_input_or_cancel(prompt: str) -> str | MenuSignal:
    answer = prompt_user_input(prompt)
    return answer if answer else MenuSignal.CANCEL


def prompt_user_input_or_none(prompt: str) -> str | None:
    return prompt_user_input(prompt) or None


def confirm_action(prompt: str) -> bool:
    while True:
        choice = prompt_user_input(f"{prompt} (y/n): ").lower()

        if choice in YES_ANSWERS:
            return True

        if choice in NO_ANSWERS:
            return False

        print("Invalid selection. Please try again.")


def prompt_if_dirty(registry: CourseRegistry) -> None:
    """
    Offers to save a registry with unsaved changes.

    Notes:
        - A failed save is reported but does not stop the caller from leaving the menu.
    """
    if not registry.has_unsaved_changes:
        return

    if not confirm_action(
        "There are unsaved changes to the roster store. Do you want to save now?"
    ):
        return

    save_response = registry.save()

    if not save_response.success:
        display_response_failure(save_response)


def prompt_selection_from_list(
    list_data: list[Any],
    list_description: str,
    sort_key: Callable[[Any], Any] = lambda x: x,
    formatter: Callable[[Any], str] = lambda x: str(x),
) -> Any | None:
    """
    Lets the user pick one record (a course, an instructor) from a numbered list.

    Args:
        list_data (list[Any]): Candidate records.
        list_description (str): Plural noun used in the banner and messages, e.g. "Courses".
        sort_key (Callable[[Any], Any], optional): Display order of the records.
        formatter (Callable[[Any], str], optional): Renders one record as a line.

    Returns:
        The chosen record, or None if there is nothing to choose from or the user enters "0".
    """
    noun = list_description.lower()

    if not list_data:
        print(f"\nThere are no {noun}.")
        return None

    print(f"\nThere are {len(list_data)} {noun}.")

    sorted_list = sorted(list_data, key=sort_key)

    while True:
        print(f"\n{formatters.format_banner_text(list_description)}")

        display_results(sorted_list, True, formatter)

        choice = prompt_user_input("Select an option (0 to cancel):")

        if choice == "0":
            return None

        index = _parse_menu_index(choice, len(sorted_list))

        if index is not None:
            return sorted_list[index]

        print("\nInvalid selection. Please try again.")


# === often used messages ===


def returning_without_changes() -> None:
    print("\nReturning without changes.")


def returning_to(destination: str) -> None:
    print(f"\nReturning to {destination}.")


def caution_banner() -> None:
    print(f"\n{formatters.format_banner_text('CAUTION!')}")


def display_response_failure(response: Response, debug: bool = False) -> None:
    """Prints the error code and detail of a failed `Response`; successful responses print nothing."""
    if response.success:
        return

    error_label = (
        response.error.name if isinstance(response.error, Enum) else str(response.error)
    )

    print(f"\n[ERROR: {error_label}] {response.detail}")

    if debug and response.trace:
        print(f"\nDebug Trace: {response.trace}")
