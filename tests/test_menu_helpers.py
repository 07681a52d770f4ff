# tests/test_menu_helpers.py

import builtins

import pytest

from cli import menu_helpers as helpers
from core.response import ErrorCode, Response
from models.course import Course


@pytest.fixture
def answers(monkeypatch):
    """Feeds queued answers to `input()`."""
    queue = []

    def fake_input(prompt=""):
        return queue.pop(0)

    monkeypatch.setattr(builtins, "input", fake_input)
    return queue


def test_display_menu_returns_selected_action(answers):
    def add_course():
        pass

    answers.extend(["7", "abc", "1"])

    assert helpers.display_menu("Menu", [("Add Course", add_course)]) is add_course


def test_display_menu_zero_exits(answers):
    answers.append("0")

    assert helpers.display_menu("Menu", [("Add", print)]) is helpers.MenuSignal.EXIT


def test_confirm_action_retries_until_valid(answers, capsys):
    answers.extend(["maybe", "YES"])

    assert helpers.confirm_action("Delete?")
    assert "Invalid selection" in capsys.readouterr().out


def test_prompt_variants(answers):
    answers.extend(["  ", "", "CS2103 "])

    assert helpers.prompt_user_input_or_cancel("Course ID") is helpers.MenuSignal.CANCEL
    assert helpers.prompt_user_input_or_none("Directory") is None
    assert helpers.prompt_user_input("Course ID") == "CS2103"


def test_prompt_selection_from_list(answers):
    courses = [Course("CS2103", "SE"), Course("CS1010", "PM")]
    answers.extend(["-1", "1"])

    selected = helpers.prompt_selection_from_list(
        courses, "Courses", sort_key=lambda c: c.id
    )

    assert selected.id == "CS1010"


def test_prompt_selection_from_empty_list(capsys):
    assert helpers.prompt_selection_from_list([], "Courses") is None
    assert "There are no courses." in capsys.readouterr().out


def test_prompt_if_dirty_saves_on_confirm(answers, sample_registry, sample_course):
    sample_registry.add_course(sample_course)
    answers.append("y")

    helpers.prompt_if_dirty(sample_registry)

    assert not sample_registry.has_unsaved_changes


def test_prompt_if_dirty_is_silent_when_clean(sample_registry):
    helpers.prompt_if_dirty(sample_registry)

    assert not sample_registry.has_unsaved_changes


def test_display_response_failure(capsys):
    helpers.display_response_failure(
        Response.fail(detail="Course does not exist", error=ErrorCode.NOT_FOUND)
    )
    helpers.display_response_failure(Response.succeed(detail="ignored"))

    assert capsys.readouterr().out == "\n[ERROR: NOT_FOUND] Course does not exist\n"
