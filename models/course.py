# models/course.py

"""
Represents a course offered through the roster manager.

Each `Course` is identified by a short, unique course ID (e.g. "CS2103-FALL25") and carries a
display name and an archive flag. Archived courses stay in the registry but are hidden from an
instructor's active course list unless the instructor overrides the flag (see `Instructor.archived`).

Key behaviors:
- `validate_course_id_input()`: Enforces the allowed character set and length for course IDs.
- `validate_course_name_input()`: Enforces a non-blank name of bounded length.
- `to_dict()` / `from_dict()`: Used for serialization and persistence.
"""

from __future__ import annotations

import datetime
import re

COURSE_ID_MAX_LENGTH = 40
COURSE_NAME_MAX_LENGTH = 64


class Course:

    def __init__(
        self,
        id: str,
        name: str,
        archived: bool = False,
        created_at: str | None = None,
    ):
        self._id = Course.validate_course_id_input(id)
        # name uses setter method for validation
        self.name = name
        self._is_archived = archived
        self._created_at = created_at or datetime.datetime.now().isoformat()

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = Course.validate_course_name_input(name)

    @property
    def is_archived(self) -> bool:
        return self._is_archived

    @is_archived.setter
    def is_archived(self, archived: bool) -> None:
        self._is_archived = archived

    @property
    def created_at(self) -> str:
        return self._created_at

    @property
    def status(self) -> str:
        return "'ARCHIVED'" if self._is_archived else "'ACTIVE'"

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "name": self._name,
            "archived": self._is_archived,
            "created_at": self._created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Course:
        return cls(
            id=data["id"],
            name=data["name"],
            archived=data.get("archived", False),
            created_at=data.get("created_at"),
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Course({self._id}, {self._name}, {self._is_archived})"

    def __str__(self) -> str:
        return f"COURSE: {self._id} - {self._name}"

    # === data validators ===

    @staticmethod
    def validate_course_id_input(course_id: str) -> str:
        """
        Validates and normalizes a course ID.

        Strips surrounding whitespace, then ensures the ID:
            - Is between 1 and 40 characters long
            - Contains only letters, digits, and the characters `_ . $ -`

        Args:
            course_id: The input string to validate.

        Returns:
            The stripped course ID.

        Raises:
            ValueError: If the course ID is empty, too long, or contains disallowed characters.
        """
        course_id = course_id.strip()

        if not course_id:
            raise ValueError("Course ID cannot be empty.")

        if len(course_id) > COURSE_ID_MAX_LENGTH:
            raise ValueError(
                f"Course ID cannot be longer than {COURSE_ID_MAX_LENGTH} characters."
            )

        if not re.fullmatch(r"[a-zA-Z0-9_.$-]+", course_id):
            raise ValueError(
                "Course ID can contain only letters, digits, and the characters _ . $ -"
            )

        return course_id

    @staticmethod
    def validate_course_name_input(name: str) -> str:
        name = name.strip()

        if not name:
            raise ValueError("Course name cannot be empty.")

        if len(name) > COURSE_NAME_MAX_LENGTH:
            raise ValueError(
                f"Course name cannot be longer than {COURSE_NAME_MAX_LENGTH} characters."
            )

        return name
