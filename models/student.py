# models/student.py

"""
Represents one student's enrollment in a course.

A `StudentRecord` is an immutable view: once loaded into the registry its fields are only read,
never reassigned. Corrections are made by replacing the record.

Includes functionality for:
- Validating and normalizing email input
- Deriving registration status from the linked Google ID
- Serializing to and from JSON-compatible dictionaries

The `section` and `team` labels are plain strings. A student with no explicit section carries
the reserved default section label (see `core.settings`), never None.
"""

from __future__ import annotations

import re
from enum import Enum


class RegistrationStatus(str, Enum):
    JOINED = "Joined"
    YET_TO_JOIN = "Yet to join"


class StudentRecord:

    def __init__(
        self,
        course_id: str,
        email: str,
        name: str,
        last_name: str,
        section: str,
        team: str,
        google_id: str | None = None,
        comments: str = "",
    ):
        self._course_id: str = course_id
        self._email: str = StudentRecord.validate_email_input(email)
        self._name: str = name
        self._last_name: str = last_name
        self._section: str = StudentRecord.validate_label_input(section, "Section")
        self._team: str = StudentRecord.validate_label_input(team, "Team")
        self._google_id: str | None = google_id
        self._comments: str = comments

    # === properties ===

    @property
    def id(self) -> str:
        return f"{self._course_id}/{self._email}"

    @property
    def course_id(self) -> str:
        return self._course_id

    @property
    def email(self) -> str:
        return self._email

    @property
    def name(self) -> str:
        return self._name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def section(self) -> str:
        return self._section

    @property
    def team(self) -> str:
        return self._team

    @property
    def google_id(self) -> str | None:
        return self._google_id

    @property
    def comments(self) -> str:
        return self._comments

    @property
    def registered(self) -> bool:
        return bool(self._google_id)

    @property
    def registration_status(self) -> RegistrationStatus:
        return (
            RegistrationStatus.JOINED
            if self.registered
            else RegistrationStatus.YET_TO_JOIN
        )

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "course_id": self._course_id,
            "email": self._email,
            "name": self._name,
            "last_name": self._last_name,
            "section": self._section,
            "team": self._team,
            "google_id": self._google_id,
            "comments": self._comments,
        }

    @classmethod
    def from_dict(cls, data: dict, default_section: str = "None") -> StudentRecord:
        return cls(
            course_id=data["course_id"],
            email=data["email"],
            name=data["name"],
            last_name=data.get("last_name", data["name"].split(" ")[-1]),
            section=(
                data["section"] if data.get("section") is not None else default_section
            ),
            team=data["team"],
            google_id=data.get("google_id"),
            comments=data.get("comments", ""),
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"StudentRecord({self._course_id}, {self._email}, {self._section}, {self._team}, {self._google_id})"

    def __str__(self) -> str:
        return f"STUDENT: {self._name} - (Team: {self._team}, Section: {self._section})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StudentRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self.id)

    # === data validators ===

    @staticmethod
    def validate_email_input(email: str) -> str:
        """
        Validates and normalizes a student email address.

        Normalizes the input by stripping whitespace and converting to lowercase.
        Ensures the email:
            - Contains exactly one '@' symbol
            - Has non-whitespace characters on both sides of the '@'
            - Contains at least one '.' after the '@' to separate the domain and TLD

        Args:
            email: The input email string to validate.

        Returns:
            A normalized, lowercase version of the email if valid.

        Raises:
            ValueError: If the email does not conform to the expected format.
        """
        email = email.strip().lower()
        if not re.fullmatch(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", email):
            raise ValueError(
                "Invalid input. Email must be a valid address with one @ and a domain."
            )
        return email

    @staticmethod
    def validate_label_input(label: str, kind: str) -> str:
        """
        Checks that a section or team label is a string.

        An empty string is a valid label. None is not: a student without a section carries the
        default section label instead.

        Raises:
            ValueError: If `label` is not a string.
        """
        if not isinstance(label, str):
            raise ValueError(f"{kind} label must be a string, got {label!r}.")
        return label
