# models/instructor.py

"""
Represents an instructor's mapping to one course.

An instructor who teaches several courses has one `Instructor` record per course, all sharing
the same `google_id`. The per-course `archived` flag lets an instructor hide a course from their
own list without archiving it for co-instructors; when it is None, the course's own flag applies.
"""

from __future__ import annotations

from models.student import StudentRecord


class Instructor:

    def __init__(
        self,
        google_id: str,
        course_id: str,
        name: str,
        email: str,
        archived: bool | None = None,
        display_name: str = "Instructor",
    ):
        self._google_id = google_id
        self._course_id = course_id
        self._name = name
        self._email = StudentRecord.validate_email_input(email)
        self._archived = archived
        self._display_name = display_name

    # === properties ===

    @property
    def id(self) -> str:
        return f"{self._course_id}/{self._google_id}"

    @property
    def google_id(self) -> str:
        return self._google_id

    @property
    def course_id(self) -> str:
        return self._course_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> str:
        return self._email

    @property
    def archived(self) -> bool | None:
        return self._archived

    @archived.setter
    def archived(self, archived: bool | None) -> None:
        self._archived = archived

    @property
    def display_name(self) -> str:
        return self._display_name

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "google_id": self._google_id,
            "course_id": self._course_id,
            "name": self._name,
            "email": self._email,
            "archived": self._archived,
            "display_name": self._display_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Instructor:
        return cls(
            google_id=data["google_id"],
            course_id=data["course_id"],
            name=data["name"],
            email=data["email"],
            archived=data.get("archived"),
            display_name=data.get("display_name", "Instructor"),
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Instructor({self._google_id}, {self._course_id}, {self._name}, {self._email}, {self._archived})"

    def __str__(self) -> str:
        return f"INSTRUCTOR: {self._name} - (Course: {self._course_id})"
