# models/course_registry.py

"""
The CourseRegistry is the enrollment store and the "source of truth" for all roster data.

Courses, instructor mappings, and student enrollments are stored in dictionaries keyed by record id
and written to .json files upon saving. The registry knows nothing about sections or teams beyond
the labels on each `StudentRecord`; grouping is the job of `core.partitioner`.

Provides functions for creating, loading, and saving a registry directory, importing a single-file
data bundle, adding and removing records, and answering the roster queries used by `CoursesLogic`.
Includes session-scoped attributes like the save location and unsaved-changes tracking.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from typing import Any, Callable

from loguru import logger

from core.response import ErrorCode, Response
from core.settings import settings
from models.course import Course
from models.instructor import Instructor
from models.student import StudentRecord
from models.types import RecordType

IMPORT_PROGRESS_INTERVAL = 100


def student_sort_key(student: StudentRecord) -> tuple[str, str, str, str]:
    return (student.section, student.team, student.name, student.email)


class CourseRegistry:
    _tracking_maps: dict[type, str] = {
        Course: "courses",
        Instructor: "instructors",
        StudentRecord: "students",
    }

    def __init__(self, save_dir_path: str, default_section: str | None = None):
        self._courses: dict[str, Course] = {}
        self._instructors: dict[str, Instructor] = {}
        self._students: dict[str, StudentRecord] = {}
        self._dir_path: str = save_dir_path
        self._default_section: str = (
            default_section if default_section is not None else settings.default_section
        )
        self._unsaved_changes: bool = False

    # === properties ===

    # --- core data structures ---

    @property
    def courses(self) -> dict[str, Course]:
        return self._courses

    @property
    def instructors(self) -> dict[str, Instructor]:
        return self._instructors

    @property
    def students(self) -> dict[str, StudentRecord]:
        return self._students

    # --- session fields ---

    @property
    def path(self) -> str:
        return self._dir_path

    @path.setter
    def path(self, dir_path: str) -> None:
        self._dir_path = dir_path

    @property
    def default_section(self) -> str:
        return self._default_section

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved_changes

    # === public classmethods ===

    @classmethod
    def create(cls, save_dir_path: str) -> Response:
        """
        Creates, saves, and returns a new, empty `CourseRegistry`.

        Args:
            save_dir_path (str): The directory for writing and reading serialized data.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the registry was created and written to disk.
                    - False if the directory could not be written.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, None.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INTERNAL_ERROR` if the initial save fails.
                - status_code (int | None):
                    - 200 on success
                    - the `ERROR_STATUS_CODES` value of the error on failure (400 by default)
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "registry" (CourseRegistry): The new registry.

        Notes:
            - This method writes to disk with `registry.save()` before returning.
        """
        registry = cls(save_dir_path)
        save_response = registry.save(save_dir_path)

        if not save_response.success:
            return Response.fail(
                detail=f"Could not create registry: {save_response.detail}",
                error=save_response.error,
            )

        logger.info(f"Created new course registry at {save_dir_path}")

        return Response.succeed(data={"registry": registry})

    @classmethod
    def load(cls, save_dir_path: str) -> Response:
        """
        Loads previously serialized data from disk and returns a `CourseRegistry`.

        Args:
            save_dir_path (str): The directory where the registry data is stored.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if all files were read and every record was imported.
                    - False for JSON deserialization issues, invalid records, or missing files.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, None.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_INPUT` if JSONDecodeError raised.
                    - `ErrorCode.INVALID_FIELD_VALUE` if ValueError raised.
                    - `ErrorCode.MISSING_REQUIRED_FIELD` if KeyError or TypeError raised.
                    - `ErrorCode.NOT_FOUND` if a data file is missing.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - the `ERROR_STATUS_CODES` value of the error on failure (400 by default)
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "registry" (CourseRegistry): The loaded registry.

        Notes:
            - Courses are imported before instructors and students, since both reference a course.
            - The loaded registry starts with no unsaved changes.
        """

        def read_list(filename: str) -> list[Any]:
            with open(os.path.join(save_dir_path, filename), "r") as f:
                data = json.load(f)

            if not isinstance(data, list):
                raise ValueError(f"Expected {filename} to contain a list.")

            return data

        try:
            registry = cls(save_dir_path)

            registry.import_courses(read_list("courses.json"))
            registry.import_instructors(read_list("instructors.json"))
            registry.import_students(read_list("students.json"))

        except json.JSONDecodeError as e:
            return Response.fail(
                detail=f"Failed to parse JSON data: {e}",
                error=ErrorCode.INVALID_INPUT,
            )

        except FileNotFoundError as e:
            return Response.fail(
                detail=f"Missing registry file: {e}",
                error=ErrorCode.NOT_FOUND,
            )

        except ValueError as e:
            return Response.fail(
                detail=f"Invalid field value: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        except (KeyError, TypeError) as e:
            return Response.fail(
                detail=f"Missing required field: {e}",
                error=ErrorCode.MISSING_REQUIRED_FIELD,
            )

        except Exception as e:
            return Response.fail(
                detail=f"Unexpected error: {e}",
                error=ErrorCode.INTERNAL_ERROR,
            )

        else:
            registry._unsaved_changes = False

            logger.info(
                f"Loaded registry from {save_dir_path}: {len(registry.courses)} courses, "
                f"{len(registry.instructors)} instructors, {len(registry.students)} students"
            )

            return Response.succeed(data={"registry": registry})

    # === persistence and import ===

    def save(self, save_dir_path: str | None = None) -> Response:
        """
        Serializes and saves all records to disk in JSON format.

        Args:
            save_dir_path (str | None): Target directory. Defaults to `self.path`.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if every file was written.
                - detail (str | None):
                    - On success, "Registry successfully saved to disk."
                    - On failure, a description of the error.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_FIELD_VALUE` if a record is not JSON serializable.
                    - `ErrorCode.INTERNAL_ERROR` if OSError raised or for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - the `ERROR_STATUS_CODES` value of the error on failure (400 by default)
                - data (dict | None):
                    - Always None, this method does not return any payload.

        Notes:
            - The caller is responsible for ensuring that `save_dir_path` exists.
            - This intentionally overwrites existing data.
        """
        target_dir = save_dir_path or self._dir_path

        def write_json(filename: str, data: list) -> None:
            with open(os.path.join(target_dir, filename), "w") as f:
                json.dump(data, f, indent=2, sort_keys=True)

        try:
            write_json("courses.json", [c.to_dict() for c in self.courses.values()])
            write_json(
                "instructors.json", [i.to_dict() for i in self.instructors.values()]
            )
            write_json("students.json", [s.to_dict() for s in self.students.values()])

        except TypeError as e:
            return Response.fail(
                detail=f"Object not JSON serializable: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        except OSError as e:
            return Response.fail(
                detail=f"Failed to write data to disk: {e}",
                error=ErrorCode.INTERNAL_ERROR,
            )

        except Exception as e:
            return Response.fail(
                detail=f"Unexpected error: {e}",
                error=ErrorCode.INTERNAL_ERROR,
            )

        else:
            self._unsaved_changes = False

            logger.info(f"Registry saved to {target_dir}")

            return Response.succeed(detail="Registry successfully saved to disk.")

    def import_data_bundle(self, bundle_path: str) -> Response:
        """
        Imports courses, instructors, and students from a single JSON document.

        The document is an object with optional "courses", "instructors", and "students" lists,
        each holding serialized records. Import progress is logged every 100 records.

        Args:
            bundle_path (str): Path to the JSON document.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if every record in the bundle was imported.
                - detail (str | None): A summary of the import, or a description of the failure.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the file does not exist.
                    - `ErrorCode.INVALID_INPUT` if the file is not a JSON object.
                    - `ErrorCode.INVALID_FIELD_VALUE` if a record is invalid or conflicts with stored data.
                    - `ErrorCode.MISSING_REQUIRED_FIELD` if a record lacks a required key.
                - status_code (int | None):
                    - 200 on success
                    - the `ERROR_STATUS_CODES` value of the error on failure (400 by default)
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "imported" (dict[str, int]): Number of records imported per record type.

        Notes:
            - The import fails fast. Records added before the failing record remain in the registry.
        """
        try:
            with open(bundle_path, "r") as f:
                bundle = json.load(f)

            if not isinstance(bundle, dict):
                return Response.fail(
                    detail=f"Expected {bundle_path} to contain a JSON object.",
                    error=ErrorCode.INVALID_INPUT,
                )

            counts = {
                "courses": self.import_courses(bundle.get("courses", []), True),
                "instructors": self.import_instructors(
                    bundle.get("instructors", []), True
                ),
                "students": self.import_students(bundle.get("students", []), True),
            }

        except FileNotFoundError:
            return Response.fail(
                detail=f"No data bundle found at {bundle_path}.",
                error=ErrorCode.NOT_FOUND,
            )

        except json.JSONDecodeError as e:
            return Response.fail(
                detail=f"Failed to parse data bundle: {e}",
                error=ErrorCode.INVALID_INPUT,
            )

        except ValueError as e:
            return Response.fail(
                detail=f"Invalid field value: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        except (KeyError, TypeError) as e:
            return Response.fail(
                detail=f"Missing required field: {e}",
                error=ErrorCode.MISSING_REQUIRED_FIELD,
            )

        else:
            logger.info(f"Imported data bundle {bundle_path}: {counts}")

            return Response.succeed(
                detail=(
                    f"Imported {counts['courses']} courses, {counts['instructors']} instructors, "
                    f"and {counts['students']} students."
                ),
                data={"imported": counts},
            )

    def _import_records(
        self,
        data: list[dict[str, Any]],
        from_dict_fn: Callable[[dict[str, Any]], RecordType],
        add_fn: Callable[[RecordType], Response],
        record_name: str,
        log_progress: bool = False,
    ) -> int:
        """
        Deserializes and imports a list of records, failing fast on error.

        Args:
            data (list[dict[str, Any]]): Serialized records.
            from_dict_fn (Callable[[dict[str, Any]], RecordType]): Deserializer for one record.
            add_fn (Callable[[RecordType], Response]): Adds one record and returns a `Response`.
            record_name (str): A human-readable name used in messages (e.g., "student").
            log_progress (bool): If True, logs a progress line every 100 records.

        Returns:
            int: The number of records imported.

        Raises:
            ValueError: If a record is malformed or rejected by `add_fn`.
            RuntimeError: If `add_fn` reports an internal error.
        """
        count = 0

        for record_dict in data:
            try:
                record = from_dict_fn(record_dict)
            except (ValueError, TypeError, KeyError) as e:
                raise ValueError(
                    f"Failed to deserialize {record_name}: {record_dict} - {e}"
                )

            response = add_fn(record)

            if not response.success:
                message = (
                    f"Failed to import {record_name}: {record_dict} - {response.detail}"
                )
                if response.error is ErrorCode.INTERNAL_ERROR:
                    raise RuntimeError(message)
                raise ValueError(message)

            count += 1
            if log_progress and count % IMPORT_PROGRESS_INTERVAL == 0:
                logger.info(f"Imported {count} {record_name} records")

        return count

    def import_courses(self, course_data: list, log_progress: bool = False) -> int:
        return self._import_records(
            course_data, Course.from_dict, self.add_course, "course", log_progress
        )

    def import_instructors(
        self, instructor_data: list, log_progress: bool = False
    ) -> int:
        return self._import_records(
            instructor_data,
            Instructor.from_dict,
            self.add_instructor,
            "instructor",
            log_progress,
        )

    def import_students(self, student_data: list, log_progress: bool = False) -> int:
        return self._import_records(
            student_data,
            lambda d: StudentRecord.from_dict(d, self._default_section),
            self.add_student,
            "student",
            log_progress,
        )

    # === data accessors ===

    def get_records(
        self,
        dictionary: dict[str, RecordType],
        predicate: Callable[[RecordType], bool] | None = None,
    ) -> Response:
        """
        Fetches records from a dictionary, optionally filtered by a predicate.

        Returns:
            Response: On success, data["records"] holds the matching records (may be empty).
            Fails with `ErrorCode.INTERNAL_ERROR` only if the predicate raises.
        """
        try:
            if predicate:
                records = list(filter(predicate, dictionary.values()))
            else:
                records = list(dictionary.values())

        except Exception as e:
            return Response.fail(
                detail=f"Unexpected error: {e}",
                error=ErrorCode.INTERNAL_ERROR,
            )

        else:
            return Response.succeed(data={"records": records})

    # --- find record by id ---

    def find_record_by_id(
        self, record_id: str, dictionary: dict[str, RecordType]
    ) -> Response:
        """
        Finds a record by id within a given dictionary.

        Returns:
            Response: On success, data["record"] holds the match.
            Fails with `ErrorCode.NOT_FOUND` (404) if there is no such record.
        """
        record = dictionary.get(record_id)

        if record is None:
            return Response.not_found(f"No matching record found for {record_id}.")

        return Response.succeed(data={"record": record})

    def find_course_by_id(self, course_id: str) -> Response:
        return self.find_record_by_id(course_id, self.courses)

    def find_student(self, course_id: str, email: str) -> Response:
        return self.find_record_by_id(f"{course_id}/{email.strip().lower()}", self.students)

    def find_instructor(self, course_id: str, google_id: str) -> Response:
        return self.find_record_by_id(f"{course_id}/{google_id}", self.instructors)

    # --- roster queries ---

    def get_course(self, course_id: str) -> Course | None:
        return self._courses.get(course_id)

    def get_courses(self, course_ids: Iterable[str]) -> list[Course]:
        """Returns the stored courses for the given ids, in the given order, skipping unknown ids."""
        return [self._courses[cid] for cid in course_ids if cid in self._courses]

    def get_students_for_course(self, course_id: str) -> list[StudentRecord]:
        """
        Returns every student enrolled in a course in canonical order.

        Canonical order is ascending by section, team, name, then email, which satisfies the
        section/team sort contract of `RosterPartitioner`.
        """
        return sorted(
            (s for s in self._students.values() if s.course_id == course_id),
            key=student_sort_key,
        )

    def get_students_for_section(
        self, section: str, course_id: str
    ) -> list[StudentRecord]:
        return [
            s for s in self.get_students_for_course(course_id) if s.section == section
        ]

    def get_unregistered_students_for_course(
        self, course_id: str
    ) -> list[StudentRecord]:
        return [s for s in self.get_students_for_course(course_id) if not s.registered]

    def get_students_for_google_id(self, google_id: str) -> list[StudentRecord]:
        return [s for s in self._students.values() if s.google_id == google_id]

    def get_instructors_for_course(self, course_id: str) -> list[Instructor]:
        return [i for i in self._instructors.values() if i.course_id == course_id]

    def get_instructor_for_google_id(
        self, course_id: str, google_id: str
    ) -> Instructor | None:
        return self._instructors.get(f"{course_id}/{google_id}")

    def get_instructors_for_google_id(
        self, google_id: str, omit_archived: bool = False
    ) -> list[Instructor]:
        """
        Returns every course mapping of an instructor.

        Args:
            google_id (str): The instructor's Google ID.
            omit_archived (bool): If True, leaves out mappings whose course is archived for this
                instructor (the instructor's own flag, or the course's flag when unset).
        """
        instructors = [
            i for i in self._instructors.values() if i.google_id == google_id
        ]

        if omit_archived:
            instructors = [i for i in instructors if not self._is_archived_for(i)]

        return instructors

    # === data manipulators ===

    def _mark_dirty(self) -> None:
        self._unsaved_changes = True

    def _get_tracking_dict(self, record: RecordType) -> dict[str, RecordType]:
        """
        Return the internal tracking dictionary corresponding to the given record type.

        Raises:
            TypeError: If the record type is not recognized.
        """
        try:
            attr_name = self._tracking_maps[type(record)]

            return getattr(self, attr_name)

        except KeyError:
            raise TypeError(f"Unrecognized record type: {type(record)}")

    # --- generalized record operations ---

    def _add_record(self, record: RecordType) -> Response:
        """
        Adds a record to its tracking dictionary, refusing duplicates.

        Returns:
            Response: Fails with `ErrorCode.ALREADY_EXISTS` (409) if a record with the same id is stored.
            On success, data["record"] holds the added record.

        Notes:
            - Marks the registry dirty on success.
        """
        dictionary = self._get_tracking_dict(record)

        if record.id in dictionary:
            return Response.already_exists(
                f"A {type(record).__name__} with id '{record.id}' already exists."
            )

        dictionary[record.id] = record
        self._mark_dirty()

        return Response.succeed(
            detail="Record successfully added to the registry.",
            data={"record": record},
        )

    def _remove_record(self, record: RecordType) -> Response:
        """
        Removes a record from its tracking dictionary.

        Returns:
            Response: Fails with `ErrorCode.NOT_FOUND` (404) if the record is not stored.

        Notes:
            - Marks the registry dirty on success.
        """
        dictionary = self._get_tracking_dict(record)

        try:
            del dictionary[record.id]

        except KeyError:
            return Response.not_found(
                f"No matching record could be found for deletion: {record}."
            )

        else:
            self._mark_dirty()

            return Response.succeed(
                detail="Record successfully removed from the registry."
            )

    # --- course manipulation ---

    def add_course(self, course: Course) -> Response:
        return self._add_record(course)

    def remove_course(self, course: Course) -> Response:
        """
        Removes a `Course` record only.

        Notes:
            - Enrollments and instructor mappings are left untouched; use
              `CoursesLogic.delete_course_cascade()` to remove a course with its roster.
        """
        return self._remove_record(course)

    def update_course(self, course: Course) -> Response:
        """
        Replaces the stored `Course` that has the same id.

        Returns:
            Response: Fails with `ErrorCode.NOT_FOUND` (404) if no course has that id.
            On success, data["record"] holds the stored course.
        """
        if course.id not in self._courses:
            return Response.not_found(
                f"Trying to update a course that does not exist: {course.id}"
            )

        self._courses[course.id] = course
        self._mark_dirty()

        return Response.succeed(
            detail="Course successfully updated.", data={"record": course}
        )

    # --- enrollment manipulation ---

    def add_student(self, student: StudentRecord) -> Response:
        """
        Enrolls a student in an existing course.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the student was enrolled.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the course does not exist.
                    - `ErrorCode.ALREADY_EXISTS` if the email is already enrolled in the course.
                - data (dict | None):
                    - On success, "record" (StudentRecord): The enrolled student.
        """
        if student.course_id not in self._courses:
            return Response.not_found(f"Course does not exist: {student.course_id}")

        return self._add_record(student)

    def remove_student(self, student: StudentRecord) -> Response:
        return self._remove_record(student)

    def add_instructor(self, instructor: Instructor) -> Response:
        if instructor.course_id not in self._courses:
            return Response.not_found(f"Course does not exist: {instructor.course_id}")

        return self._add_record(instructor)

    def remove_instructor(self, instructor: Instructor) -> Response:
        return self._remove_record(instructor)

    def delete_students_for_course(self, course_id: str) -> int:
        doomed = [sid for sid, s in self._students.items() if s.course_id == course_id]

        for student_id in doomed:
            del self._students[student_id]

        if doomed:
            self._mark_dirty()

        return len(doomed)

    def delete_instructors_for_course(self, course_id: str) -> int:
        doomed = [
            iid for iid, i in self._instructors.items() if i.course_id == course_id
        ]

        for instructor_id in doomed:
            del self._instructors[instructor_id]

        if doomed:
            self._mark_dirty()

        return len(doomed)

    # === helper methods ===

    def _is_archived_for(self, instructor: Instructor) -> bool:
        if instructor.archived is not None:
            return instructor.archived

        course = self._courses.get(instructor.course_id)

        return course.is_archived if course is not None else False

    # === dunder methods ===

    def __repr__(self) -> str:
        return (
            f"CourseRegistry({self._dir_path}, {len(self._courses)} courses, "
            f"{len(self._students)} students)"
        )
