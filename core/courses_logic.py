# core/courses_logic.py

"""
Course-level operations over a `CourseRegistry`.

`CoursesLogic` answers the questions the rest of the program asks about a course: who is enrolled,
how the roster splits into sections and teams, which courses an instructor or student belongs to,
and whether a course is archived. It also creates, updates, archives, and deletes courses.

The registry is passed in at construction; `CoursesLogic` never reaches for a global store.

Every lookup that depends on a course existing returns a `Response`. A missing course yields
`Response.not_found()` (status 404); callers branch on the response instead of catching
exceptions. Predicates that cannot fail (`is_course_present()`, `is_sample_course()`, ...)
return plain values.
"""

import re

from loguru import logger

from core.partitioner import RosterPartitioner
from core.response import ErrorCode, Response
from core.roster_export import build_student_list_csv
from models.course import Course
from models.course_registry import CourseRegistry
from models.instructor import Instructor
from models.roster import CourseDetails, RosterStats, SectionGroup

SAMPLE_COURSE_ID_PATTERN = re.compile(r"[a-zA-Z0-9_.$-]+-demo\d*")


class CoursesLogic:

    def __init__(
        self,
        registry: CourseRegistry,
        partitioner: RosterPartitioner | None = None,
    ):
        self._registry = registry
        self._partitioner = partitioner or RosterPartitioner(registry.default_section)

    @property
    def registry(self) -> CourseRegistry:
        return self._registry

    @property
    def partitioner(self) -> RosterPartitioner:
        return self._partitioner

    # === course lifecycle ===

    def create_course(self, course_id: str, course_name: str) -> Response:
        """
        Creates a new, empty course.

        Args:
            course_id (str): The unique course ID.
            course_name (str): The display name.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the course was created.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_FIELD_VALUE` if the id or name fails validation.
                    - `ErrorCode.ALREADY_EXISTS` if a course with that id exists.
                - status_code (int | None):
                    - 200 on success
                    - 400 for invalid values, 409 for duplicates
                - data (dict | None):
                    - On success, "course" (Course): The new course.
        """
        try:
            course = Course(course_id, course_name)

        except ValueError as e:
            return Response.fail(
                detail=f"Invalid field value: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        add_response = self._registry.add_course(course)

        if not add_response.success:
            return add_response

        logger.info(f"Created course {course.id}")

        return Response.succeed(
            detail=f"Course {course.id} successfully created.",
            data={"course": course},
        )

    def create_course_and_instructor(
        self,
        instructor_google_id: str,
        course_id: str,
        course_name: str,
        instructor_name: str,
        instructor_email: str,
    ) -> Response:
        """
        Creates a course together with its first instructor.

        Returns:
            Response: On success, data holds "course" and "instructor".
            Fails with the `create_course()` errors, or with `ErrorCode.INVALID_FIELD_VALUE` /
            `ErrorCode.ALREADY_EXISTS` if the instructor cannot be added.

        Notes:
            - If the instructor cannot be added, the course is deleted again so no course is left without an instructor.
        """
        course_response = self.create_course(course_id, course_name)

        if not course_response.success:
            return course_response

        course = course_response.data["course"]

        try:
            instructor = Instructor(
                google_id=instructor_google_id,
                course_id=course.id,
                name=instructor_name,
                email=instructor_email,
            )
            instructor_response = self._registry.add_instructor(instructor)

        except ValueError as e:
            instructor_response = Response.fail(
                detail=f"Invalid field value: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        if not instructor_response.success:
            self._registry.remove_course(course)
            logger.warning(
                f"Rolled back course {course.id}: could not create instructor "
                f"{instructor_google_id} ({instructor_response.detail})"
            )
            return instructor_response

        return Response.succeed(
            detail=f"Course {course.id} successfully created.",
            data={"course": course, "instructor": instructor},
        )

    def get_course(self, course_id: str) -> Course | None:
        return self._registry.get_course(course_id)

    def is_course_present(self, course_id: str) -> bool:
        return self._registry.get_course(course_id) is not None

    def is_sample_course(self, course_id: str) -> bool:
        return SAMPLE_COURSE_ID_PATTERN.fullmatch(course_id) is not None

    def verify_course_is_present(self, course_id: str) -> Response:
        """
        Checks that a course exists.

        Returns:
            Response: On success, data["course"] holds the course.
            Fails with `ErrorCode.NOT_FOUND` (404) if it does not exist.
        """
        course = self._registry.get_course(course_id)

        if course is None:
            return Response.not_found(f"Course does not exist: {course_id}")

        return Response.succeed(data={"course": course})

    def update_course(self, course: Course) -> Response:
        return self._registry.update_course(course)

    def set_archive_status_of_course(self, course_id: str, archived: bool) -> Response:
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        course = verify_response.data["course"]
        course.is_archived = archived
        update_response = self._registry.update_course(course)

        if update_response.success:
            logger.info(f"Set archive status of {course_id} to {archived}")

        return update_response

    def delete_course_cascade(self, course_id: str) -> Response:
        """
        Deletes a course along with all of its enrollments and instructor mappings.

        Returns:
            Response: On success, data["deleted"] maps "students" and "instructors" to the number of records removed.
            Fails with `ErrorCode.NOT_FOUND` (404) if the course does not exist.
        """
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        deleted = {
            "students": self._registry.delete_students_for_course(course_id),
            "instructors": self._registry.delete_instructors_for_course(course_id),
        }
        remove_response = self._registry.remove_course(verify_response.data["course"])

        if not remove_response.success:
            return remove_response

        logger.info(f"Deleted course {course_id} with {deleted}")

        return Response.succeed(
            detail=f"Course {course_id} and its roster were deleted.",
            data={"deleted": deleted},
        )

    # === roster views ===

    def get_course_summary(self, course_id: str) -> Response:
        """
        Builds the partitioned roster of a course with statistics.

        Args:
            course_id (str): The course to summarize.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the course exists.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the course does not exist.
                - status_code (int | None):
                    - 200 on success
                    - 404 if the course does not exist
                - data (dict | None):
                    - On success, "details" (CourseDetails): The course, its sections, and its `RosterStats`.

        Notes:
            - This method is read-only.
        """
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        return Response.succeed(
            data={"details": self._build_course_details(verify_response.data["course"])}
        )

    def get_course_details(self, course_id: str) -> Response:
        return self.get_course_summary(course_id)

    def get_course_summary_without_stats(self, course_id: str) -> Response:
        """
        Returns a `CourseDetails` holding only the course: no sections, zero stats.

        Fails with `ErrorCode.NOT_FOUND` (404) if the course does not exist.
        """
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        return Response.succeed(
            data={"details": CourseDetails(verify_response.data["course"])}
        )

    def get_sections_for_course(
        self, course_id: str, with_stats: bool = False
    ) -> Response:
        """
        Partitions a course's roster into sections and teams.

        Returns:
            Response: On success, data["sections"] holds the `SectionGroup` list, and
            data["stats"] holds a `RosterStats` when `with_stats` is True.
            Fails with `ErrorCode.NOT_FOUND` (404) if the course does not exist.
        """
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        students = self._registry.get_students_for_course(course_id)

        if not with_stats:
            return Response.succeed(
                data={"sections": self._partitioner.partition_by_section(students)}
            )

        stats = RosterStats()
        sections = self._partitioner.partition_by_section(students, stats)

        return Response.succeed(data={"sections": sections, "stats": stats})

    def get_section_for_course(self, section_name: str, course_id: str) -> Response:
        """
        Builds a single section of a course, grouped into teams.

        Returns:
            Response: On success, data["section"] holds a `SectionGroup`. The group has no teams
            if no student is in that section.
            Fails with `ErrorCode.NOT_FOUND` (404) if the course does not exist.
        """
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        students = self._registry.get_students_for_section(section_name, course_id)

        section = SectionGroup(section_name)
        for team in self._partitioner.partition_by_team(students):
            section.add_team(team)

        return Response.succeed(data={"section": section})

    def get_teams_for_course(self, course_id: str) -> Response:
        """
        Groups a course's roster into teams, ignoring sections.

        Returns:
            Response: On success, data["teams"] holds the `TeamGroup` list.
            Fails with `ErrorCode.NOT_FOUND` (404) if the course does not exist.
        """
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        students = self._registry.get_students_for_course(course_id)

        return Response.succeed(
            data={"teams": self._partitioner.partition_by_team(students)}
        )

    def get_section_names_for_course(self, course_id: str) -> Response:
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        students = self._registry.get_students_for_course(course_id)

        return Response.succeed(
            data={"section_names": self._partitioner.list_section_names(students)}
        )

    def get_number_of_sections(self, course_id: str) -> Response:
        names_response = self.get_section_names_for_course(course_id)

        if not names_response.success:
            return names_response

        return Response.succeed(data={"count": len(names_response.data["section_names"])})

    def get_number_of_teams(self, course_id: str) -> Response:
        """
        Counts the distinct team labels in a course.

        Notes:
            - Teams with the same label in different sections count once.
        """
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        students = self._registry.get_students_for_course(course_id)

        return Response.succeed(data={"count": len({s.team for s in students})})

    def get_total_enrolled_in_course(self, course_id: str) -> Response:
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        return Response.succeed(
            data={"count": len(self._registry.get_students_for_course(course_id))}
        )

    def get_total_unregistered_in_course(self, course_id: str) -> Response:
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        unregistered = self._registry.get_unregistered_students_for_course(course_id)

        return Response.succeed(data={"count": len(unregistered)})

    def has_indicated_sections(self, course_id: str) -> Response:
        """
        Checks whether any student of the course is in a section other than the default section.

        Returns:
            Response: On success, data["has_sections"] (bool).
            Fails with `ErrorCode.NOT_FOUND` (404) if the course does not exist.
        """
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        students = self._registry.get_students_for_course(course_id)

        return Response.succeed(
            data={"has_sections": self._partitioner.has_indicated_sections(students)}
        )

    # === export ===

    def get_course_student_list_as_csv(
        self, course_id: str, instructor_google_id: str
    ) -> Response:
        """
        Exports the student list of a course as CSV text for one of its instructors.

        Args:
            course_id (str): The course to export.
            instructor_google_id (str): The requesting instructor.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the CSV was built.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the course does not exist or the instructor is not mapped to it.
                - status_code (int | None):
                    - 200 on success
                    - 404 on failure
                - data (dict | None):
                    - On success, "csv" (str): The CSV text (see `core.roster_export`).
        """
        verify_response = self.verify_course_is_present(course_id)

        if not verify_response.success:
            return verify_response

        if self._registry.get_instructor_for_google_id(course_id, instructor_google_id) is None:
            return Response.not_found(
                f"Instructor {instructor_google_id} is not an instructor of {course_id}"
            )

        course = verify_response.data["course"]
        students = self._registry.get_students_for_course(course_id)
        sections = self._partitioner.partition_by_section(students)
        include_section = self._partitioner.has_indicated_sections(students)

        return Response.succeed(
            data={"csv": build_student_list_csv(course, sections, include_section)}
        )

    # === instructor and student views ===

    def get_courses_for_student_account(self, google_id: str) -> Response:
        """
        Lists the courses a student account is enrolled in.

        Returns:
            Response: On success, data["courses"] holds the `Course` list.
            Fails with `ErrorCode.NOT_FOUND` (404) if no enrollment carries that Google ID.
        """
        students = self._registry.get_students_for_google_id(google_id)

        if not students:
            return Response.not_found(f"Student with Google ID {google_id} does not exist")

        course_ids = [s.course_id for s in students]

        return Response.succeed(data={"courses": self._registry.get_courses(course_ids)})

    def get_courses_for_instructor(
        self, google_id: str, omit_archived: bool = False
    ) -> list[Course]:
        """
        Lists the courses an instructor is mapped to.

        Notes:
            - Mappings that point to a deleted course are skipped and logged.
        """
        instructors = self._registry.get_instructors_for_google_id(
            google_id, omit_archived
        )

        return self._courses_for_instructors(instructors)

    def get_course_summaries_for_instructor(
        self, google_id: str, omit_archived: bool = False
    ) -> Response:
        """
        Builds a `CourseDetails`, with sections and stats, for every course of an instructor.

        Returns:
            Response: On success, data["summaries"] maps course id to `CourseDetails`.
            Fails with `ErrorCode.NOT_FOUND` (404) if the instructor has no course mappings at all.
        """
        verify_response = self._verify_instructor_exists(google_id)

        if not verify_response.success:
            return verify_response

        courses = self.get_courses_for_instructor(google_id, omit_archived)

        return Response.succeed(
            data={
                "summaries": {
                    course.id: self._build_course_details(course) for course in courses
                }
            }
        )

    def get_course_summaries_without_stats_for_instructor(
        self, google_id: str, omit_archived: bool = False
    ) -> Response:
        verify_response = self._verify_instructor_exists(google_id)

        if not verify_response.success:
            return verify_response

        courses = self.get_courses_for_instructor(google_id, omit_archived)

        return Response.succeed(
            data={"summaries": {course.id: CourseDetails(course) for course in courses}}
        )

    def get_archived_courses_for_instructor(self, google_id: str) -> list[Course]:
        archived = []

        for instructor in self._registry.get_instructors_for_google_id(google_id):
            course = self._registry.get_course(instructor.course_id)

            if course is None:
                logger.warning(
                    f"Course was deleted but the instructor still exists: {instructor!r}"
                )
            elif self._is_archived(course, instructor):
                archived.append(course)

        return archived

    def is_course_archived(self, course_id: str, instructor_google_id: str) -> bool:
        """
        Checks whether a course is archived from one instructor's point of view.

        The instructor's own archive flag wins when it is set; otherwise the course's flag applies.
        Unknown courses are reported as not archived.
        """
        course = self._registry.get_course(course_id)

        if course is None:
            return False

        instructor = self._registry.get_instructor_for_google_id(
            course_id, instructor_google_id
        )

        return self._is_archived(course, instructor)

    def get_course_id_to_section_names_map(
        self, courses: list[Course]
    ) -> dict[str, list[str]]:
        return {
            course.id: self._partitioner.list_section_names(
                self._registry.get_students_for_course(course.id)
            )
            for course in courses
        }

    def extract_active_courses(
        self, details_list: list[CourseDetails], google_id: str
    ) -> list[CourseDetails]:
        return [
            d for d in details_list if not self.is_course_archived(d.course.id, google_id)
        ]

    def extract_archived_courses(
        self, details_list: list[CourseDetails], google_id: str
    ) -> list[CourseDetails]:
        return [
            d for d in details_list if self.is_course_archived(d.course.id, google_id)
        ]

    def get_archived_course_ids(
        self,
        courses: list[Course],
        instructors_for_courses: dict[str, Instructor],
    ) -> list[str]:
        return [
            course.id
            for course in courses
            if self._is_archived(course, instructors_for_courses.get(course.id))
        ]

    # === helper methods ===

    def _build_course_details(self, course: Course) -> CourseDetails:
        stats = RosterStats()
        students = self._registry.get_students_for_course(course.id)
        sections = self._partitioner.partition_by_section(students, stats)

        return CourseDetails(course, sections, stats)

    def _verify_instructor_exists(self, google_id: str) -> Response:
        if not self._registry.get_instructors_for_google_id(google_id):
            return Response.not_found(f"Instructor does not exist: {google_id}")

        return Response.succeed()

    def _courses_for_instructors(self, instructors: list[Instructor]) -> list[Course]:
        course_ids = [i.course_id for i in instructors]
        courses = self._registry.get_courses(course_ids)

        if len(courses) < len(course_ids):
            found = {c.id for c in courses}
            missing = [cid for cid in course_ids if cid not in found]
            logger.error(
                f"Course(s) was deleted but the instructor still exists: {missing}"
            )

        return courses

    @staticmethod
    def _is_archived(course: Course, instructor: Instructor | None) -> bool:
        if instructor is not None and instructor.archived is not None:
            return instructor.archived

        return course.is_archived
