# models/types.py

"""
Holds TypeVar definition for simplifying type checks.
"""

from typing import TypeVar

from .course import Course
from .instructor import Instructor
from .student import StudentRecord

RecordType = TypeVar("RecordType", Course, Instructor, StudentRecord)
