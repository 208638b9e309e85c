"""Data models for the Enrollment module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studentdir.store import Student


@dataclass(frozen=True)
class StudentProfile:
    """Public view of a student. Never carries the password hash or internal id."""

    username: str
    name: str
    matric_number: str | None = None

    @classmethod
    def from_student(cls, student: Student) -> StudentProfile:
        return cls(
            username=student.username,
            name=student.name,
            matric_number=student.matric_number,
        )
