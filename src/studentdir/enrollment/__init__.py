"""Enrollment - registration, login and matriculation numbering."""

from studentdir.enrollment.allocator import MatriculationAllocator
from studentdir.enrollment.exceptions import (
    EnrollmentError,
    HashingError,
    InternalFailureError,
    InvalidCredentialsError,
    StudentNotFoundError,
)
from studentdir.enrollment.hasher import CredentialHasher
from studentdir.enrollment.models import StudentProfile
from studentdir.enrollment.service import EnrollmentService

__all__ = [
    "CredentialHasher",
    "EnrollmentError",
    "EnrollmentService",
    "HashingError",
    "InternalFailureError",
    "InvalidCredentialsError",
    "MatriculationAllocator",
    "StudentNotFoundError",
    "StudentProfile",
]
