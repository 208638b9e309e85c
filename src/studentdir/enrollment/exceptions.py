"""Exceptions for the Enrollment module."""


class EnrollmentError(Exception):
    """Base exception for enrollment errors."""

    reason = "Internal server error"


class StudentNotFoundError(EnrollmentError):
    """No student holds the requested matric number."""

    reason = "Student not found"


class InvalidCredentialsError(EnrollmentError):
    """Login failed.

    Unknown usernames and wrong passwords raise this with the same message.
    """

    reason = "Invalid credentials"

    def __init__(self) -> None:
        super().__init__(self.reason)


class HashingError(EnrollmentError):
    """The hashing algorithm rejected its input or a stored digest."""


class InternalFailureError(EnrollmentError):
    """Opaque infrastructure failure. Detail is logged, never surfaced."""

    def __init__(self) -> None:
        super().__init__(self.reason)
