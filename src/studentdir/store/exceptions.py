"""Custom exceptions for the Student Store."""


class StoreError(Exception):
    """Base exception for Student Store errors."""

    reason = "Internal server error"


class StorageError(StoreError):
    """Persistence fault not covered by a domain error."""


class DuplicateUsernameError(StoreError):
    """Student with given username already exists."""

    reason = "Username already exists"


class AssignmentConflictError(StoreError):
    """Matric number could not be assigned.

    Raised when the student does not exist, already has a matric number, or
    the proposed number was taken by a concurrent assignment.
    """

    reason = "Student not found or already has matric number"
