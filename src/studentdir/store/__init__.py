"""Student Store - Persistent storage for student records."""

from studentdir.store.database import Database, mask_url
from studentdir.store.exceptions import (
    AssignmentConflictError,
    DuplicateUsernameError,
    StorageError,
    StoreError,
)
from studentdir.store.models import Student
from studentdir.store.repository import StudentRepository

__all__ = [
    "AssignmentConflictError",
    "Database",
    "DuplicateUsernameError",
    "StorageError",
    "StoreError",
    "Student",
    "StudentRepository",
    "mask_url",
]
