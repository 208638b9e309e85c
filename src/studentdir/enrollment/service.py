"""EnrollmentService - registration, login and matriculation use cases."""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING

from studentdir.enrollment.allocator import MatriculationAllocator
from studentdir.enrollment.exceptions import (
    HashingError,
    InternalFailureError,
    InvalidCredentialsError,
    StudentNotFoundError,
)
from studentdir.enrollment.models import StudentProfile
from studentdir.logging import sanitize_for_log
from studentdir.store import AssignmentConflictError, StorageError

if TYPE_CHECKING:
    from studentdir.enrollment.hasher import CredentialHasher
    from studentdir.store import StudentRepository

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Entry point for everything the transport layer can ask of the core.

    Domain errors (DuplicateUsernameError, AssignmentConflictError,
    InvalidCredentialsError, StudentNotFoundError) reach the caller as-is.
    Storage and hashing faults are logged and collapsed to
    InternalFailureError so no storage detail leaks out.
    """

    def __init__(
        self,
        repository: StudentRepository,
        hasher: CredentialHasher,
        allocator: MatriculationAllocator | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            repository: StudentRepository for persistence.
            hasher: CredentialHasher for storing and checking passwords.
            allocator: MatriculationAllocator (defaults to "MAT" + 5 digits).
        """
        self.repository = repository
        self.hasher = hasher
        self.allocator = allocator if allocator is not None else MatriculationAllocator(repository)
        self._dummy_digest: str | None = None

    def register(self, username: str, password: str, name: str) -> StudentProfile:
        """Create a student account.

        Raises:
            DuplicateUsernameError: If the username is taken.
            InternalFailureError: On hashing or storage faults.
        """
        try:
            digest = self.hasher.hash(password)
            student = self.repository.create(username, digest, name)
        except (HashingError, StorageError) as e:
            raise self._internal_failure("register", e) from e

        logger.info("Registered student %s", username)
        return StudentProfile.from_student(student)

    def login(self, username: str, password: str) -> StudentProfile:
        """Check a username/password pair.

        Raises:
            InvalidCredentialsError: If the username is unknown or the password
                is wrong. Both cases are indistinguishable.
            InternalFailureError: On storage faults.
        """
        try:
            student = self.repository.find_by_username(username)
        except StorageError as e:
            raise self._internal_failure("login", e) from e

        if student is None:
            # Match the bcrypt cost of a wrong password for a known user.
            self.hasher.verify(password, self._unknown_user_digest())
            logger.warning("Login failed for %s", username)
            raise InvalidCredentialsError()

        try:
            verified = self.hasher.verify(password, student.password_hash)
        except HashingError:
            logger.error("Stored password digest for %s is malformed", username)
            verified = False

        if not verified:
            logger.warning("Login failed for %s", username)
            raise InvalidCredentialsError()

        logger.info("Student %s logged in", username)
        return StudentProfile.from_student(student)

    def assign_matriculation(self, username: str) -> StudentProfile:
        """Give a student the next matric number.

        Raises:
            AssignmentConflictError: If the student is missing or already has a
                number. The two cases are deliberately not distinguished.
            InternalFailureError: On storage faults.
        """
        try:
            student = self.allocator.allocate(username)
        except AssignmentConflictError as e:
            raise AssignmentConflictError(AssignmentConflictError.reason) from e
        except StorageError as e:
            raise self._internal_failure("assign_matriculation", e) from e

        return StudentProfile.from_student(student)

    def list_students(self) -> list[StudentProfile]:
        """List every student's public profile."""
        try:
            students = self.repository.list_all()
        except StorageError as e:
            raise self._internal_failure("list_students", e) from e

        return [StudentProfile.from_student(s) for s in students]

    def get_by_matric_number(self, matric_number: str) -> StudentProfile:
        """Look up a student by matric number.

        Raises:
            StudentNotFoundError: If no student holds that number.
            InternalFailureError: On storage faults.
        """
        try:
            student = self.repository.find_by_matric_number(matric_number)
        except StorageError as e:
            raise self._internal_failure("get_by_matric_number", e) from e

        if student is None:
            raise StudentNotFoundError(f"No student with matric number '{matric_number}'")
        return StudentProfile.from_student(student)

    def _unknown_user_digest(self) -> str:
        if self._dummy_digest is None:
            self._dummy_digest = self.hasher.hash(secrets.token_urlsafe(16))
        return self._dummy_digest

    @staticmethod
    def _internal_failure(operation: str, error: Exception) -> InternalFailureError:
        cause = error.__cause__
        detail = f"{error}: {cause}" if cause is not None else str(error)
        logger.error("%s failed: %s", operation, sanitize_for_log(detail))
        return InternalFailureError()
