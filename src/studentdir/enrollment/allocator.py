"""Matriculation number allocation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from studentdir.store import AssignmentConflictError

if TYPE_CHECKING:
    from studentdir.store import Student, StudentRepository

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "MAT"
DEFAULT_WIDTH = 5


class MatriculationAllocator:
    """Computes the next sequential matric number and assigns it to one student.

    The next number is derived from the count of already-matriculated students,
    so two concurrent callers can propose the same number. The repository's
    conditional update and unique constraint make sure at most one of them
    wins; the loser gets AssignmentConflictError. No retry happens here: a
    caller that retries must call allocate() again so the count is recomputed.
    """

    def __init__(
        self,
        repository: StudentRepository,
        prefix: str = DEFAULT_PREFIX,
        width: int = DEFAULT_WIDTH,
    ) -> None:
        """Initialize the allocator.

        Args:
            repository: StudentRepository used for counting and assignment.
            prefix: Literal prefix of every matric number.
            width: Zero-padded width of the numeric part.
        """
        self.repository = repository
        self.prefix = prefix
        self.width = width

    def format_token(self, sequence_number: int) -> str:
        """Format a sequence number, e.g. 4 -> "MAT00004"."""
        if sequence_number < 1:
            raise ValueError("Sequence numbers start at 1")
        return f"{self.prefix}{sequence_number:0{self.width}d}"

    def next_token(self) -> str:
        """Propose the number following the current matriculated count."""
        return self.format_token(self.repository.count_matriculated() + 1)

    def allocate(self, username: str) -> Student:
        """Assign the next matric number to a student.

        Args:
            username: Student to matriculate.

        Returns:
            The updated Student.

        Raises:
            AssignmentConflictError: If the student is missing, already
                matriculated, or the proposed number was taken concurrently.
        """
        token = self.next_token()
        try:
            student = self.repository.assign_matric(username, token)
        except AssignmentConflictError:
            logger.warning("Could not assign %s to %s", token, username)
            raise

        logger.info("Assigned matric number %s to %s", token, username)
        return student
