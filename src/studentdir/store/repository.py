"""StudentRepository - persistence of student records."""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from studentdir.store.database import Database
from studentdir.store.exceptions import (
    AssignmentConflictError,
    DuplicateUsernameError,
    StorageError,
)
from studentdir.store.models import Student

logger = logging.getLogger(__name__)


def _violates(error: IntegrityError, column: str) -> bool:
    """Check whether an IntegrityError came from the unique constraint on a column.

    SQLite reports "UNIQUE constraint failed: students.<column>", PostgreSQL
    names the constraint "students_<column>_key".
    """
    message = str(error.orig)
    return f"students.{column}" in message or f"students_{column}_key" in message


class StudentRepository:
    """Owns student records in the relational store.

    Uniqueness and the one-way matriculation transition are enforced by the
    store itself, so the repository is safe to share across processes.
    """

    def __init__(self, database: Database) -> None:
        """Initialize the repository.

        Args:
            database: Database providing sessions. Tables must already exist.
        """
        self._db = database

    def create(self, username: str, password_hash: str, name: str) -> Student:
        """Insert a new, unmatriculated student.

        Args:
            username: Unique login name
            password_hash: Output of the credential hasher
            name: Display name

        Returns:
            The created Student

        Raises:
            DuplicateUsernameError: If the username is already taken
            StorageError: On any other persistence fault
        """
        session = self._db.get_session()
        try:
            student = Student(username=username, password_hash=password_hash, name=name)
            session.add(student)
            session.commit()
            session.refresh(student)
            return student
        except IntegrityError as e:
            session.rollback()
            if _violates(e, "username"):
                raise DuplicateUsernameError(
                    f"Student with username '{username}' already exists"
                ) from e
            raise StorageError(f"Failed to create student '{username}'") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Failed to create student '{username}'") from e
        finally:
            session.close()

    def find_by_username(self, username: str) -> Student | None:
        """Get a student by exact username, or None."""
        return self._find_one(Student.username == username)

    def find_by_matric_number(self, matric_number: str) -> Student | None:
        """Get a student by exact matric number, or None."""
        return self._find_one(Student.matric_number == matric_number)

    def list_all(self) -> list[Student]:
        """Get a snapshot of every student. Order is unspecified."""
        session = self._db.get_session()
        try:
            result = session.execute(select(Student))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError("Failed to list students") from e
        finally:
            session.close()

    def count_matriculated(self) -> int:
        """Count students that already hold a matric number."""
        session = self._db.get_session()
        try:
            stmt = (
                select(func.count())
                .select_from(Student)
                .where(Student.matric_number.is_not(None))
            )
            return session.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            raise StorageError("Failed to count matriculated students") from e
        finally:
            session.close()

    def assign_matric(self, username: str, matric_number: str) -> Student:
        """Set a student's matric number if they don't have one yet.

        The check and the write are a single conditional UPDATE, so two
        concurrent calls can never both succeed for the same student, and the
        unique constraint on matric_number stops two students sharing a number.

        Args:
            username: Target student's username
            matric_number: Number to assign

        Returns:
            The updated Student

        Raises:
            AssignmentConflictError: If the student doesn't exist, is already
                matriculated, or the number is already taken
            StorageError: On any other persistence fault
        """
        session = self._db.get_session()
        try:
            stmt = (
                update(Student)
                .where(Student.username == username)
                .where(Student.matric_number.is_(None))
                .values(matric_number=matric_number)
                .execution_options(synchronize_session=False)
            )
            result = session.execute(stmt)
            if result.rowcount != 1:
                session.rollback()
                raise AssignmentConflictError(
                    f"Cannot assign '{matric_number}' to '{username}': "
                    "student not found or already has matric number"
                )
            student = session.execute(
                select(Student).where(Student.username == username)
            ).scalar_one()
            session.commit()
            return student
        except IntegrityError as e:
            session.rollback()
            if _violates(e, "matric_number"):
                logger.info("Matric number %s already taken, assignment rejected", matric_number)
                raise AssignmentConflictError(
                    f"Matric number '{matric_number}' is already assigned"
                ) from e
            raise StorageError(f"Failed to assign matric number to '{username}'") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Failed to assign matric number to '{username}'") from e
        finally:
            session.close()

    def _find_one(self, criterion: object) -> Student | None:
        session = self._db.get_session()
        try:
            stmt = select(Student).where(criterion)  # type: ignore[arg-type]
            return session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError("Failed to look up student") from e
        finally:
            session.close()
