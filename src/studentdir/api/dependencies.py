"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends

from studentdir.enrollment import CredentialHasher, EnrollmentService
from studentdir.store import Database, StudentRepository

if TYPE_CHECKING:
    from studentdir.config import Settings

# Global instances (initialized on app startup)
_database: Database | None = None
_service: EnrollmentService | None = None


def init_enrollment_service(settings: Settings) -> EnrollmentService:
    """Open the database and build the global EnrollmentService."""
    global _database, _service  # noqa: PLW0603
    _database = Database(settings.database_url, pool_size=settings.pool_size)
    _database.create_tables()
    _service = EnrollmentService(
        repository=StudentRepository(_database),
        hasher=CredentialHasher(rounds=settings.bcrypt_rounds),
    )
    return _service


def close_enrollment_service() -> None:
    """Dispose of the global EnrollmentService and its database."""
    global _database, _service  # noqa: PLW0603
    if _database is not None:
        _database.close()
    _database = None
    _service = None


def get_enrollment_service() -> Generator[EnrollmentService, None, None]:
    """Dependency that provides the EnrollmentService instance."""
    if _service is None:
        raise RuntimeError(
            "EnrollmentService not initialized. Call init_enrollment_service() first."
        )
    yield _service


# Type alias for dependency injection
EnrollmentServiceDep = Annotated[EnrollmentService, Depends(get_enrollment_service)]
