"""Shared pytest fixtures and configuration."""

import logging
from collections.abc import Generator

import pytest

from studentdir.enrollment import CredentialHasher, EnrollmentService, MatriculationAllocator
from studentdir.store import Database, StudentRepository


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture(autouse=True)
def reset_studentdir_logger() -> Generator[None, None, None]:
    """Drop handlers left behind by setup_logging()."""
    yield
    logger = logging.getLogger("studentdir")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """In-memory database with tables created."""
    db = Database("sqlite:///:memory:")
    db.create_tables()
    yield db
    db.close()


@pytest.fixture
def repository(database: Database) -> StudentRepository:
    return StudentRepository(database)


@pytest.fixture
def hasher() -> CredentialHasher:
    """Cheapest bcrypt work factor, to keep tests fast."""
    return CredentialHasher(rounds=4)


@pytest.fixture
def allocator(repository: StudentRepository) -> MatriculationAllocator:
    return MatriculationAllocator(repository)


@pytest.fixture
def service(
    repository: StudentRepository,
    hasher: CredentialHasher,
    allocator: MatriculationAllocator,
) -> EnrollmentService:
    return EnrollmentService(repository=repository, hasher=hasher, allocator=allocator)
