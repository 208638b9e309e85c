"""SQLAlchemy models for the Student Store."""

from __future__ import annotations

import uuid
from datetime import datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from typing import Any

from sqlalchemy import DateTime, Index, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

MATRIC_NUMBER_MAX_LENGTH = 20


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Student(Base):
    """Student model - one registered account."""

    __tablename__ = "students"
    __table_args__ = (
        Index("idx_students_username", "username"),
        Index("idx_students_matric_number", "matric_number"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    matric_number: Mapped[str | None] = mapped_column(
        String(MATRIC_NUMBER_MAX_LENGTH), nullable=True, unique=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __init__(
        self,
        username: str,
        password_hash: str,
        name: str,
        id: str | None = None,
        matric_number: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.username = username
        self.password_hash = password_hash
        self.name = name
        self.matric_number = matric_number

    @property
    def is_matriculated(self) -> bool:
        """Whether a matric number has been assigned."""
        return self.matric_number is not None

    def __repr__(self) -> str:
        return (
            f"<Student(id={self.id!r}, username={self.username!r}, "
            f"matric_number={self.matric_number!r})>"
        )
