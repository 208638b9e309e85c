"""Pydantic models for REST API."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from studentdir.enrollment.hasher import MAX_PASSWORD_BYTES

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Student models


class StudentCreate(BaseModel):
    """Request model for registering a student."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_BYTES)
    name: str = Field(..., min_length=1, max_length=255)


class LoginRequest(BaseModel):
    """Request model for logging in."""

    username: str
    password: str


class StudentResponse(BaseModel):
    """Response model for a student's public profile."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    name: str
    matric_number: str | None = None


def profile_to_response(profile: Any) -> StudentResponse:
    """Convert a StudentProfile to StudentResponse."""
    return StudentResponse.model_validate(profile)


class HealthResponse(BaseModel):
    """Response model for the root health check."""

    status: str
    version: str
