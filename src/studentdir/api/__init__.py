"""REST API for studentdir."""

from studentdir.api.app import ERROR_RESPONSES, create_app, install_error_handlers
from studentdir.api.models import (
    APIResponse,
    LoginRequest,
    StudentCreate,
    StudentResponse,
)

__all__ = [
    "ERROR_RESPONSES",
    "APIResponse",
    "LoginRequest",
    "StudentCreate",
    "StudentResponse",
    "create_app",
    "install_error_handlers",
]
