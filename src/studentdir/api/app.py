"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studentdir import __version__
from studentdir.api.dependencies import close_enrollment_service, init_enrollment_service
from studentdir.api.models import APIResponse, HealthResponse
from studentdir.api.routes import auth, students
from studentdir.config import Settings, load_settings
from studentdir.enrollment import (
    EnrollmentError,
    HashingError,
    InternalFailureError,
    InvalidCredentialsError,
    StudentNotFoundError,
)
from studentdir.store import (
    AssignmentConflictError,
    DuplicateUsernameError,
    StorageError,
    StoreError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"

# Every error the core can raise, with its HTTP status and public message
ERROR_RESPONSES: dict[type[Exception], tuple[int, str]] = {
    StudentNotFoundError: (status.HTTP_404_NOT_FOUND, StudentNotFoundError.reason),
    InvalidCredentialsError: (status.HTTP_401_UNAUTHORIZED, InvalidCredentialsError.reason),
    DuplicateUsernameError: (status.HTTP_409_CONFLICT, DuplicateUsernameError.reason),
    AssignmentConflictError: (status.HTTP_400_BAD_REQUEST, AssignmentConflictError.reason),
    InternalFailureError: (status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR),
    HashingError: (status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR),
    StorageError: (status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR),
    EnrollmentError: (status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR),
    StoreError: (status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR),
}


def _error_handler(
    status_code: int, message: str
) -> Callable[[Request, Exception], Awaitable[JSONResponse]]:
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, type(exc).__name__)
        return JSONResponse(
            status_code=status_code,
            content=APIResponse[None](data=None, error=message).model_dump(),
        )

    return handler


def install_error_handlers(app: FastAPI) -> None:
    """Register a JSON handler for every entry in ERROR_RESPONSES."""
    for exc_class, (status_code, message) in ERROR_RESPONSES.items():
        app.add_exception_handler(exc_class, _error_handler(status_code, message))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = app.state.settings if hasattr(app.state, "settings") else Settings()

    # Startup
    init_enrollment_service(settings)
    yield
    # Shutdown
    close_enrollment_service()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Without explicit settings (as when uvicorn calls this as a reloading
    factory) they are loaded from studentdir.yaml and the environment.
    """
    app = FastAPI(
        title="studentdir API",
        description="REST API for student registration and matriculation numbering",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings if settings is not None else load_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)

    @app.get("/", response_model=APIResponse[HealthResponse])
    def root() -> APIResponse[HealthResponse]:
        return APIResponse(data=HealthResponse(status="ok", version=__version__))

    app.include_router(students.router, prefix="/api/v1")
    app.include_router(auth.router, prefix="/api/v1")

    return app
