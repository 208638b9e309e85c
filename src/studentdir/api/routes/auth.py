"""Login endpoint."""

from fastapi import APIRouter

from studentdir.api.dependencies import EnrollmentServiceDep
from studentdir.api.models import (
    APIResponse,
    LoginRequest,
    StudentResponse,
    profile_to_response,
)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=APIResponse[StudentResponse])
def login(credentials: LoginRequest, service: EnrollmentServiceDep) -> APIResponse[StudentResponse]:
    """Check credentials and return the student's profile."""
    profile = service.login(credentials.username, credentials.password)
    return APIResponse(data=profile_to_response(profile))
