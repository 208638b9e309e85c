"""Student registration, listing and matriculation endpoints."""

from fastapi import APIRouter, status

from studentdir.api.dependencies import EnrollmentServiceDep
from studentdir.api.models import (
    APIResponse,
    StudentCreate,
    StudentResponse,
    profile_to_response,
)

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=APIResponse[list[StudentResponse]])
def list_students(service: EnrollmentServiceDep) -> APIResponse[list[StudentResponse]]:
    """List all students."""
    profiles = service.list_students()
    return APIResponse(data=[profile_to_response(p) for p in profiles])


@router.post(
    "",
    response_model=APIResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_student(
    student: StudentCreate, service: EnrollmentServiceDep
) -> APIResponse[StudentResponse]:
    """Register a new student."""
    profile = service.register(
        username=student.username,
        password=student.password,
        name=student.name,
    )
    return APIResponse(data=profile_to_response(profile))


@router.get("/matric/{matric_number}", response_model=APIResponse[StudentResponse])
def get_student_by_matric(
    matric_number: str, service: EnrollmentServiceDep
) -> APIResponse[StudentResponse]:
    """Get a student by matric number."""
    profile = service.get_by_matric_number(matric_number)
    return APIResponse(data=profile_to_response(profile))


@router.post("/{username}/matric", response_model=APIResponse[StudentResponse])
def assign_matric_number(
    username: str, service: EnrollmentServiceDep
) -> APIResponse[StudentResponse]:
    """Assign the next matric number to a student."""
    profile = service.assign_matriculation(username)
    return APIResponse(data=profile_to_response(profile))
