"""Student registration endpoint."""

from fastapi import APIRouter, status

from studentreg.api.dependencies import RegistrationServiceDep
from studentreg.api.models import (
    ErrorResponse,
    RegistrationResponse,
    StudentCreate,
    student_to_response,
)
from studentreg.registration import StudentRegistrationInput

router = APIRouter(prefix="/students", tags=["students"])


@router.post(
    "",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def register_student(
    service: RegistrationServiceDep, payload: StudentCreate | None = None
) -> RegistrationResponse:
    """Register a new student.

    A request without a body counts as one with every field missing.
    """
    if payload is None:
        payload = StudentCreate()
    student = await service.register(
        StudentRegistrationInput(
            name=payload.name,
            email=payload.email,
            password=payload.password,
            course=payload.course,
        )
    )
    return RegistrationResponse(student=student_to_response(student))
