"""Pydantic models for the REST API."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

REGISTERED_MESSAGE = "Student registered"


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str


class StudentCreate(BaseModel):
    """Request model for registering a student.

    Fields are optional here so that blank and missing values get the same
    400 from the registration service.
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None
    course: str | None = None


class StudentResponse(BaseModel):
    """Public view of a registered student."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    course: str | None
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )


class RegistrationResponse(BaseModel):
    """Response model for a successful registration."""

    message: str = REGISTERED_MESSAGE
    student: StudentResponse


def student_to_response(student: Any) -> StudentResponse:
    """Convert a RegisteredStudent to StudentResponse."""
    return StudentResponse.model_validate(student)


class HealthResponse(BaseModel):
    """Liveness signal."""

    ok: bool
    time: datetime
