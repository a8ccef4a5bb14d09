"""REST API for student registration."""

from studentreg.api.app import create_app
from studentreg.api.models import (
    ErrorResponse,
    HealthResponse,
    RegistrationResponse,
    StudentCreate,
    StudentResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "RegistrationResponse",
    "StudentCreate",
    "StudentResponse",
    "create_app",
]
