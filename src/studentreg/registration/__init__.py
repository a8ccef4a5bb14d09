"""Registration Service - Validation, hashing and persistence of new students."""

from studentreg.registration.exceptions import (
    ConflictError,
    RegistrationError,
    ValidationError,
)
from studentreg.registration.models import RegisteredStudent, StudentRegistrationInput
from studentreg.registration.passwords import (
    create_password_context,
    hash_password,
    verify_password,
)
from studentreg.registration.service import RegistrationService, normalize_email

__all__ = [
    "ConflictError",
    "RegisteredStudent",
    "RegistrationError",
    "RegistrationService",
    "StudentRegistrationInput",
    "ValidationError",
    "create_password_context",
    "hash_password",
    "normalize_email",
    "verify_password",
]
