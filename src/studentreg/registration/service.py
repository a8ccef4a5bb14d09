"""RegistrationService - Validates and persists new student registrations."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from studentreg.registration.exceptions import ConflictError, ValidationError
from studentreg.registration.models import RegisteredStudent, StudentRegistrationInput
from studentreg.registration.passwords import hash_password
from studentreg.student_store import DuplicateKeyError, StudentRecord

if TYPE_CHECKING:
    from passlib.context import CryptContext

    from studentreg.student_store import StudentStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

REQUIRED_FIELDS_MESSAGE = "name, email and password are required"
PASSWORD_TOO_SHORT_MESSAGE = "password too short"
PASSWORD_TOO_LONG_MESSAGE = "password too long"
EMAIL_TAKEN_MESSAGE = "email already registered"


def normalize_email(email: str) -> str:
    """Return the uniqueness key for an email address."""
    return email.strip().lower()


class RegistrationService:
    """Registers students against a StudentStore.

    Holds no state between calls. The duplicate lookup is a fast path only;
    the store's UNIQUE constraint settles concurrent registrations.
    """

    def __init__(
        self,
        store: StudentStore,
        password_context: CryptContext | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Open StudentStore handle.
            password_context: passlib context used for hashing. Defaults to
                bcrypt with the default cost factor.
        """
        self._store = store
        self._password_context = password_context

    async def register(self, data: StudentRegistrationInput) -> RegisteredStudent:
        """Register a new student.

        Args:
            data: Caller-supplied registration fields.

        Returns:
            The sanitized view of the stored student.

        Raises:
            ValidationError: If a required field is blank or the password is too
                short or too long.
            ConflictError: If the normalized email is already registered.
            StoreError: If the store cannot be read or written.
        """
        name = (data.name or "").strip()
        raw_email = data.email or ""
        password = data.password or ""
        if not name or not raw_email.strip() or not password.strip():
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(PASSWORD_TOO_SHORT_MESSAGE)
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(PASSWORD_TOO_LONG_MESSAGE)

        email = normalize_email(raw_email)

        existing = await asyncio.to_thread(self._store.find_by_normalized_email, email)
        if existing is not None:
            logger.info("Registration rejected, email already registered: %s", email)
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        course = data.course.strip() if data.course else None
        record = StudentRecord(
            name=name,
            email=email,
            password_hash=hash_password(password, self._password_context),
            course=course or None,
        )

        try:
            stored = await asyncio.to_thread(self._store.insert, record)
        except DuplicateKeyError as e:
            logger.info("Registration lost insert race for email: %s", email)
            raise ConflictError(EMAIL_TAKEN_MESSAGE) from e

        logger.info("Registered student %s (%s)", stored.id, stored.email)
        return RegisteredStudent.from_record(stored)
