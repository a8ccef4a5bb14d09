"""Data models for the Registration Service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 - used at runtime by dataclasses
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studentreg.student_store import StudentRecord


@dataclass(frozen=True)
class StudentRegistrationInput:
    """Caller-supplied registration data, before validation."""

    name: str | None
    email: str | None
    password: str | None = field(repr=False)
    course: str | None = None


@dataclass(frozen=True)
class RegisteredStudent:
    """Sanitized view of a stored student. Carries no credential."""

    id: str
    name: str
    email: str
    course: str | None
    created_at: datetime

    @classmethod
    def from_record(cls, record: StudentRecord) -> RegisteredStudent:
        """Copy the public fields of a StudentRecord."""
        return cls(
            id=record.id,
            name=record.name,
            email=record.email,
            course=record.course,
            created_at=record.created_at,
        )
