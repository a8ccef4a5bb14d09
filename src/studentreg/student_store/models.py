"""SQLAlchemy models for the Student Record Store."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, String, func
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator[datetime]):
    """DateTime kept as naive UTC in SQLite and read back as aware UTC.

    SQLite's CURRENT_TIMESTAMP is UTC but carries no offset.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class StudentRecord(Base):
    """Student model - one row per registered student.

    ``email`` holds the normalized address and carries the UNIQUE constraint
    that decides concurrent registrations.
    """

    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    course: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        name: str,
        email: str,
        password_hash: str,
        id: str | None = None,
        course: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.name = name
        self.email = email
        self.password_hash = password_hash
        self.course = course

    def __repr__(self) -> str:
        return f"<StudentRecord(id={self.id!r}, email={self.email!r})>"
