"""StudentStore - Main API for Student Record Store operations."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from studentreg.student_store.database import open_student_database
from studentreg.student_store.exceptions import DuplicateKeyError, StoreError
from studentreg.student_store.models import StudentRecord

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MARKER = "UNIQUE constraint failed: students.email"


class StudentStore:
    """Main API for Student Record Store operations.

    Lookup by normalized email and append-only insert. The UNIQUE constraint
    on ``students.email`` is the authoritative duplicate guard.
    """

    def __init__(self, db_path: str = "studentreg.db") -> None:
        """Open the store and create tables if they don't exist.

        Args:
            db_path: Path to SQLite database file

        Raises:
            StoreError: If the database cannot be opened
        """
        self._db_path = db_path
        self._engine = open_student_database(db_path)
        self._sessions: sessionmaker[Session] = sessionmaker(
            bind=self._engine, expire_on_commit=False
        )
        self._closed = False

    @property
    def db_path(self) -> str:
        return self._db_path

    def close(self) -> None:
        """Close the database connection."""
        if not self._closed:
            self._engine.dispose()
            self._closed = True
            logger.debug("Student store closed")

    def _session(self) -> Session:
        if self._closed:
            raise StoreError("Student store is closed")
        return self._sessions()

    def find_by_normalized_email(self, email: str) -> StudentRecord | None:
        """Find a student by normalized email.

        Args:
            email: Email already trimmed and lower-cased

        Returns:
            The StudentRecord, or None if no student uses this email

        Raises:
            StoreError: If the database cannot be queried
        """
        session = self._session()
        try:
            stmt = select(StudentRecord).where(StudentRecord.email == email)
            return session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError("Student lookup failed") from e
        finally:
            session.close()

    def insert(self, record: StudentRecord) -> StudentRecord:
        """Persist a new student.

        Args:
            record: Unsaved StudentRecord with a normalized email

        Returns:
            The stored record with its id and created_at populated

        Raises:
            DuplicateKeyError: If the email is already taken
            StoreError: If the write fails for any other reason
        """
        session = self._session()
        try:
            session.add(record)
            session.commit()
            session.refresh(record)
            return record
        except IntegrityError as e:
            session.rollback()
            if DUPLICATE_EMAIL_MARKER in str(e.orig):
                raise DuplicateKeyError(
                    f"Student with email '{record.email}' already exists"
                ) from e
            raise StoreError("Student insert failed") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError("Student insert failed") from e
        finally:
            session.close()

    def get_student(self, student_id: str) -> StudentRecord | None:
        """Get student by ID.

        Raises:
            StoreError: If the database cannot be queried
        """
        session = self._session()
        try:
            return session.get(StudentRecord, student_id)
        except SQLAlchemyError as e:
            raise StoreError("Student lookup failed") from e
        finally:
            session.close()

    def count_students(self) -> int:
        """Return the number of stored students."""
        session = self._session()
        try:
            stmt = select(func.count()).select_from(StudentRecord)
            return session.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            raise StoreError("Student count failed") from e
        finally:
            session.close()
