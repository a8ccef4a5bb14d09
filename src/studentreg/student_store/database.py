"""SQLite engine setup for the Student Record Store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from studentreg.student_store.exceptions import StoreError
from studentreg.student_store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

MEMORY_DB_PATH = ":memory:"

# Seconds a writer waits on a locked database before failing
BUSY_TIMEOUT_SECONDS = 15.0


def _enable_wal(dbapi_connection: object, _connection_record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _create_engine(db_path: str, busy_timeout: float) -> Engine:
    if db_path == MEMORY_DB_PATH:
        # One shared connection, so worker threads see the same tables
        return create_engine(
            "sqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False, "timeout": busy_timeout},
    )
    event.listen(engine, "connect", _enable_wal)
    return engine


def open_student_database(
    db_path: str, busy_timeout: float = BUSY_TIMEOUT_SECONDS
) -> Engine:
    """Open the student database and make sure the schema exists.

    File databases run in WAL mode, and concurrent writers wait up to
    ``busy_timeout`` seconds for the write lock. ``":memory:"`` gives a
    private in-memory database.

    Args:
        db_path: Path to the SQLite file, or ":memory:".
        busy_timeout: Lock wait for file databases, in seconds.

    Returns:
        An engine bound to a database that has the ``students`` table.

    Raises:
        StoreError: If the file or its directory cannot be created, or the
            schema cannot be applied.
    """
    engine: Engine | None = None
    try:
        engine = _create_engine(db_path, busy_timeout)
        Base.metadata.create_all(engine)
    except (SQLAlchemyError, OSError) as e:
        if engine is not None:
            engine.dispose()
        raise StoreError(f"Cannot open student store at '{db_path}'") from e

    logger.debug("Student database ready at %s", db_path)
    return engine
