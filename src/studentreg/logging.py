"""Logging for studentreg.

One rotating log file plus an optional console stream, both attached to the
``studentreg`` logger. Every handler installed here redacts passwords and
bcrypt hashes, so a database error that echoes its INSERT parameters does not
put a credential on disk.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "studentreg"
LOG_FILE_NAME = "studentreg.log"

LOG_DIR_ENV = "STUDENTREG_LOG_DIR"
LOG_LEVEL_ENV = "STUDENTREG_LOG_LEVEL"

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CREDENTIAL_PATTERNS = [
    (re.compile(r'("password"\s*:\s*)"(?:[^"\\]|\\.)*"'), r'\1"[REDACTED]"'),
    (re.compile(r"(password=)[^&\s]+"), r"\1[REDACTED]"),
    (re.compile(r"\$2[abxy]\$\d{2}\$[./A-Za-z0-9]{53}"), "[PASSWORD_HASH]"),
]


def sanitize_for_log(text: str) -> str:
    """Remove credentials from log output.

    Args:
        text: Text that may contain a password or password hash.

    Returns:
        Sanitized text safe for logging.
    """
    for pattern, replacement in _CREDENTIAL_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class CredentialFilter(logging.Filter):
    """Rewrite each record's message with credentials redacted."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = sanitize_for_log(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def setup_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    console: bool = True,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """Route studentreg logs to a rotating file and, optionally, the console.

    Calling it again replaces the handlers from the previous call.

    Args:
        log_dir: Directory for ``studentreg.log``. Falls back to
            STUDENTREG_LOG_DIR, then ``logs``.
        level: Level name such as DEBUG or WARNING. Falls back to
            STUDENTREG_LOG_LEVEL, then INFO. Unknown names mean INFO.
        console: Also log to stderr.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.

    Returns:
        The ``studentreg`` logger.
    """
    directory = Path(log_dir or os.environ.get(LOG_DIR_ENV) or DEFAULT_LOG_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / LOG_FILE_NAME
    log_level = _resolve_level(level)

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    redact = CredentialFilter()

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.setLevel(log_level)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(redact)
        logger.addHandler(handler)

    logger.info(
        "Logging to %s at level %s", log_path, logging.getLevelName(log_level)
    )
    return logger
