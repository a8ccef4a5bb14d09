"""Environment-driven settings for the registration server."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from studentreg.registration.passwords import DEFAULT_BCRYPT_ROUNDS

DEFAULT_DB_PATH = "studentreg.db"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4000

MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 31


class ConfigError(Exception):
    """Raised when an environment value cannot be used."""


def _int_from_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    """Server settings.

    Attributes:
        db_path: SQLite database file, or ":memory:".
        host: Interface to bind.
        port: Port to bind.
        static_dir: Directory holding the browser client, if it should be served.
        bcrypt_rounds: bcrypt cost factor for new password hashes.
    """

    db_path: str = DEFAULT_DB_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    static_dir: str | None = None
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS

    def __post_init__(self) -> None:
        if not MIN_BCRYPT_ROUNDS <= self.bcrypt_rounds <= MAX_BCRYPT_ROUNDS:
            raise ConfigError(
                f"bcrypt rounds must be between {MIN_BCRYPT_ROUNDS} and "
                f"{MAX_BCRYPT_ROUNDS}, got {self.bcrypt_rounds}"
            )
        if not 0 < self.port < 65536:
            raise ConfigError(f"port must be between 1 and 65535, got {self.port}")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Load settings from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``.

        Raises:
            ConfigError: If a numeric variable is not an integer or out of range.
        """
        if env is None:
            env = os.environ
        return cls(
            db_path=env.get("STUDENTREG_DB_PATH") or DEFAULT_DB_PATH,
            host=env.get("STUDENTREG_HOST") or DEFAULT_HOST,
            port=_int_from_env(env, "PORT", DEFAULT_PORT),
            static_dir=env.get("STUDENTREG_STATIC_DIR") or None,
            bcrypt_rounds=_int_from_env(env, "STUDENTREG_BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS),
        )
