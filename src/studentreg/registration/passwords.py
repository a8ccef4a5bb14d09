"""Password hashing for student registration.

bcrypt through passlib. Every hash carries its own salt, so hashing the same
password twice gives two different strings that both verify.
"""

from __future__ import annotations

from passlib.context import CryptContext

DEFAULT_BCRYPT_ROUNDS = 10


def create_password_context(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> CryptContext:
    """Build a bcrypt CryptContext with the given cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


pwd_context = create_password_context()


def hash_password(plain: str, context: CryptContext | None = None) -> str:
    return (context or pwd_context).hash(plain)


def verify_password(plain: str, hashed: str, context: CryptContext | None = None) -> bool:
    return (context or pwd_context).verify(plain, hashed)
