"""Custom exceptions for the Student Record Store."""


class StoreError(Exception):
    """Storage is unavailable or a write failed."""


class DuplicateKeyError(StoreError):
    """A student with the same normalized email already exists."""
