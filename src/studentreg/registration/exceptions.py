"""Custom exceptions for the Registration Service."""


class RegistrationError(Exception):
    """Base exception for registration failures the caller can correct."""


class ValidationError(RegistrationError):
    """Registration input is missing or malformed."""


class ConflictError(RegistrationError):
    """The normalized email is already registered."""
