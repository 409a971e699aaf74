"""
Typed failures raised by the credential store and the auth service.

Messages are safe to return to clients: they never carry a password or
a password hash.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base exception for authentication errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateIdentity(AuthError):
    """Registration attempted for an email that is already on file."""

    def __init__(self, email: str) -> None:
        super().__init__("Email already registered")
        self.email = email


class Unauthorized(AuthError):
    """Credentials did not validate.

    Raised with the same message whether the email is unknown or the
    password is wrong.
    """

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class StorageUnavailable(AuthError):
    """The credential store could not be reached."""


class InvalidInput(AuthError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class InvalidToken(AuthError):
    """Bearer token is malformed, forged or expired."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid or expired token: {reason}")
        self.reason = reason
