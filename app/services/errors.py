"""Exceptions raised by the identity services."""

from __future__ import annotations

from typing import Any


class IdentityError(Exception):
    """Base exception for authentication and user administration errors."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class UserNotFoundError(IdentityError):
    """No user row matches the lookup."""

    def __init__(self, message: str = "user not found", details: Any = None):
        super().__init__(message, details)


class RoleNotFoundError(IdentityError):
    """No role row matches the lookup."""

    def __init__(self, message: str = "role not found", details: Any = None):
        super().__init__(message, details)


class InvalidCredentialsError(IdentityError):
    """Unknown username or wrong password."""

    def __init__(self, message: str = "invalid credentials", details: Any = None):
        super().__init__(message, details)


class UserDisabledError(InvalidCredentialsError):
    """Correct credentials for an account whose is_active flag is off."""

    def __init__(self, message: str = "user account is disabled", details: Any = None):
        super().__init__(message, details)


class DuplicateUserError(IdentityError):
    """A unique constraint on users was violated.

    ``field`` is ``"username"``, ``"email"`` or ``None`` when the offending
    constraint could not be identified.
    """

    def __init__(self, field: str | None = None, details: Any = None):
        super().__init__(f"duplicate {field or 'user'}", details)
        self.field = field


class InvalidTokenError(IdentityError):
    """Bearer or refresh token failed validation."""

    pass
