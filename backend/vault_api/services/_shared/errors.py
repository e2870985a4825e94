"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never import Flask or
depend on HTTP. Each carries a stable ``code`` that the API adapter
(``vault_api/core/errors.py``) maps to a transport status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str, *column_hints: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the message. SQLite only
    reports the offending ``table.column`` pair, so callers may pass those
    as hints.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_username').
    *column_hints : str
        Extra ``table.column`` fragments accepted as a match.

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else str(exc).lower()
    needles = (constraint_name, *column_hints)
    return any(needle.lower() in message for needle in needles)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``code`` is a stable, machine-readable identifier.
    - ``str(exc)`` is safe to show to clients.
    """

    code: ClassVar[str] = "SERVICE_ERROR"
    default_message: ClassVar[str] = "Service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationFailedError(ServiceError):
    """Input rejected before any collaborator was called."""

    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class AuthenticationError(ServiceError):
    """Base for failures that must surface as *unauthorized*."""

    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class UsernameRequiredError(ValidationFailedError):
    code = "USERNAME_REQUIRED"
    default_message = "Username is required"


class UsernameTooLongError(ValidationFailedError):
    code = "USERNAME_TOO_LONG"
    default_message = "Username is too long"


class PasswordRequiredError(ValidationFailedError):
    code = "PASSWORD_REQUIRED"
    default_message = "Password is required"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    code: ClassVar[str] = "CONFLICT"

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class UsernameAlreadyExistsError(ConflictError):
    """Raised by Register when the username is already taken."""

    code = "USERNAME_ALREADY_EXISTS"

    def __init__(self, username: str) -> None:
        ConflictError.__init__(self, entity="User", detail=f"username {username!r} already exists")


class InvalidCredentialsError(AuthenticationError):
    """Login failure; identical for unknown usernames and wrong secrets."""

    code = "INVALID_CREDENTIALS"
    default_message = "Invalid username or password"


class InvalidRefreshTokenError(AuthenticationError):
    """Unknown, expired, already-rotated or orphaned refresh token."""

    code = "INVALID_REFRESH_TOKEN"
    default_message = "Invalid refresh token"


class UserDeletedError(AuthenticationError):
    """The authenticated subject no longer exists."""

    code = "USER_DELETED"
    default_message = "User no longer exists"


class InternalServiceError(ServiceError):
    """
    A collaborator failed unexpectedly.

    The original exception is chained (``raise ... from exc``) and logged by
    the service; the message exposed to callers carries no internal detail.
    """

    code = "INTERNAL_ERROR"
    default_message = "Internal error"
