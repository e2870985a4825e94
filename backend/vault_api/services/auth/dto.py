# vault_api/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for account registration.

    :param username: Requested login name (surrounding whitespace ignored).
    :type username: str
    :param password_hash: Client-derived credential; hashed again server-side.
    :type password_hash: str
    :param password_hint: Optional reminder stored alongside the account.
    :type password_hint: str | None
    """

    username: str
    password_hash: str
    password_hint: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Login name.
    :type username: str
    :param password_hash: Client-derived credential to verify.
    :type password_hash: str
    """

    username: str
    password_hash: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token previously issued.
    :type refresh_token: str
    """

    refresh_token: str


# ---------------------------- Output DTOs --------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterOut:
    """
    Output DTO for registration.

    :param user_id: Identifier of the created account.
    :type user_id: str
    """

    user_id: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO for a successful login.

    :param access_token: Signed short-lived access token.
    :param refresh_token: Opaque single-use refresh token.
    :param user_id: Authenticated user identifier.
    :param username: Stored username.
    """

    access_token: str
    refresh_token: str
    user_id: str
    username: str


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO for a refresh rotation.

    :param access_token: Newly minted access token.
    :type access_token: str
    :param refresh_token: Replacement refresh token; the presented one is spent.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


# ---------------------------- Config DTO ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token lifetime configuration.

    :param refresh_expires: Absolute lifetime of a refresh session.
    :type refresh_expires: timedelta
    """

    refresh_expires: timedelta = timedelta(days=30)
