from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

# 32 random bytes -> 43 URL-safe characters
REFRESH_TOKEN_BYTES = 32


class TokenProvider(Protocol):
    """Port for minting access tokens (signed, stateless) and refresh tokens (opaque)."""

    def create_access_token(self, user_id: str, username: str) -> str: ...

    def create_refresh_token(self, user_id: str) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...


def new_refresh_token() -> str:
    """Return a URL-safe random string with no embedded structure."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


class StubTokenProvider:
    """Deterministic access tokens plus real random refresh tokens, for unit tests."""

    def __init__(self, *, lifetime: timedelta = timedelta(minutes=15)) -> None:
        self._lifetime = lifetime
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def create_access_token(self, user_id: str, username: str) -> str:
        self._seq += 1
        token = f"access.{user_id}.{self._seq}"
        self._issued[token] = {
            "sub": user_id,
            "username": username,
            "type": "access",
            "exp": int((datetime.now(UTC) + self._lifetime).timestamp()),
        }
        return token

    def create_refresh_token(self, user_id: str) -> str:
        return new_refresh_token()

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return self._issued[token]
        except KeyError:
            raise ValueError("unknown token") from None
