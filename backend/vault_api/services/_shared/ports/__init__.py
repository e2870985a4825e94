"""
vault_api.services._shared.ports
================================

*Ports* (hexagonal interfaces) consumed by the service layer, together
with their in-memory reference implementations.

Modules
-------
- :mod:`clock`: :class:`~.Clock`, :class:`~.SystemClock`, :class:`~.FixedClock`.
- :mod:`password_hasher`: :class:`~.PasswordHasher` and a fast test double.
- :mod:`token_provider`: :class:`~.TokenProvider` for access/refresh tokens.
- :mod:`user_store`: :class:`~.UserStore`, :class:`~.UserRecord`,
  :class:`~.InMemoryUserStore`.
- :mod:`session_store`: :class:`~.SessionStore`, :class:`~.SessionView`,
  :class:`~.InMemorySessionStore`.

Concrete adapters (SQLAlchemy, Redis, bcrypt, flask-jwt-extended) live
under ``vault_api.infra``.
"""

from __future__ import annotations

from .clock import Clock, FixedClock, SystemClock, as_utc
from .password_hasher import PasswordHasher, PlainTextHasher
from .session_store import InMemorySessionStore, SessionStore, SessionView
from .token_provider import StubTokenProvider, TokenProvider, new_refresh_token
from .user_store import InMemoryUserStore, UserRecord, UserRole, UserStore

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "as_utc",
    "PasswordHasher",
    "PlainTextHasher",
    "TokenProvider",
    "StubTokenProvider",
    "new_refresh_token",
    "SessionStore",
    "SessionView",
    "InMemorySessionStore",
    "UserStore",
    "UserRecord",
    "UserRole",
    "InMemoryUserStore",
]
