from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from vault_api.services._shared.ports.clock import Clock, SystemClock


@dataclass(frozen=True, slots=True)
class SessionView:
    """
    Read-model for a refresh-token session.

    :ivar token: Opaque refresh token (the lookup key).
    :ivar user_id: Owning user.
    :ivar expires_at: Absolute expiry (UTC).
    :ivar created_at: Issue instant (UTC).
    """

    token: str
    user_id: str
    expires_at: datetime
    created_at: datetime


class SessionStore(Protocol):
    """
    Stateful store for refresh-token sessions.

    A session is valid only while it is present AND ``clock.now() <
    expires_at``. ``rotate`` MUST be atomic: of several concurrent calls
    presenting the same ``old_token`` at most one returns ``True``.
    """

    def create(self, user_id: str, token: str, *, expires_at: datetime) -> str:
        """Persist a new session and return its token."""
        ...

    def validate_and_get_owner(self, token: str) -> str | None:
        """Return the owning user id of a live session, else ``None``."""
        ...

    def rotate(
        self, *, old_token: str, new_token: str, user_id: str, expires_at: datetime
    ) -> bool:
        """
        Consume ``old_token`` and create ``new_token`` for the same user in one step.

        :returns: ``False`` when ``old_token`` was no longer live (already
            rotated, revoked, expired or owned by someone else); nothing is
            written in that case.
        """
        ...

    def revoke(self, token: str) -> bool:
        """Delete a single session. :returns: True if it existed."""
        ...

    def revoke_all(self, user_id: str) -> int:
        """Delete every session of ``user_id``. :returns: Number removed."""
        ...

    def get(self, token: str) -> SessionView | None:
        """Fetch a session snapshot regardless of expiry."""
        ...


class InMemorySessionStore:
    """
    Dict-backed :class:`SessionStore` with lock-protected atomic rotation.

    :param clock: Time source used for expiry checks.
    :type clock: Clock | None
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._by_token: dict[str, SessionView] = {}
        self._by_user: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    # ------------------------- helpers -------------------------

    def _live(self, session: SessionView | None) -> bool:
        return session is not None and self._clock.now() < session.expires_at

    def _insert(self, user_id: str, token: str, expires_at: datetime) -> None:
        if token in self._by_token:
            raise ValueError("refresh token collision")
        self._by_token[token] = SessionView(
            token=token,
            user_id=user_id,
            expires_at=expires_at,
            created_at=self._clock.now(),
        )
        self._by_user.setdefault(user_id, set()).add(token)

    def _drop(self, token: str) -> SessionView | None:
        session = self._by_token.pop(token, None)
        if session is not None:
            tokens = self._by_user.get(session.user_id)
            if tokens is not None:
                tokens.discard(token)
                if not tokens:
                    del self._by_user[session.user_id]
        return session

    # -------------------------- API ----------------------------

    def create(self, user_id: str, token: str, *, expires_at: datetime) -> str:
        with self._lock:
            self._insert(user_id, token, expires_at)
        return token

    def validate_and_get_owner(self, token: str) -> str | None:
        with self._lock:
            session = self._by_token.get(token)
            return session.user_id if self._live(session) else None

    def rotate(
        self, *, old_token: str, new_token: str, user_id: str, expires_at: datetime
    ) -> bool:
        with self._lock:
            session = self._by_token.get(old_token)
            if not self._live(session) or session.user_id != user_id:  # type: ignore[union-attr]
                return False
            self._drop(old_token)
            self._insert(user_id, new_token, expires_at)
            return True

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._drop(token) is not None

    def revoke_all(self, user_id: str) -> int:
        with self._lock:
            tokens = list(self._by_user.get(user_id, ()))
            for token in tokens:
                self._drop(token)
            return len(tokens)

    def get(self, token: str) -> SessionView | None:
        with self._lock:
            return self._by_token.get(token)

    def count_for_user(self, user_id: str) -> int:
        with self._lock:
            return len(self._by_user.get(user_id, ()))
