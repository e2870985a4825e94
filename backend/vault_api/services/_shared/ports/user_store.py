from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol
from uuid import uuid4

from vault_api.services._shared.errors import UsernameAlreadyExistsError
from vault_api.services._shared.ports.clock import Clock, SystemClock
from vault_api.services._shared.ports.password_hasher import PasswordHasher


class UserRole(str, Enum):
    """Account role. The first account ever created is the only ``ADMIN``."""

    ADMIN = "admin"
    MEMBER = "member"


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Read-model of a stored account.

    :param id: Opaque identifier generated at creation.
    :param username: Unique, case-sensitive login name.
    :param password_hash: Hasher output; never the client secret.
    :param role: :class:`UserRole` value.
    :param created_at: Creation instant (UTC).
    :param password_hint: Optional reminder chosen by the user.
    """

    id: str
    username: str
    password_hash: str
    role: UserRole
    created_at: datetime
    password_hint: str | None = None


class UserStore(Protocol):
    """
    Credential store consumed by the auth and user services.

    Contract
    --------
    * ``create`` enforces username uniqueness atomically and raises
      :class:`UsernameAlreadyExistsError` on a duplicate, even under
      concurrent calls.
    * ``create`` assigns :attr:`UserRole.ADMIN` to the first account and
      :attr:`UserRole.MEMBER` to all others, atomically.
    * ``delete`` is idempotent and reports whether a row was removed.
    * ``verify_credential`` never raises for a mismatch; it returns ``False``.
    """

    def find_by_username(self, username: str) -> UserRecord | None: ...

    def find_by_id(self, user_id: str) -> UserRecord | None: ...

    def verify_credential(self, user: UserRecord, presented: str) -> bool: ...

    def create(
        self, *, username: str, password_hash: str, password_hint: str | None = None
    ) -> UserRecord: ...

    def delete(self, user_id: str) -> bool: ...


class InMemoryUserStore:
    """
    Dict-backed :class:`UserStore` guarded by a lock.

    The lock only covers dictionary access; credential verification runs
    outside it.
    """

    def __init__(self, hasher: PasswordHasher, *, clock: Clock | None = None) -> None:
        self._hasher = hasher
        self._clock = clock or SystemClock()
        self._by_id: dict[str, UserRecord] = {}
        self._id_by_username: dict[str, str] = {}
        self._lock = threading.Lock()

    def find_by_username(self, username: str) -> UserRecord | None:
        with self._lock:
            user_id = self._id_by_username.get(username)
            return self._by_id.get(user_id) if user_id else None

    def find_by_id(self, user_id: str) -> UserRecord | None:
        with self._lock:
            return self._by_id.get(user_id)

    def verify_credential(self, user: UserRecord, presented: str) -> bool:
        return self._hasher.verify(presented, user.password_hash)

    def create(
        self, *, username: str, password_hash: str, password_hint: str | None = None
    ) -> UserRecord:
        with self._lock:
            if username in self._id_by_username:
                raise UsernameAlreadyExistsError(username)
            role = UserRole.MEMBER if self._by_id else UserRole.ADMIN
            record = UserRecord(
                id=str(uuid4()),
                username=username,
                password_hash=password_hash,
                role=role,
                created_at=self._clock.now(),
                password_hint=password_hint,
            )
            self._by_id[record.id] = record
            self._id_by_username[username] = record.id
            return record

    def delete(self, user_id: str) -> bool:
        with self._lock:
            record = self._by_id.pop(user_id, None)
            if record is None:
                return False
            self._id_by_username.pop(record.username, None)
            return True
