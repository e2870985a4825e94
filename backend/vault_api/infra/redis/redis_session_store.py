# comments in English; reST docstrings
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import redis  # type: ignore[import-untyped]

from vault_api.services._shared.ports import Clock, SessionView, SystemClock


def _s(value: Any, default: str = "") -> str:
    """Normalize a Redis reply (bytes or str, depending on ``decode_responses``)."""
    if value is None:
        return default
    if isinstance(value, bytes | bytearray):
        return value.decode()
    return str(value)


@dataclass(slots=True)
class RedisSessionStore:
    """
    Redis-backed refresh-session store with atomic rotation.

    Layout
    ------
    ``rs:{token}``
        Hash with ``user_id``, ``expires_at`` and ``created_at`` (epoch
        seconds). The key TTL matches the session lifetime, so Redis evicts
        the hash by itself.
    ``rs:u:{user_id}``
        Set of the user's tokens, used by :meth:`revoke_all`. Its TTL is
        pushed forward to cover the newest session, so an idle user's index
        disappears with its last hash. Members whose hash is already gone
        stay listed until :meth:`purge_expired` or :meth:`revoke_all`
        drops them.

    Expiry is still checked against the injected clock, never inferred from
    key presence alone.

    :param r: A Redis client (already connected).
    :param clock: Time source for expiry checks.
    """

    r: redis.Redis
    clock: Clock = field(default_factory=SystemClock)

    # -------------------- helpers --------------------

    @staticmethod
    def _k(token: str) -> str:
        return f"rs:{token}"

    @staticmethod
    def _ku(user_id: str) -> str:
        return f"rs:u:{user_id}"

    def _ttl(self, expires_at: datetime) -> int:
        return max(1, math.ceil(expires_at.timestamp() - self.clock.now().timestamp()))

    def _mapping(self, user_id: str, expires_at: datetime) -> dict[str, str]:
        return {
            "user_id": user_id,
            "expires_at": repr(expires_at.timestamp()),
            "created_at": repr(self.clock.now().timestamp()),
        }

    def _is_live(self, h: dict[Any, Any]) -> bool:
        if not h:
            return False
        expires = float(self._field(h, "expires_at") or "0")
        return self.clock.now().timestamp() < expires

    @staticmethod
    def _field(h: dict[Any, Any], name: str) -> str:
        return _s(h.get(name, h.get(name.encode())))

    @staticmethod
    def _index(pipe: Any, key_u: str, token: str, ttl: int) -> None:
        """Queue ``token`` into the user index and stretch the index TTL to ``ttl``."""
        pipe.sadd(key_u, token)
        # NX covers a fresh set (no TTL yet); GT only ever extends it
        pipe.expire(key_u, ttl, nx=True)
        pipe.expire(key_u, ttl, gt=True)

    # -------------------- API ------------------------

    def create(self, user_id: str, token: str, *, expires_at: datetime) -> str:
        """Insert the session before the token is handed to the client."""
        key = self._k(token)
        ttl = self._ttl(expires_at)
        pipe = self.r.pipeline(transaction=True)
        pipe.hset(key, mapping=self._mapping(user_id, expires_at))
        pipe.expire(key, ttl)
        self._index(pipe, self._ku(user_id), token, ttl)
        pipe.execute()
        return token

    def validate_and_get_owner(self, token: str) -> str | None:
        h = self.r.hgetall(self._k(token))
        if not self._is_live(h):
            return None
        return self._field(h, "user_id") or None

    def rotate(
        self, *, old_token: str, new_token: str, user_id: str, expires_at: datetime
    ) -> bool:
        """
        Atomically consume ``old_token`` and create ``new_token``.

        Uses WATCH/MULTI/EXEC optimistic locking. If another client touches
        the old key between the read and ``EXEC``, the transaction aborts and
        the check is repeated; by then the key is gone and the call returns
        ``False``.
        """
        k_old = self._k(old_token)
        k_new = self._k(new_token)
        k_user = self._ku(user_id)

        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(k_old, k_new)

                    h = p.hgetall(k_old)
                    if not self._is_live(h) or self._field(h, "user_id") != user_id:
                        p.unwatch()
                        return False
                    if p.exists(k_new):
                        p.unwatch()
                        raise ValueError("refresh token collision")

                    ttl = self._ttl(expires_at)
                    p.multi()
                    p.delete(k_old)
                    p.srem(k_user, old_token)
                    p.hset(k_new, mapping=self._mapping(user_id, expires_at))
                    p.expire(k_new, ttl)
                    self._index(p, k_user, new_token, ttl)
                    p.execute()
                return True
            except redis.WatchError:
                continue

    def revoke(self, token: str) -> bool:
        key = self._k(token)
        owner = self._field(self.r.hgetall(key), "user_id")
        with self.r.pipeline(transaction=True) as p:
            p.delete(key)
            if owner:
                p.srem(self._ku(owner), token)
            out = p.execute()
        return bool(out[0])

    def revoke_all(self, user_id: str) -> int:
        key_u = self._ku(user_id)
        tokens = [_s(member) for member in self.r.smembers(key_u)]
        if not tokens:
            return 0
        pipe = self.r.pipeline(transaction=True)
        for token in tokens:
            pipe.delete(self._k(token))
        pipe.delete(key_u)
        out = pipe.execute()
        # Members whose hash already expired are cleaned up but not counted
        return sum(1 for deleted in out[:-1] if deleted)

    def get(self, token: str) -> SessionView | None:
        h = self.r.hgetall(self._k(token))
        if not h:
            return None
        return SessionView(
            token=token,
            user_id=self._field(h, "user_id"),
            expires_at=datetime.fromtimestamp(float(self._field(h, "expires_at")), tz=UTC),
            created_at=datetime.fromtimestamp(float(self._field(h, "created_at")), tz=UTC),
        )

    def purge_expired(self) -> int:
        """
        Drop index members whose session is gone or past its expiry.

        Walks every ``rs:u:*`` set with SCAN/SSCAN, so it never blocks the
        server on one large reply. Expired hashes that Redis has not evicted
        yet are deleted along with their member.

        :returns: Number of index members removed.
        """
        removed = 0
        for key_u in self.r.scan_iter(match=self._ku("*")):
            removed += self._prune_index(_s(key_u))
        return removed

    def _prune_index(self, key_u: str) -> int:
        stale = [
            token
            for token in (_s(member) for member in self.r.sscan_iter(key_u))
            if not self._is_live(self.r.hgetall(self._k(token)))
        ]
        if not stale:
            return 0
        with self.r.pipeline(transaction=True) as p:
            for token in stale:
                p.delete(self._k(token))
            p.srem(key_u, *stale)
            p.execute()
        return len(stale)
