"""Refresh-session repository."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select

from vault_api.models.refresh_session import RefreshSession
from vault_api.repositories.base import BaseRepository


class RefreshSessionRepository(BaseRepository[RefreshSession]):
    """Persistence-only repository for :class:`RefreshSession`.

    Consumption is expressed as conditional deletes so that the row count
    tells the caller whether it won a concurrent race.
    """

    model = RefreshSession

    def _default_order(self):
        return [RefreshSession.created_at.asc(), RefreshSession.id.asc()]

    def get_by_token(self, token: str) -> RefreshSession | None:
        stmt = select(RefreshSession).where(RefreshSession.token == token)
        return cast(RefreshSession | None, self.session.execute(stmt).scalars().first())

    def get_live_by_token(self, token: str, *, now: datetime) -> RefreshSession | None:
        """Return the session for ``token`` only if it has not expired at ``now``."""
        stmt = select(RefreshSession).where(
            RefreshSession.token == token,
            RefreshSession.expires_at > now,
        )
        return cast(RefreshSession | None, self.session.execute(stmt).scalars().first())

    def consume(self, token: str, *, user_id: str, now: datetime) -> bool:
        """Delete ``token`` if it is still live and owned by ``user_id``.

        :returns: ``True`` when exactly one row was removed by this call.
        :rtype: bool
        """
        removed = self.delete_where(
            RefreshSession.token == token,
            RefreshSession.user_id == user_id,
            RefreshSession.expires_at > now,
        )
        return removed == 1

    def delete_by_token(self, token: str) -> int:
        return self.delete_where(RefreshSession.token == token)

    def delete_for_user(self, user_id: str) -> int:
        return self.delete_where(RefreshSession.user_id == user_id)

    def delete_expired(self, *, now: datetime) -> int:
        return self.delete_where(RefreshSession.expires_at <= now)
