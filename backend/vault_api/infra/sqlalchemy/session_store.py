# vault_api/infra/sqlalchemy/session_store.py
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from vault_api.models.refresh_session import RefreshSession
from vault_api.services._shared.ports import Clock, SessionView, SystemClock, as_utc
from vault_api.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


def to_view(row: RefreshSession) -> SessionView:
    return SessionView(
        token=row.token,
        user_id=row.user_id,
        expires_at=as_utc(row.expires_at),
        created_at=as_utc(row.created_at),
    )


class SqlAlchemySessionStore:
    """
    :class:`~vault_api.services._shared.ports.SessionStore` over SQLAlchemy.

    Rotation is a conditional ``DELETE`` (token, owner, not expired) followed
    by the ``INSERT`` of the replacement, in one transaction. Only the caller
    whose ``DELETE`` removed the row proceeds; concurrent callers see a row
    count of zero and get ``False``.

    :param clock: Time source for expiry checks.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow_factory: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._clock = clock or SystemClock()
        self._uow = uow_factory
        self._ro_uow = ro_uow_factory

    def _row(self, user_id: str, token: str, expires_at: datetime) -> RefreshSession:
        return RefreshSession(
            token=token,
            user_id=user_id,
            expires_at=expires_at,
            created_at=self._clock.now(),
        )

    def create(self, user_id: str, token: str, *, expires_at: datetime) -> str:
        with self._uow() as uow:
            uow.sessions.add(self._row(user_id, token, expires_at))
        return token

    def validate_and_get_owner(self, token: str) -> str | None:
        with self._ro_uow() as uow:
            row = uow.sessions.get_live_by_token(token, now=self._clock.now())
            return row.user_id if row is not None else None

    def rotate(
        self, *, old_token: str, new_token: str, user_id: str, expires_at: datetime
    ) -> bool:
        with self._uow() as uow:
            if not uow.sessions.consume(old_token, user_id=user_id, now=self._clock.now()):
                return False
            uow.sessions.add(self._row(user_id, new_token, expires_at))
            return True

    def revoke(self, token: str) -> bool:
        with self._uow() as uow:
            return uow.sessions.delete_by_token(token) > 0

    def revoke_all(self, user_id: str) -> int:
        with self._uow() as uow:
            return uow.sessions.delete_for_user(user_id)

    def get(self, token: str) -> SessionView | None:
        with self._ro_uow() as uow:
            row = uow.sessions.get_by_token(token)
            return to_view(row) if row is not None else None

    def purge_expired(self) -> int:
        """Delete sessions whose expiry has passed. :returns: Rows removed."""
        with self._uow() as uow:
            return uow.sessions.delete_expired(now=self._clock.now())
