# vault_api/infra/sqlalchemy/user_store.py
from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError

from vault_api.models.user import ROLE_ADMIN, ROLE_MEMBER, SINGLE_ADMIN_INDEX, User
from vault_api.services._shared.errors import UsernameAlreadyExistsError, violates
from vault_api.services._shared.ports import PasswordHasher, UserRecord, UserRole, as_utc
from vault_api.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)

USERNAME_CONSTRAINT = "uq_users_username"


def to_record(user: User) -> UserRecord:
    """Copy a :class:`User` row into an immutable :class:`UserRecord`."""
    return UserRecord(
        id=user.id,
        username=user.username,
        password_hash=user.password_hash,
        role=UserRole(user.role),
        created_at=as_utc(user.created_at),
        password_hint=user.password_hint,
    )


class SqlAlchemyUserStore:
    """
    :class:`~vault_api.services._shared.ports.UserStore` over SQLAlchemy.

    Uniqueness and the single-admin rule are enforced by the database
    (``uq_users_username`` and the ``ux_users_single_admin`` partial index).
    Constraint violations are translated at this boundary.

    :param hasher: Used by :meth:`verify_credential`.
    :param uow_factory: Read-write Unit of Work factory.
    :param ro_uow_factory: Read-only Unit of Work factory.
    """

    def __init__(
        self,
        hasher: PasswordHasher,
        *,
        uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow_factory: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._hasher = hasher
        self._uow = uow_factory
        self._ro_uow = ro_uow_factory

    # ------------------------------ Reads ------------------------------------

    def find_by_username(self, username: str) -> UserRecord | None:
        with self._ro_uow() as uow:
            user = uow.users.get_by_username(username)
            return to_record(user) if user is not None else None

    def find_by_id(self, user_id: str) -> UserRecord | None:
        with self._ro_uow() as uow:
            user = uow.users.get(user_id)
            return to_record(user) if user is not None else None

    def verify_credential(self, user: UserRecord, presented: str) -> bool:
        return self._hasher.verify(presented, user.password_hash)

    # ------------------------------ Writes -----------------------------------

    def create(
        self, *, username: str, password_hash: str, password_hint: str | None = None
    ) -> UserRecord:
        """
        Insert a user; the first account ever becomes ``admin``.

        Two concurrent first registrations both see an empty table; the
        partial unique index lets only one admin row commit and the loser is
        retried once as ``member``.

        :raises UsernameAlreadyExistsError: On a username collision.
        """
        try:
            return self._insert(username, password_hash, password_hint, may_elevate=True)
        except IntegrityError as exc:
            if violates(exc, USERNAME_CONSTRAINT, "users.username"):
                raise UsernameAlreadyExistsError(username) from exc
            if not violates(exc, SINGLE_ADMIN_INDEX, "users.role"):
                raise
            log.info("Lost first-user race; registering as member")

        try:
            return self._insert(username, password_hash, password_hint, may_elevate=False)
        except IntegrityError as exc:
            if violates(exc, USERNAME_CONSTRAINT, "users.username"):
                raise UsernameAlreadyExistsError(username) from exc
            raise

    def _insert(
        self, username: str, password_hash: str, password_hint: str | None, *, may_elevate: bool
    ) -> UserRecord:
        with self._uow() as uow:
            first = may_elevate and uow.users.count() == 0
            user = User(
                username=username,
                password_hash=password_hash,
                password_hint=password_hint,
                role=ROLE_ADMIN if first else ROLE_MEMBER,
            )
            uow.users.add(user)
            return to_record(user)

    def delete(self, user_id: str) -> bool:
        """Delete the user together with its API keys and any stray sessions."""
        with self._uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                return False
            uow.api_keys.delete_for_user(user_id)
            uow.sessions.delete_for_user(user_id)
            uow.users.delete(user)
            return True
