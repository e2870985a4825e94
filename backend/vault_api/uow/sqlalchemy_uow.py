"""
Units of Work over the Flask-scoped SQLAlchemy session.

Two flavours share the same repositories:

* :class:`SQLAlchemyUnitOfWork` commits on a clean exit and rolls back on
  any exception.
* :class:`SQLAlchemyReadOnlyUnitOfWork` never persists anything. Credential
  lookups (login, refresh validation, profile reads) run in it so that a
  bug in a read path cannot rewrite a user or resurrect a session.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from vault_api.core.extensions import db
from vault_api.repositories import (
    ApiKeyRepository,
    RefreshSessionRepository,
    UserRepository,
)
from vault_api.uow.base import UnitOfWork

log = logging.getLogger(__name__)

# Dialects that understand ``SET TRANSACTION ...`` inside a transaction
_SET_TRANSACTION_DIALECTS = ("postgresql", "mysql", "mariadb")

# Leading SQL keywords treated as writes by the read-only guard
WRITE_KEYWORDS = frozenset(
    {
        "insert",
        "update",
        "delete",
        "merge",
        "upsert",
        "replace",
        "alter",
        "drop",
        "truncate",
        "create",
        "grant",
        "revoke",
    }
)


def leading_keyword(statement: str | None) -> str:
    """Return the first SQL keyword of ``statement`` in lower case."""
    if not statement:
        return ""
    head = statement.lstrip().split(None, 1)
    return head[0].lower() if head else ""


class _SessionUnitOfWork(UnitOfWork):
    """Bind the identity repositories to the Flask-scoped session."""

    def __init__(self) -> None:
        self.session: Session = db.session  # type: ignore[assignment]
        self.users = UserRepository(session=self.session)
        self.sessions = RefreshSessionRepository(session=self.session)
        self.api_keys = ApiKeyRepository(session=self.session)


class SQLAlchemyUnitOfWork(_SessionUnitOfWork):
    """
    Read-write Unit of Work.

    The session starts lazily on the first statement. A failed ``commit``
    is rolled back before the error propagates, so the scoped session is
    usable again by the next request.
    """

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            log.warning("Commit failed; rolling back", exc_info=True)
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class _WriteGuard:
    """
    Event listeners that turn any write into a :class:`RuntimeError`.

    ``before_flush`` catches ORM changes, ``before_cursor_execute`` catches
    textual and Core DML issued on ``connection``.
    """

    def __init__(self, session: Session, connection: Connection) -> None:
        self.session = session
        self.connection = connection
        self.active = False

    @staticmethod
    def _before_flush(session: Session, flush_context: Any, instances: Any) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (pending new/dirty/deleted objects)."
            )

    @staticmethod
    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany) -> None:
        keyword = leading_keyword(statement)
        if keyword in WRITE_KEYWORDS:
            raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {keyword.upper()}")

    def install(self) -> None:
        if self.active:
            return
        event.listen(self.session, "before_flush", self._before_flush)
        event.listen(self.connection, "before_cursor_execute", self._before_cursor_execute)
        self.active = True

    def remove(self) -> None:
        if not self.active:
            return
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._before_flush)
        with suppress(InvalidRequestError):
            event.remove(self.connection, "before_cursor_execute", self._before_cursor_execute)
        self.active = False


class SQLAlchemyReadOnlyUnitOfWork(_SessionUnitOfWork):
    """
    Read-only Unit of Work.

    On entry it starts a transaction when the session is idle, or joins the
    one already running (an outer request or test transaction). Only a
    transaction it started gets the ``SET TRANSACTION`` directives and the
    closing rollback. The write guard is installed in both cases.

    Callers must copy what they need out of ORM instances before leaving
    the ``with`` block: the closing rollback expires them.

    Parameters
    ----------
    isolation_level:
        Optional isolation level, e.g. ``"READ COMMITTED"``. ``None`` keeps
        the connection default.
    enforce_db_readonly:
        Issue ``SET TRANSACTION READ ONLY`` where the dialect supports it.
    """

    writable = False

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__()
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._owned_txn: SessionTransaction | None = None
        self._guard: _WriteGuard | None = None

    # ----------------------------- Context Manager -----------------------------

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._owned_txn = self._begin_if_idle()
        connection = self.session.connection()

        self._guard = _WriteGuard(self.session, connection)
        self._guard.install()

        if self._owned_txn is not None and connection.dialect.name in _SET_TRANSACTION_DIALECTS:
            self._apply_transaction_directives()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned_txn is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                txn, self._owned_txn = self._owned_txn, None
                txn.__exit__(exc_type, exc, tb)
        finally:
            if self._guard is not None:
                self._guard.remove()
                self._guard = None

    # ----------------------------- Public API ---------------------------------

    def commit(self) -> None:
        """
        Refuse to commit.

        :raises RuntimeError: Always.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Internals -----------------------------------

    def _begin_if_idle(self) -> SessionTransaction | None:
        try:
            txn = self.session.begin()
        except InvalidRequestError:
            return None
        txn.__enter__()
        return txn

    def _apply_transaction_directives(self) -> None:
        try:
            if self.isolation_level:
                level = self.isolation_level.upper().strip()
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            log.warning("SET TRANSACTION directives failed (%s); guards only.", exc)
