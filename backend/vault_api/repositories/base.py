"""Generic SQLAlchemy 2.x repository.

Repositories translate between the identity tables and Python objects and
nothing more: no commits, no rollbacks, no hashing, no expiry policy. A
Unit of Work hands them a session and decides when it is committed.

Writes ``flush`` immediately so that unique-constraint violations surface
inside the Unit of Work that caused them, where store adapters translate
them into service errors.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, Select, delete, func, select
from sqlalchemy.orm import Session

from vault_api.core.extensions import db

M = TypeVar("M")  # mapped model


class BaseRepository(Generic[M]):
    """Persistence-only access to one mapped model.

    Subclasses set :attr:`model` and may override :meth:`_default_order`.
    Every model in this package has a string ``id`` primary key.

    :param session: Session of the enclosing Unit of Work. Falls back to the
        Flask-scoped ``db.session`` when omitted.
    :type session: :class:`sqlalchemy.orm.Session` | None
    """

    model: type[M]

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def _default_order(self) -> list[Any]:
        """ORDER BY clauses used by :meth:`list`."""
        return [self.model.id.asc()]  # type: ignore[attr-defined]

    def _select(self, *criteria: ColumnElement[bool]) -> Select[Any]:
        stmt = select(self.model)
        return stmt.where(*criteria) if criteria else stmt

    def _first(self, stmt: Select[Any]) -> M | None:
        return cast(M | None, self.session.execute(stmt).scalars().first())

    # --------------------------------- Reads ---------------------------------

    def get(self, entity_id: str) -> M | None:
        """Return the row with primary key ``entity_id`` or ``None``."""
        return self._first(self._select(self.model.id == entity_id))  # type: ignore[attr-defined]

    def find_one(self, **filters: Any) -> M | None:
        """Return the first row whose columns equal ``filters``."""
        return self._first(self._select(*self._equals(filters)))

    def exists(self, **filters: Any) -> bool:
        return self.find_one(**filters) is not None

    def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        return int(self.session.execute(stmt).scalar_one())

    def list(self, **filters: Any) -> list[M]:
        """Return rows matching ``filters`` in :meth:`_default_order`."""
        stmt = self._select(*self._equals(filters)).order_by(*self._default_order())
        return list(cast(Sequence[M], self.session.execute(stmt).scalars().all()))

    # -------------------------------- Writes ---------------------------------

    def add(self, instance: M) -> M:
        """Stage ``instance`` and flush.

        :raises sqlalchemy.exc.IntegrityError: On constraint violations.
        """
        self.session.add(instance)
        self.flush()
        return instance

    def delete(self, instance: M) -> None:
        self.session.delete(instance)
        self.flush()

    def delete_where(self, *criteria: ColumnElement[bool]) -> int:
        """Bulk-delete rows matching ``criteria`` and return how many went.

        The row count is what makes single-use consumption safe: of two
        concurrent deletes of the same row only one observes ``1``.
        """
        stmt = delete(self.model).where(*criteria).execution_options(synchronize_session=False)
        result = self.session.execute(stmt)
        return int(result.rowcount or 0)  # type: ignore[attr-defined]

    def flush(self) -> None:
        self.session.flush()

    # ------------------------------- Internals -------------------------------

    def _equals(self, filters: dict[str, Any]) -> list[ColumnElement[bool]]:
        return [getattr(self.model, name) == value for name, value in filters.items()]
