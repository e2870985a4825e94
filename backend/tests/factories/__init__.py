"""Factory Boy base wired to the transactional test session.

The ``session`` fixture binds its scoped session here for the duration of
one test (see ``conftest._factories_session``); factories used outside a
test that requested ``session`` fail loudly instead of writing to the
application's real session.
"""

from __future__ import annotations

import factory
from sqlalchemy.orm import scoped_session

_bound: scoped_session | None = None


def bind_session(session: scoped_session | None) -> None:
    """Point every factory at ``session`` (``None`` unbinds)."""
    global _bound
    _bound = session


def current_session() -> scoped_session:
    """Return the bound session.

    :raises RuntimeError: When no test has bound one.
    """
    if _bound is None:
        raise RuntimeError("No factory session bound; request the 'session' fixture.")
    return _bound


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Commit-on-create base: rows survive app-context teardown and UoW rollbacks.

    Commits only release the per-test SAVEPOINT (see ``conftest.session``).
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = current_session
        sqlalchemy_session_persistence = "commit"
