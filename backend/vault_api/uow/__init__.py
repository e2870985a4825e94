"""Units of Work over the Flask-scoped SQLAlchemy session.

Services and store adapters depend on :class:`UnitOfWork`; the read-write
and read-only SQLAlchemy flavours are the only implementations.
"""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
]
