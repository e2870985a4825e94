"""Column mixins shared by the identity models."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column


def new_id() -> str:
    """Return a fresh opaque identifier (UUID4 in canonical text form)."""
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class UUIDPKMixin:
    """String primary key ``id``, generated client-side at flush time.

    Ids reveal nothing about row counts and look the same on SQLite and
    PostgreSQL.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)


class TimestampMixin:
    """``created_at`` / ``updated_at`` in UTC.

    Values are set by Python on insert and update so they are readable
    right after a flush; the server defaults only cover rows written
    outside the ORM (migrations, manual SQL).
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )


class ReprMixin:
    """``<ClassName id=...>``; never includes hashes or tokens."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"
