"""User model definition for the vault backend."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Index, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, validates

from vault_api.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"
USERNAME_MAX_LENGTH = 64

#: Name of the partial unique index allowing a single admin row.
SINGLE_ADMIN_INDEX = "ux_users_single_admin"


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Account identity and stored credential.

    Fields
    ------
    username : str
        Login name. Unique and case-sensitive; surrounding whitespace is
        stripped on assignment.
    password_hash : str
        bcrypt output of the client credential. Never the raw secret.
    password_hint : str | None
        Optional reminder chosen by the user.
    role : str
        ``admin`` for the first account ever created, ``member`` otherwise.
        A partial unique index guarantees at most one admin row.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Update timestamp (from mixin).
    """

    __tablename__ = "users"

    # Columns
    username: Mapped[str] = mapped_column(String(USERNAME_MAX_LENGTH), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    password_hint: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=ROLE_MEMBER)

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        CheckConstraint(f"role IN ('{ROLE_ADMIN}', '{ROLE_MEMBER}')", name="role_valid"),
        Index(
            SINGLE_ADMIN_INDEX,
            "role",
            unique=True,
            postgresql_where=text(f"role = '{ROLE_ADMIN}'"),
            sqlite_where=text(f"role = '{ROLE_ADMIN}'"),
        ),
    )

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        """
        Strip surrounding whitespace; case is kept as given.

        :raises ValueError: If the result is empty.
        """
        value = (value or "").strip()
        if not value:
            raise ValueError("Username must be a non-empty string.")
        return value
