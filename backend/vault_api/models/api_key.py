"""API keys: secondary credentials whose secret is revealed once."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vault_api.core.extensions import db

from .base import ReprMixin, UUIDPKMixin


class ApiKey(UUIDPKMixin, ReprMixin, db.Model):
    """
    API key owned by a user.

    Fields
    ------
    user_id : str
        Owner.
    name : str
        Label chosen by the owner.
    key_prefix : str
        Public identifier (``ak_`` + 8 hex chars), safe to display.
    secret_hash : str
        bcrypt hash of the secret. The secret itself is never stored.
    expires_at : datetime | None
        Optional expiry; ``None`` means no expiry.
    created_at : datetime
        Creation instant.
    """

    __tablename__ = "api_keys"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    key_prefix: Mapped[str] = mapped_column(String(16), nullable=False)
    secret_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (UniqueConstraint("key_prefix", name="uq_api_keys_key_prefix"),)
