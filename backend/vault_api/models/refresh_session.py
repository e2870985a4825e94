"""Refresh-token session rows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vault_api.core.extensions import db

from .base import ReprMixin, UUIDPKMixin


class RefreshSession(UUIDPKMixin, ReprMixin, db.Model):
    """
    Server-side state of one refresh token.

    A row is valid while it exists and ``expires_at`` lies in the future.
    Rotation deletes the row; there is no "used" flag to flip back.

    Fields
    ------
    token : str
        Opaque refresh token (lookup key, unique).
    user_id : str
        Owning user.
    expires_at : datetime
        Absolute expiry (UTC).
    created_at : datetime
        Issue instant, stamped by the store's clock.
    """

    __tablename__ = "refresh_sessions"

    token: Mapped[str] = mapped_column(String(128), nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (UniqueConstraint("token", name="uq_refresh_sessions_token"),)
