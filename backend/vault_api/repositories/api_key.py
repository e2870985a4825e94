"""API-key repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from vault_api.models.api_key import ApiKey
from vault_api.repositories.base import BaseRepository


class ApiKeyRepository(BaseRepository[ApiKey]):
    """Persistence-only repository for :class:`ApiKey`."""

    model = ApiKey

    def _default_order(self):
        return [ApiKey.created_at.asc(), ApiKey.key_prefix.asc()]

    def get_by_prefix(self, key_prefix: str) -> ApiKey | None:
        stmt = select(ApiKey).where(ApiKey.key_prefix == key_prefix)
        return cast(ApiKey | None, self.session.execute(stmt).scalars().first())

    def get_owned(self, key_id: str, *, user_id: str) -> ApiKey | None:
        """Return the key only when ``user_id`` owns it."""
        stmt = select(ApiKey).where(ApiKey.id == key_id, ApiKey.user_id == user_id)
        return cast(ApiKey | None, self.session.execute(stmt).scalars().first())

    def list_for_user(self, user_id: str) -> list[ApiKey]:
        return self.list(user_id=user_id)

    def delete_for_user(self, user_id: str) -> int:
        return self.delete_where(ApiKey.user_id == user_id)
