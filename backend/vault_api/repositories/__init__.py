"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from vault_api.repositories.api_key import ApiKeyRepository
from vault_api.repositories.base import BaseRepository
from vault_api.repositories.refresh_session import RefreshSessionRepository
from vault_api.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "ApiKeyRepository",
    "RefreshSessionRepository",
    "UserRepository",
]
