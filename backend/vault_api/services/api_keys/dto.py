# vault_api/services/api_keys/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ApiKeyCreateIn:
    """
    Input DTO for API-key creation.

    :param user_id: Owner (subject of the verified access token).
    :type user_id: str
    :param name: Human label; surrounding whitespace ignored.
    :type name: str
    :param expires_at: Optional absolute expiry.
    :type expires_at: datetime | None
    """

    user_id: str
    name: str
    expires_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ApiKeyOut:
    """
    Public view of an API key. Never carries the secret or its hash.

    :param id: Key identifier.
    :param name: Human label.
    :param key_prefix: Public, displayable identifier.
    :param expires_at: Optional expiry.
    :param created_at: Creation instant.
    """

    id: str
    name: str
    key_prefix: str
    expires_at: datetime | None
    created_at: datetime


@dataclass(frozen=True, slots=True)
class ApiKeyCreatedOut:
    """
    Result of API-key creation: the only place the secret is ever returned.

    :param key: Public view of the stored key.
    :type key: ApiKeyOut
    :param secret: Raw secret; shown once, never retrievable again.
    :type secret: str
    """

    key: ApiKeyOut
    secret: str
