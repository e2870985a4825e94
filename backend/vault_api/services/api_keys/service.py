# vault_api/services/api_keys/service.py
from __future__ import annotations

import logging
import secrets

from vault_api.models.api_key import ApiKey
from vault_api.services._shared.base import BaseService, ServiceContext
from vault_api.services._shared.errors import UserDeletedError, ValidationFailedError
from vault_api.services._shared.ports.clock import Clock, SystemClock, as_utc
from vault_api.services._shared.ports.password_hasher import PasswordHasher
from vault_api.services.api_keys.dto import ApiKeyCreatedOut, ApiKeyCreateIn, ApiKeyOut

log = logging.getLogger(__name__)

KEY_PREFIX = "ak_"
PREFIX_HEX_CHARS = 8
SECRET_BYTES = 32
NAME_MAX_LENGTH = 100


def _to_out(row: ApiKey) -> ApiKeyOut:
    return ApiKeyOut(
        id=row.id,
        name=row.name,
        key_prefix=row.key_prefix,
        expires_at=as_utc(row.expires_at) if row.expires_at is not None else None,
        created_at=as_utc(row.created_at),
    )


class ApiKeyService(BaseService):
    """
    Create, list, delete and verify API keys.

    Secrets are hashed with the same :class:`PasswordHasher` as account
    credentials; only the hash is stored and the raw secret is returned
    once, by :meth:`create`.
    """

    def __init__(
        self,
        *,
        hasher: PasswordHasher,
        clock: Clock | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.hasher = hasher
        self.clock = clock or SystemClock()

    @staticmethod
    def new_prefix() -> str:
        return KEY_PREFIX + secrets.token_hex(PREFIX_HEX_CHARS // 2)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create(self, dto: ApiKeyCreateIn) -> ApiKeyCreatedOut:
        """
        Mint a key and reveal its secret exactly once.

        :raises ValidationFailedError: Blank or overlong name, or an expiry
            that is not in the future.
        :raises UserDeletedError: The owner no longer exists.
        """
        name = (dto.name or "").strip()
        if not name:
            raise ValidationFailedError("API key name is required")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationFailedError(f"API key name must be at most {NAME_MAX_LENGTH} characters")
        expires_at = as_utc(dto.expires_at) if dto.expires_at is not None else None
        if expires_at is not None and expires_at <= self.clock.now():
            raise ValidationFailedError("API key expiry must be in the future")

        secret = secrets.token_urlsafe(SECRET_BYTES)
        secret_hash = self.hasher.hash(secret)

        with self.guard("create_api_key"), self.rw_uow() as uow:
            if uow.users.get(dto.user_id) is None:
                raise UserDeletedError()
            row = ApiKey(
                user_id=dto.user_id,
                name=name,
                key_prefix=self.new_prefix(),
                secret_hash=secret_hash,
                expires_at=expires_at,
                created_at=self.clock.now(),
            )
            uow.api_keys.add(row)
            out = _to_out(row)

        log.info(
            "API key created",
            extra={"operation": "create_api_key", "user_id": dto.user_id},
        )
        return ApiKeyCreatedOut(key=out, secret=secret)

    def delete(self, user_id: str, key_id: str) -> None:
        """
        Delete one of the caller's keys.

        Idempotent: an unknown id, an already-deleted key or a key owned by
        someone else is a silent no-op.
        """
        with self.guard("delete_api_key"), self.rw_uow() as uow:
            row = uow.api_keys.get_owned(key_id, user_id=user_id)
            if row is not None:
                uow.api_keys.delete(row)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list(self, user_id: str) -> list[ApiKeyOut]:
        """Return the caller's keys in creation order, without secrets."""
        with self.guard("list_api_keys"), self.ro_uow() as uow:
            return [_to_out(row) for row in uow.api_keys.list_for_user(user_id)]

    def verify(self, key_prefix: str, secret: str) -> ApiKeyOut | None:
        """
        Check a presented ``(prefix, secret)`` pair.

        :returns: The key when the secret matches and it has not expired,
            otherwise ``None``.
        """
        with self.guard("verify_api_key"), self.ro_uow() as uow:
            row = uow.api_keys.get_by_prefix(key_prefix)
            stored = (row.secret_hash, _to_out(row)) if row is not None else None

        if stored is None:
            self.hasher.dummy_verify(secret)
            return None
        secret_hash, out = stored
        if not self.hasher.verify(secret, secret_hash):
            return None
        if out.expires_at is not None and out.expires_at <= self.clock.now():
            return None
        return out
