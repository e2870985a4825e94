"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`vault_api.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``vault_api.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Auth service (from ``vault_api.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`RefreshIn`,
      :class:`RegisterOut`, :class:`LoginOut`, :class:`TokenPairOut`

- User service (from ``vault_api.services.users``)
    * :class:`UserService`
    * DTOs: :class:`UserOut`, :class:`UserExportOut`

- API key service (from ``vault_api.services.api_keys``)
    * :class:`ApiKeyService`
    * DTOs: :class:`ApiKeyCreateIn`, :class:`ApiKeyOut`, :class:`ApiKeyCreatedOut`

Errors live in ``vault_api.services._shared.errors``; ports and their
in-memory implementations in ``vault_api.services._shared.ports``.
"""

from __future__ import annotations

from vault_api.services._shared.base import BaseService, ServiceContext
from vault_api.services.api_keys import (
    ApiKeyCreatedOut,
    ApiKeyCreateIn,
    ApiKeyOut,
    ApiKeyService,
)
from vault_api.services.auth import (
    AuthService,
    LoginIn,
    LoginOut,
    RefreshIn,
    RegisterIn,
    RegisterOut,
    TokenPairOut,
)
from vault_api.services.users import UserExportOut, UserOut, UserService

__all__ = [
    # base
    "BaseService",
    "ServiceContext",
    # auth
    "AuthService",
    "RegisterIn",
    "LoginIn",
    "RefreshIn",
    "RegisterOut",
    "LoginOut",
    "TokenPairOut",
    # users
    "UserService",
    "UserOut",
    "UserExportOut",
    # api keys
    "ApiKeyService",
    "ApiKeyCreateIn",
    "ApiKeyOut",
    "ApiKeyCreatedOut",
]
