"""Convenience exports for application schemas."""

from __future__ import annotations

from .api_key import ApiKeyCreatedSchema, ApiKeyCreateSchema, ApiKeySchema
from .auth import (
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterResponseSchema,
    RegisterSchema,
    TokenPairSchema,
)
from .user import UserSchema

__all__ = [
    "RegisterSchema",
    "RegisterResponseSchema",
    "LoginSchema",
    "LoginResponseSchema",
    "RefreshSchema",
    "TokenPairSchema",
    "UserSchema",
    "ApiKeyCreateSchema",
    "ApiKeySchema",
    "ApiKeyCreatedSchema",
]
