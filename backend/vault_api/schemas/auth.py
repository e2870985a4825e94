"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from vault_api.models.user import USERNAME_MAX_LENGTH


class RegisterSchema(Schema):
    """Input payload for account registration.

    Blank values load as ``""`` so the service reports the specific
    ``USERNAME_REQUIRED`` / ``PASSWORD_REQUIRED`` codes.
    """

    class Meta:
        unknown = EXCLUDE

    username = fields.String(load_default="", validate=validate.Length(max=USERNAME_MAX_LENGTH))
    password_hash = fields.String(load_default="", validate=validate.Length(max=1024))
    password_hint = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=255))

    @pre_load
    def _strip_username(self, data: Any, **kwargs: Any) -> Any:
        """Measure the username as it will be stored, without surrounding blanks."""
        if isinstance(data, dict) and isinstance(data.get("username"), str):
            data = {**data, "username": data["username"].strip()}
        return data


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    class Meta:
        unknown = EXCLUDE

    username = fields.String(load_default="")
    password_hash = fields.String(load_default="")


class RefreshSchema(Schema):
    """Input payload for exchanging a refresh token."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(load_default="")


class RegisterResponseSchema(Schema):
    user_id = fields.String(required=True)


class TokenPairSchema(Schema):
    """Response payload containing a rotated token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.Constant("bearer")


class LoginResponseSchema(TokenPairSchema):
    """Response payload for a successful login."""

    user_id = fields.String(required=True)
    username = fields.String(required=True)
