"""API key schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields


class ApiKeyCreateSchema(Schema):
    """Input payload for creating an API key."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(load_default="")
    expires_at = fields.DateTime(load_default=None, allow_none=True)


class ApiKeySchema(Schema):
    """Public representation of an API key. Never includes the secret."""

    id = fields.String(required=True)
    name = fields.String(required=True)
    key_prefix = fields.String(required=True)
    expires_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime(required=True)


class ApiKeyCreatedSchema(ApiKeySchema):
    """Creation response: the only payload that carries ``secret``."""

    secret = fields.String(required=True)
