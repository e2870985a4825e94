"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class UserSchema(Schema):
    """Public representation of the authenticated user."""

    id = fields.String(required=True)
    username = fields.String(required=True)
    role = fields.String(required=True)
    created_at = fields.DateTime(required=True)
