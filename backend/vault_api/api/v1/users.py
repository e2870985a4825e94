"""Endpoints for the authenticated user: profile, export, deletion and API keys."""

from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, request

from vault_api.api.deps import (
    current_user_id,
    get_api_key_service,
    get_auth_service,
    get_user_service,
    json_response,
    require_auth,
    timing,
)
from vault_api.schemas import ApiKeyCreatedSchema, ApiKeyCreateSchema, ApiKeySchema, UserSchema
from vault_api.services import ApiKeyCreateIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
api_key_create_schema = ApiKeyCreateSchema()
api_key_schema = ApiKeySchema()
api_key_created_schema = ApiKeyCreatedSchema()


@bp.get("/me")
@timing
@require_auth
def get_me():
    """Return the profile of the token subject (401 once the account is gone)."""

    user_id = current_user_id()
    out = get_user_service(user_id).get_current_user(user_id)
    return json_response({"data": user_schema.dump(out)})


@bp.delete("/me")
@timing
@require_auth
def delete_me():
    """Delete the account and revoke all of its refresh sessions. Idempotent."""

    user_id = current_user_id()
    get_auth_service(user_id).delete_account(user_id)
    return "", 204


@bp.get("/me/export")
@timing
@require_auth
def export_me():
    user_id = current_user_id()
    out = get_user_service(user_id).export_user_data(user_id)
    return json_response({"data": out.as_dict()})


# --------------------------------------------------------------------------- #
# API keys
# --------------------------------------------------------------------------- #


@bp.post("/me/api-keys")
@timing
@require_auth
def create_api_key():
    """Create an API key. The response is the only place the secret appears."""

    user_id = current_user_id()
    payload = api_key_create_schema.load(request.get_json(silent=True) or {})
    out = get_api_key_service(user_id).create(ApiKeyCreateIn(user_id=user_id, **payload))
    body = {**asdict(out.key), "secret": out.secret}
    return json_response({"data": api_key_created_schema.dump(body)}, status=201)


@bp.get("/me/api-keys")
@timing
@require_auth
def list_api_keys():
    user_id = current_user_id()
    keys = get_api_key_service(user_id).list(user_id)
    return json_response({"data": api_key_schema.dump(keys, many=True)})


@bp.delete("/me/api-keys/<string:key_id>")
@timing
@require_auth
def delete_api_key(key_id: str):
    user_id = current_user_id()
    get_api_key_service(user_id).delete(user_id, key_id)
    return "", 204
