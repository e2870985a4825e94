"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, request

from vault_api.api.deps import get_auth_service, json_response, timing
from vault_api.schemas import (
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterResponseSchema,
    RegisterSchema,
    TokenPairSchema,
)
from vault_api.services import LoginIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
register_response_schema = RegisterResponseSchema()
login_schema = LoginSchema()
login_response_schema = LoginResponseSchema()
refresh_schema = RefreshSchema()
token_pair_schema = TokenPairSchema()


@bp.post("/register")
@timing
def register():
    """Create an account. Tokens are obtained separately via ``/auth/login``."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    out = get_auth_service().register(RegisterIn(**payload))
    return json_response({"data": register_response_schema.dump(out)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate a user and return an access/refresh token pair."""

    payload = login_schema.load(request.get_json(silent=True) or {})
    out = get_auth_service().login(LoginIn(**payload))
    return json_response({"data": login_response_schema.dump(out)})


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token; the presented token cannot be used again."""

    payload = refresh_schema.load(request.get_json(silent=True) or {})
    out = get_auth_service().refresh(RefreshIn(**payload))
    return json_response({"data": token_pair_schema.dump(out)})
