"""JWTTokenProvider on top of flask-jwt-extended."""

from __future__ import annotations

import jwt as pyjwt
import pytest
from freezegun import freeze_time
from vault_api.infra.jwt.flask_jwt_token_provider import JWTTokenProvider


@pytest.fixture()
def provider(app):
    with app.app_context():
        yield JWTTokenProvider()


def test_access_token_claims(provider, app):
    token = provider.create_access_token("user-1", "alice")
    claims = provider.decode(token)

    assert claims["sub"] == "user-1"
    assert claims["username"] == "alice"
    assert claims["type"] == "access"
    assert claims["iss"] == app.config["JWT_ENCODE_ISSUER"]
    assert claims["aud"] == app.config["JWT_ENCODE_AUDIENCE"]
    assert claims["exp"] - claims["iat"] == 15 * 60


def test_wrong_audience_is_rejected(provider, app):
    token = provider.create_access_token("user-1", "alice")
    with pytest.raises(pyjwt.InvalidAudienceError):
        pyjwt.decode(
            token,
            app.config["JWT_SECRET_KEY"],
            algorithms=["HS256"],
            audience="someone-else",
        )


def test_expired_access_token(provider):
    with freeze_time("2024-01-01 00:00:00"):
        token = provider.create_access_token("user-1", "alice")
    with freeze_time("2024-01-01 00:16:00"), pytest.raises(pyjwt.ExpiredSignatureError):
        provider.decode(token)


def test_refresh_tokens_are_opaque_and_unique(provider):
    tokens = {provider.create_refresh_token("user-1") for _ in range(50)}
    assert len(tokens) == 50
    assert all("." not in t and len(t) >= 43 for t in tokens)
