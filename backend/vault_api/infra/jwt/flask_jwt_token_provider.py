# vault_api/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

from vault_api.services._shared.ports.token_provider import new_refresh_token

#: Display claim carried next to ``sub``.
USERNAME_CLAIM = "username"


@dataclass(slots=True)
class JWTTokenProvider:
    """
    Adapter for Flask-JWT-Extended.

    Access tokens are JWTs signed with ``JWT_SECRET_KEY``; lifetime, issuer
    and audience come from ``JWT_ACCESS_TOKEN_EXPIRES``,
    ``JWT_ENCODE_ISSUER`` and ``JWT_ENCODE_AUDIENCE``. Refresh tokens are
    NOT JWTs: they are opaque random strings whose only meaning is a lookup
    into the session store.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_access_token(self, user_id: str, username: str) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        return cast(
            str,
            _create_access(
                identity=str(user_id),
                additional_claims={USERNAME_CLAIM: username},
                fresh=False,
            ),
        )

    def create_refresh_token(self, user_id: str) -> str:
        return new_refresh_token()

    def decode(self, token: str) -> dict[str, Any]:
        """Verify signature, issuer, audience and expiry; return the claims.

        :raises jwt.exceptions.PyJWTError: On any verification failure.
        """
        from flask_jwt_extended import decode_token

        return cast(dict[str, Any], decode_token(token))
