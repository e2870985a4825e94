"""Cross-origin policy for browser clients of the API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from vault_api.core.logger import REQUEST_ID_HEADER


def parse_origins(raw: str | None) -> list[str] | str:
    """Split ``CORS_ORIGINS``; blank or ``*`` means any origin.

    :returns: ``"*"`` or the explicit origin list.
    """
    origins = [item.strip().rstrip("/") for item in (raw or "").split(",") if item.strip()]
    if not origins or "*" in origins:
        return "*"
    return origins


def init_app(app: Flask) -> None:
    """Allow the configured origins on ``/api/*``.

    Credentials travel as ``Authorization: Bearer`` headers, never as
    cookies, so credentialed CORS stays off and ``Authorization`` is an
    allowed request header instead. The request-id header is exposed so
    browser clients can report it.
    """
    CORS(
        app,
        resources={r"/api/*": {"origins": parse_origins(app.config.get("CORS_ORIGINS"))}},
        supports_credentials=False,
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=int(app.config.get("CORS_MAX_AGE", 600)),
    )
