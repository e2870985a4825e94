"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from vault_api.api.deps import json_response, timing
from vault_api.core.extensions import db, get_redis

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and session-store health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"

    backend = current_app.config["SESSION_STORE_BACKEND"]
    sessions_status = "ok"
    if backend == "redis":
        try:
            get_redis().ping()
        except RedisError:  # pragma: no cover - depends on Redis availability
            current_app.logger.exception("healthcheck.redis_error")
            sessions_status = "fail"

    version = current_app.config.get("APP_VERSION", "dev")
    status = "ok" if db_status == sessions_status == "ok" else "degraded"
    payload = {
        "status": status,
        "db": db_status,
        "sessions": {"backend": backend, "status": sessions_status},
        "version": version,
    }
    return json_response(payload)
