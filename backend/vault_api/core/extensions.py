"""Extension singletons, created at import time and bound in :func:`init_app`."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

REDIS_EXTENSION_KEY = "redis_client"

# Deterministic constraint names. Store adapters recognise integrity errors
# by these names (``uq_users_username``...), and Alembic needs them to
# drop constraints on SQLite batch migrations.
NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "ix": "ix_%(table_name)s_%(column_0_name)s",
}

db = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    session_options={"autoflush": False},
)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()


def connect_redis(url: str, *, timeout: float) -> redis.Redis:
    """Open a Redis client and check it answers ``PING``.

    :raises RuntimeError: When the server cannot be reached.
    """
    client = redis.Redis.from_url(
        url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
        decode_responses=True,
    )
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """Bind SQLAlchemy, Flask-Migrate and JWT; connect Redis when it backs sessions.

    Importing :mod:`vault_api.models` here registers every table on
    ``db.metadata`` before ``create_all`` or ``flask db`` looks at it.
    """
    db.init_app(app)

    from vault_api import models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    if app.config.get("SESSION_STORE_BACKEND") == "redis" and app.config.get("REDIS_URL"):
        app.extensions[REDIS_EXTENSION_KEY] = connect_redis(
            app.config["REDIS_URL"],
            timeout=float(app.config.get("REDIS_SOCKET_TIMEOUT", 2.0)),
        )


def get_redis() -> redis.Redis:
    """Return the Redis client of the current app.

    :raises RuntimeError: When the app does not use the Redis backend.
    """
    client = current_app.extensions.get(REDIS_EXTENSION_KEY)
    if client is None:
        raise RuntimeError("Redis client is not initialized for this app.")
    return client
