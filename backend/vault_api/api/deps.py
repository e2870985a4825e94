"""Shared API helpers: auth guards, service wiring and response helpers."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, TypeVar, cast

from flask import Flask, Response, current_app, g, jsonify, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from vault_api.core.extensions import get_redis
from vault_api.infra.crypto.bcrypt_hasher import BcryptPasswordHasher
from vault_api.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from vault_api.infra.redis.redis_session_store import RedisSessionStore
from vault_api.infra.sqlalchemy.session_store import SqlAlchemySessionStore
from vault_api.infra.sqlalchemy.user_store import SqlAlchemyUserStore
from vault_api.services import ApiKeyService, AuthService, ServiceContext, UserService
from vault_api.services._shared.ports import (
    Clock,
    InMemorySessionStore,
    PasswordHasher,
    SessionStore,
    SystemClock,
    UserStore,
)
from vault_api.services.auth import AuthTokenConfig

F = TypeVar("F", bound=Callable[..., Any])

EXTENSION_KEY = "vault_ports"


@dataclass(slots=True)
class Ports:
    """Process-wide adapters shared by every request of one app."""

    clock: Clock
    hasher: PasswordHasher
    users: UserStore
    sessions: SessionStore
    token_cfg: AuthTokenConfig


def build_session_store(app: Flask, clock: Clock) -> SessionStore:
    """Select the refresh-session adapter from ``SESSION_STORE_BACKEND``."""

    backend = app.config["SESSION_STORE_BACKEND"]
    if backend == "redis":
        return RedisSessionStore(r=get_redis(), clock=clock)
    if backend == "memory":
        return InMemorySessionStore(clock=clock)
    return SqlAlchemySessionStore(clock=clock)


def build_ports(app: Flask) -> Ports:
    clock = SystemClock()
    hasher = BcryptPasswordHasher(rounds=app.config["BCRYPT_ROUNDS"])
    return Ports(
        clock=clock,
        hasher=hasher,
        users=SqlAlchemyUserStore(hasher),
        sessions=build_session_store(app, clock),
        token_cfg=AuthTokenConfig(
            refresh_expires=timedelta(days=app.config["REFRESH_TOKEN_TTL_DAYS"])
        ),
    )


def get_ports() -> Ports:
    """Return the adapters of the current app, building them on first use."""

    ports = current_app.extensions.get(EXTENSION_KEY)
    if ports is None:
        ports = build_ports(current_app)
        current_app.extensions[EXTENSION_KEY] = ports
    return cast(Ports, ports)


def service_context(actor_id: str | None = None) -> ServiceContext:
    return ServiceContext(actor_id=actor_id, request_id=getattr(g, "request_id", None))


def get_auth_service(actor_id: str | None = None) -> AuthService:
    ports = get_ports()
    return AuthService(
        users=ports.users,
        sessions=ports.sessions,
        tokens=JWTTokenProvider(),
        hasher=ports.hasher,
        clock=ports.clock,
        token_cfg=ports.token_cfg,
        ctx=service_context(actor_id),
    )


def get_user_service(actor_id: str | None = None) -> UserService:
    return UserService(users=get_ports().users, ctx=service_context(actor_id))


def get_api_key_service(actor_id: str | None = None) -> ApiKeyService:
    ports = get_ports()
    return ApiKeyService(hasher=ports.hasher, clock=ports.clock, ctx=service_context(actor_id))


def require_auth(func: F) -> F:
    """Ensure the request carries a valid JWT access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> str:
    """Return the ``sub`` claim of the verified access token."""

    return str(get_jwt_identity())


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
