"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

SESSION_BACKENDS: Final[frozenset[str]] = frozenset({"database", "redis", "memory"})


# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: int
        Value returned when the variable is unset or blank.

    Returns
    -------
    int
        Parsed integer.

    Raises
    ------
    ValueError
        If the variable is set but is not a valid integer.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val.strip())


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development placeholder.
    JWT_SECRET_KEY: str
        HMAC key used by ``flask-jwt-extended`` to sign access tokens.
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Access-token lifetime (15 minutes).
    JWT_ENCODE_ISSUER / JWT_DECODE_ISSUER: str
        ``iss`` claim written and required on access tokens.
    JWT_ENCODE_AUDIENCE / JWT_DECODE_AUDIENCE: str
        ``aud`` claim written and required on access tokens.
    REFRESH_TOKEN_TTL_DAYS: int
        Absolute lifetime of a refresh-token session.
    BCRYPT_ROUNDS: int
        bcrypt work factor for credentials and API-key secrets.
    SESSION_STORE_BACKEND: str
        ``database`` (default), ``redis`` or ``memory``.
    REDIS_URL: str | None
        Redis connection string, required by the ``redis`` backend.
    REDIS_SOCKET_TIMEOUT: float
        Seconds before a Redis call gives up.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_ENGINE_OPTIONS: dict
        Keyword arguments forwarded to ``create_engine``.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    LOG_JSON: bool
        Emit JSON log lines when ``True``.
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    TRUST_PROXY: bool
        Apply ``ProxyFix`` to honor ``X-Forwarded-*`` headers.
    PROXY_HOPS: int
        Number of trusted proxies in front of the app.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT_SIGNING_KEY_32_BYTES!")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("JWT_ACCESS_MINUTES", 15))
    JWT_ENCODE_ISSUER = os.getenv("JWT_ISSUER", "vault-api")
    JWT_DECODE_ISSUER = JWT_ENCODE_ISSUER
    JWT_ENCODE_AUDIENCE = os.getenv("JWT_AUDIENCE", "vault-clients")
    JWT_DECODE_AUDIENCE = JWT_ENCODE_AUDIENCE
    JWT_TOKEN_LOCATION = ["headers"]

    # Sessions & hashing
    REFRESH_TOKEN_TTL_DAYS = env_int("REFRESH_TOKEN_TTL_DAYS", 30)
    BCRYPT_ROUNDS = env_int("BCRYPT_ROUNDS", 12)
    SESSION_STORE_BACKEND = os.getenv("SESSION_STORE_BACKEND", "database").strip().lower()

    # Redis
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2.0"))

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {"pool_pre_ping": True}

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, CORS, proxy
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_JSON = env_bool("LOG_JSON", True)
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    TRUST_PROXY = env_bool("TRUST_PROXY", False)
    PROXY_HOPS = env_int("PROXY_HOPS", 1)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    LOG_JSON = env_bool("LOG_JSON", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Drops the bcrypt work factor to the library minimum to keep tests fast.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    JWT_SECRET_KEY = "testing-jwt-secret-key-with-32-bytes-min"
    BCRYPT_ROUNDS = 4
    SESSION_STORE_BACKEND = "database"
    REDIS_URL = None
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled, bounds the connection pool wait
    and caps statement time on PostgreSQL. :func:`validate_config` refuses
    to start without an explicit signing key and database URL.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    TRUST_PROXY = env_bool("TRUST_PROXY", True)
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_timeout": env_int("DB_POOL_TIMEOUT", 5),
        "connect_args": {
            "options": f"-c statement_timeout={env_int('DB_STATEMENT_TIMEOUT_MS', 5000)}"
        },
    }


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_config(config: Mapping[str, Any]) -> None:
    """Fail fast on settings that would leave the service insecure or broken.

    Parameters
    ----------
    config: Mapping[str, Any]
        Loaded Flask configuration.

    Raises
    ------
    RuntimeError
        When a required production secret is missing or the session
        backend is unknown or misconfigured.
    """
    backend = str(config.get("SESSION_STORE_BACKEND", "database")).lower()
    if backend not in SESSION_BACKENDS:
        raise RuntimeError(f"Unknown SESSION_STORE_BACKEND: {backend!r}")
    if backend == "redis" and not config.get("REDIS_URL"):
        raise RuntimeError("SESSION_STORE_BACKEND=redis requires REDIS_URL")

    if config.get("TESTING") or config.get("DEBUG"):
        return
    if not os.getenv("JWT_SECRET_KEY"):
        raise RuntimeError("JWT_SECRET_KEY must be set outside development")
    if not os.getenv("DATABASE_URL"):
        raise RuntimeError("DATABASE_URL must be set outside development")
