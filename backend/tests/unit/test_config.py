"""Unit tests for :mod:`vault_api.core.config`."""

from __future__ import annotations

import pytest
from vault_api.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
    validate_config,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("Yes", True), (" on ", True), ("0", False), ("nope", False)],
)
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("VAULT_FLAG", raw)
    assert env_bool("VAULT_FLAG") is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("VAULT_FLAG", raising=False)
    assert env_bool("VAULT_FLAG", True) is True


def test_env_int(monkeypatch):
    monkeypatch.setenv("VAULT_N", " 42 ")
    assert env_int("VAULT_N", 1) == 42
    monkeypatch.setenv("VAULT_N", "")
    assert env_int("VAULT_N", 7) == 7
    monkeypatch.setenv("VAULT_N", "abc")
    with pytest.raises(ValueError):
        env_int("VAULT_N", 1)


@pytest.mark.parametrize(
    ("name", "cls"),
    [("testing", TestingConfig), ("PRODUCTION", ProductionConfig), ("weird", DevelopmentConfig)],
)
def test_get_config(monkeypatch, name, cls):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is cls


class TestValidateConfig:
    def test_testing_config_is_accepted(self):
        validate_config({"TESTING": True, "SESSION_STORE_BACKEND": "database"})

    def test_unknown_backend(self):
        with pytest.raises(RuntimeError, match="SESSION_STORE_BACKEND"):
            validate_config({"TESTING": True, "SESSION_STORE_BACKEND": "memcached"})

    def test_redis_requires_url(self):
        with pytest.raises(RuntimeError, match="REDIS_URL"):
            validate_config({"TESTING": True, "SESSION_STORE_BACKEND": "redis"})

    def test_production_requires_secrets(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        monkeypatch.setenv("DATABASE_URL", "postgresql://db/vault")
        with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
            validate_config({"SESSION_STORE_BACKEND": "database"})

        monkeypatch.setenv("JWT_SECRET_KEY", "x" * 32)
        monkeypatch.delenv("DATABASE_URL")
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            validate_config({"SESSION_STORE_BACKEND": "database"})

        monkeypatch.setenv("DATABASE_URL", "postgresql://db/vault")
        validate_config({"SESSION_STORE_BACKEND": "database"})
