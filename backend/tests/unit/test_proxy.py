"""``ProxyFix`` wiring in :mod:`vault_api.core.proxy`."""

from __future__ import annotations

import pytest
from flask import Flask, request
from vault_api.core import proxy
from werkzeug.middleware.proxy_fix import ProxyFix


def _app(**config) -> Flask:
    app = Flask(__name__)
    app.config.update(config)

    @app.get("/ip")
    def ip():
        return {"addr": request.remote_addr, "scheme": request.scheme}

    return app


def test_disabled_by_default():
    app = _app()
    assert proxy.init_app(app) is False
    assert not isinstance(app.wsgi_app, ProxyFix)


def test_trusts_configured_hops():
    app = _app(TRUST_PROXY=True, PROXY_HOPS=1)
    assert proxy.init_app(app) is True

    resp = app.test_client().get(
        "/ip",
        headers={"X-Forwarded-For": "203.0.113.7", "X-Forwarded-Proto": "https"},
    )
    assert resp.get_json() == {"addr": "203.0.113.7", "scheme": "https"}


def test_rejects_zero_hops():
    with pytest.raises(RuntimeError):
        proxy.init_app(_app(TRUST_PROXY=True, PROXY_HOPS=0))
