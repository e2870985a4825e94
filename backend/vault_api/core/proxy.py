"""Reverse-proxy awareness for the WSGI pipeline."""

from __future__ import annotations

import logging

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

log = logging.getLogger(__name__)


def init_app(app: Flask) -> bool:
    """Wrap ``app.wsgi_app`` in :class:`~werkzeug.middleware.proxy_fix.ProxyFix`.

    Off unless ``TRUST_PROXY`` is set. ``PROXY_HOPS`` proxies are trusted
    for the client address and scheme, so ``request.remote_addr`` in auth
    logs is the caller rather than the load balancer. Host and prefix
    headers are never trusted.

    :returns: ``True`` when the middleware was installed.
    :rtype: bool
    """
    if not app.config.get("TRUST_PROXY", False):
        return False
    hops = int(app.config.get("PROXY_HOPS", 1))
    if hops < 1:
        raise RuntimeError(f"PROXY_HOPS must be at least 1, got {hops}")
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops)  # type: ignore[method-assign]
    log.debug("ProxyFix installed", extra={"operation": "proxy_fix"})
    return True
