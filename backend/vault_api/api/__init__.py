"""HTTP surface: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def join_prefix(*segments: str) -> str:
    """Join URL segments into ``/a/b/c``, ignoring empty ones and stray slashes."""
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> list[str]:
    """Mount ``(blueprint, relative_prefix)`` pairs beneath ``base_prefix``.

    An empty relative prefix mounts the blueprint at the version root
    (``/api/v1/health``).

    :returns: The mounted prefixes, in registration order.
    :rtype: list[str]
    """
    mounted = []
    for bp, rel_prefix in entries:
        prefix = join_prefix(base_prefix, rel_prefix)
        app.register_blueprint(bp, url_prefix=prefix)
        mounted.append(prefix)
    return mounted


def init_app(app: Flask) -> None:
    from vault_api.api.v1 import API_VERSION, REGISTRY

    base = join_prefix(app.config.get("API_BASE_PREFIX", "/api"), API_VERSION)
    mounted = register_blueprint_group(app, base_prefix=base, entries=REGISTRY)
    app.logger.debug("API mounted", extra={"endpoint": ",".join(mounted)})


__all__ = ["init_app", "join_prefix", "register_blueprint_group"]
