"""Version 1 of the HTTP API.

``REGISTRY`` lists ``(blueprint, relative_prefix)`` pairs mounted beneath
``/api/v1`` by :func:`vault_api.api.init_app`.
"""

from __future__ import annotations

from flask import Blueprint

from .auth import bp as auth
from .health import bp as health
from .users import bp as users

API_VERSION = "v1"

REGISTRY: list[tuple[Blueprint, str]] = [
    (health, ""),
    (auth, "auth"),
    (users, "users"),
]
