"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from vault_api.core.config import BaseConfig, get_config, validate_config
from vault_api.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :raises RuntimeError: When the loaded configuration is unusable (see
        :func:`vault_api.core.config.validate_config`) or the Redis session
        backend cannot be reached.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    validate_config(app.config)
    configure_logging(
        app.config.get("LOG_LEVEL", "INFO"),
        json_output=bool(app.config.get("LOG_JSON", True)),
    )

    # Proxy headers if running behind a reverse proxy
    from vault_api.core import proxy

    proxy.init_app(app)

    from vault_api.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from vault_api.core import cors

    cors.init_app(app)

    from vault_api.api import init_app as init_api

    init_api(app)

    from vault_api.core import errors

    errors.init_app(app)

    from vault_api import cli as app_cli

    app_cli.init_app(app)

    app.logger.info(
        "Application created",
        extra={"backend": app.config["SESSION_STORE_BACKEND"]},
    )
    return app
