"""Flask CLI commands for refresh-session maintenance."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy.exc import SQLAlchemyError

from vault_api.api.deps import get_ports
from vault_api.infra.redis.redis_session_store import RedisSessionStore
from vault_api.infra.sqlalchemy.session_store import SqlAlchemySessionStore

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Raise logging verbosity for session modules when requested."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger("vault_api.infra").setLevel(level)
    LOGGER.setLevel(level)


@click.group("sessions")
@click.option("--verbose", is_flag=True, help="Enable verbose logging.")
def sessions_cli(verbose: bool) -> None:
    """Refresh-session maintenance commands."""
    _configure_logging(verbose)


@sessions_cli.command("purge-expired")
@with_appcontext
def purge_expired_command() -> None:
    """Delete expired refresh sessions (database rows or stale Redis index entries)."""
    store = get_ports().sessions
    if not isinstance(store, SqlAlchemySessionStore | RedisSessionStore):
        backend = current_app.config["SESSION_STORE_BACKEND"]
        click.echo(f"Nothing to purge: the {backend!r} backend keeps sessions in process memory.")
        return

    try:
        removed = store.purge_expired()
    except (SQLAlchemyError, RedisError) as exc:  # pragma: no cover - CLI safeguard
        raise click.ClickException(f"Purge failed: {exc}") from exc
    LOGGER.info("Purged expired sessions", extra={"operation": "purge_expired"})
    click.echo(f"Purged {removed} expired session(s).")


@sessions_cli.command("revoke-user")
@click.argument("user_id")
@with_appcontext
def revoke_user_command(user_id: str) -> None:
    """Revoke every refresh session owned by USER_ID."""
    revoked = get_ports().sessions.revoke_all(user_id)
    LOGGER.info(
        "Revoked sessions from the command line",
        extra={"operation": "revoke_all", "user_id": user_id},
    )
    click.echo(f"Revoked {revoked} session(s) for {user_id}.")
