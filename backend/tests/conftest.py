"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker
from vault_api.core.config import TestingConfig
from vault_api.core.extensions import db as _db  # Flask-SQLAlchemy instance
from vault_api.factory import create_app  # application factory under test
from vault_api.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from vault_api.services._shared.ports import (
    FixedClock,
    InMemorySessionStore,
    InMemoryUserStore,
    PlainTextHasher,
    StubTokenProvider,
)

from tests.helpers.utils import bearer


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Keeps bcrypt at its minimum cost.
    - Avoids hitting external services (database session backend, no Redis).
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_JSON = False
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; automatically rolled
        back after each test.

    Notes
    -----
    The fixture mirrors the SQLAlchemy 2.0 pattern for transactional tests: it
    begins a top-level transaction, starts a SAVEPOINT per test, and reinstalls
    the SAVEPOINT whenever SQLAlchemy ends one. Units of work committing
    through ``db.session`` therefore only release their own SAVEPOINT.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, future=True, autoflush=False)
    scoped = scoped_session(SessionFactory)

    # 3) SAVEPOINT per test
    nested = connection.begin_nested()

    # 4) Re-create SAVEPOINT when the previous nested transaction ends
    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # 5) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def client(app, session):
    """Return a Flask test client sharing the transactional session."""
    return app.test_client()


# -- In-memory ports -----------------------------------------------------------


@pytest.fixture()
def clock() -> FixedClock:
    """Deterministic clock starting at 2024-01-01T00:00:00Z."""
    return FixedClock(datetime(2024, 1, 1, tzinfo=UTC))


@pytest.fixture()
def hasher() -> PlainTextHasher:
    return PlainTextHasher()


@pytest.fixture()
def memory_users(hasher, clock) -> InMemoryUserStore:
    return InMemoryUserStore(hasher, clock=clock)


@pytest.fixture()
def memory_sessions(clock) -> InMemorySessionStore:
    return InMemorySessionStore(clock=clock)


@pytest.fixture()
def stub_tokens() -> StubTokenProvider:
    return StubTokenProvider()


# -- Authenticated requests ----------------------------------------------------


@pytest.fixture()
def user(session):
    """Persist and return a member user whose credential is ``Passw0rd!``."""
    from tests.factories.user import UserFactory

    return UserFactory()


@pytest.fixture()
def auth_token(app, user) -> str:
    """Generate a valid access token for ``user``."""
    with app.app_context():
        return JWTTokenProvider().create_access_token(user.id, user.username)


@pytest.fixture()
def auth_header(auth_token: str) -> dict[str, str]:
    """Authorization header for authenticated requests."""
    return bearer(auth_token)


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper to the transactional session fixture.

    Tests that never touch the database (pure in-memory port tests) do not
    request ``session`` and are left alone.
    """
    if "session" not in request.fixturenames:
        yield
        return
    from tests.factories import bind_session

    bind_session(request.getfixturevalue("session"))
    yield
    bind_session(None)
