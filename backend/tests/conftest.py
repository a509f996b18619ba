"""Pytest fixtures building an isolated application per test.

Each test gets its own Flask app backed by an in-memory SQLite database and
a fresh :class:`fakeredis.FakeRedis`, so neither rows nor token keys leak
between cases.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from typing import Any

import fakeredis
import pytest
from flask import Flask

from authkit.core.config import TestingConfig
from authkit.core.extensions import db as _db  # Flask-SQLAlchemy instance
from authkit.core.extensions import get_token_lifecycle
from authkit.factory import create_app  # application factory under test
from authkit.services._shared.roles import Role
from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.http import bearer


@pytest.fixture()
def fake_redis() -> fakeredis.FakeRedis:
    """Provide a fresh FakeRedis instance for each test."""
    return fakeredis.FakeRedis()


@pytest.fixture()
def app(fake_redis) -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`TestingConfig`, its tables created and an
        application context pushed for the duration of the test.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig, redis_client=fake_redis)
    application.logger.setLevel("WARNING")
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(app) -> Any:
    """Return the Flask-scoped session bound to the test application."""
    return _db.session


@pytest.fixture()
def client(app: Flask) -> Any:
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def tokens(app):
    """Token lifecycle service wired by the application factory."""
    return get_token_lifecycle()


@pytest.fixture()
def user(session):
    """Persist and return a regular user."""
    return UserFactory()


@pytest.fixture()
def admin(session):
    """Persist and return an administrator."""
    return UserFactory(role=Role.ADMIN)


@pytest.fixture()
def login(client):
    """Return a helper that logs in through the API and yields the token pair."""

    def _login(email: str, password: str = DEFAULT_PASSWORD) -> dict[str, Any]:
        resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()["data"]["tokens"]

    return _login


@pytest.fixture()
def auth_header(user, login) -> dict[str, str]:
    """Authorization header for ``user``."""
    return bearer(login(user.email)["access_token"])
