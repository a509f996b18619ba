"""Integration tests for authentication endpoints."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD
from tests.helpers.http import bearer, json_headers

STRONG = "Str0ng!pass"


def _register(client, email="new@example.com", password=STRONG, **extra):
    return client.post("/api/v1/auth/register", json={"email": email, "password": password, **extra})


def test_register_login_refresh_logout_flow(client) -> None:
    """A user can register, log in, rotate the refresh token and log out."""

    resp = _register(client, first_name="Nia")
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["role"] == "USER"
    assert data["tokens"]["token_type"] == "Bearer"
    assert data["tokens"]["expires_in"] == 3600

    resp = client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": STRONG})
    assert resp.status_code == 200
    tokens = resp.get_json()["data"]["tokens"]

    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert resp.status_code == 200
    rotated = resp.get_json()["data"]
    assert rotated["refresh_token"] != tokens["refresh_token"]

    # The old refresh token is single use.
    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "auth.invalid_refresh_token"

    resp = client.post("/api/v1/auth/logout", headers=bearer(rotated["access_token"]))
    assert resp.status_code == 204

    resp = client.get("/api/v1/auth/me", headers=bearer(rotated["access_token"]))
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "auth.token_revoked"

    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": rotated["refresh_token"]})
    assert resp.status_code == 401


def test_register_duplicate_email_conflicts(client, user) -> None:
    resp = _register(client, email=user.email)
    assert resp.status_code == 409
    body = resp.get_json()
    assert body["code"] == "auth.email_taken"
    assert resp.mimetype == "application/problem+json"


def test_register_rejects_weak_password(client) -> None:
    resp = _register(client, password="alllowercase")
    assert resp.status_code == 422
    assert "password" in resp.get_json()["details"]["errors"]


def test_login_with_wrong_password(client, user, fake_redis) -> None:
    resp = client.post("/api/v1/auth/login", json={"email": user.email, "password": "Wr0ng!pass"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "auth.invalid_credentials"
    assert fake_redis.dbsize() == 0


def test_me_endpoint_requires_auth(client, auth_header, user) -> None:
    """Authenticated request to ``/me`` returns user info."""

    resp = client.get("/api/v1/auth/me", headers=auth_header)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["id"] == user.id
    assert data["email"] == user.email
    assert "password_hash" not in data


def test_missing_and_malformed_bearer(client) -> None:
    resp = client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "auth.token_missing"

    resp = client.get("/api/v1/auth/me", headers={"Authorization": "Basic abc"})
    assert resp.get_json()["code"] == "auth.token_missing"

    resp = client.get("/api/v1/auth/me", headers=bearer("not.a.jwt"))
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "auth.token_invalid"


def test_sessions_lists_metadata_without_tokens(client, user, login) -> None:
    login(user.email)
    tokens = login(user.email)

    resp = client.get(
        "/api/v1/auth/sessions",
        headers={**bearer(tokens["access_token"]), "User-Agent": "browser/2"},
    )
    assert resp.status_code == 200
    sessions = resp.get_json()["data"]
    assert len(sessions) == 2
    assert all("refresh_token" not in s and "token" not in s for s in sessions)
    assert all(s["expires_at"] > s["created_at"] for s in sessions)


def test_refresh_records_client_metadata(client, user, tokens) -> None:
    pair = tokens.issue_token_pair(user.id, user.role)

    resp = client.post(
        "/api/v1/auth/refresh",
        json={"refresh_token": pair.refresh_token},
        headers={"User-Agent": "agent/9", "X-Forwarded-For": "198.51.100.7"},
    )
    assert resp.status_code == 200

    [record] = tokens.list_sessions(user.id)
    assert record.user_agent == "agent/9"
    assert record.ip_address == "198.51.100.7"


def test_errors_are_translated(client) -> None:
    resp = client.get("/api/v1/auth/me", headers=json_headers(language="es-ES,es;q=0.9"))
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "Falta el token de autenticación."

    resp = client.get("/api/v1/auth/me", headers=json_headers(language="de"))
    assert resp.get_json()["detail"] == "Authentication token is missing."


def test_login_uses_default_password_fixture(client, user) -> None:
    resp = client.post("/api/v1/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["user"]["id"] == user.id
