"""Integration tests for the health endpoint."""

from __future__ import annotations

from redis.exceptions import ConnectionError as RedisConnectionError


def test_health_reports_ok(client) -> None:
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert body["redis"] == "ok"


def test_health_degraded_when_redis_down(client, fake_redis, monkeypatch) -> None:
    def _down(*args, **kwargs):
        raise RedisConnectionError("down")

    monkeypatch.setattr(fake_redis, "ping", _down)

    resp = client.get("/api/v1/health")
    assert resp.status_code == 503
    assert resp.get_json()["redis"] == "fail"


def test_store_outage_on_login_is_503(client, user, fake_redis, monkeypatch) -> None:
    real_pipeline = fake_redis.pipeline

    def _down(*args, **kwargs):
        raise RedisConnectionError("down")

    def _pipeline(*args, **kwargs):
        pipe = real_pipeline(*args, **kwargs)
        pipe.execute = _down
        return pipe

    monkeypatch.setattr(fake_redis, "pipeline", _pipeline)

    resp = client.post("/api/v1/auth/login", json={"email": user.email, "password": "Passw0rd!"})
    assert resp.status_code == 503
    assert resp.get_json()["code"] == "errors.service_unavailable"
