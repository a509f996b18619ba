"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import atexit
import logging
from typing import TYPE_CHECKING, cast

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from authkit.core.durations import format_duration

if TYPE_CHECKING:
    from authkit.infra.redis.client import KeyValueStore
    from authkit.services.tokens.service import TokenLifecycleService

log = logging.getLogger(__name__)

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)

KV_EXTENSION = "kv_store"
TOKENS_EXTENSION = "token_lifecycle"


def init_app(app: Flask, *, redis_client: redis.Redis | None = None) -> None:
    """Initialize SQLAlchemy, migrations, the key-value store and token wiring.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`authkit.models` package to ensure SQLAlchemy metadata is ready
        for migrations.
    redis_client: redis.Redis | None
        Pre-built client (tests pass ``fakeredis.FakeRedis``). When omitted a
        client is built from ``REDIS_URL`` with the configured retry policy.

    Raises
    ------
    RuntimeError
        If the key-value store does not answer ``PING``.
    """
    from authkit.infra.redis.client import KeyValueStore, build_redis_client
    from authkit.services._shared.errors import StoreUnavailableError

    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from authkit import models as _models  # noqa: F401

    migrate.init_app(app, db)

    redis_url = app.config.get("REDIS_URL")
    if redis_client is None:
        if not redis_url:
            raise RuntimeError("REDIS_URL must be configured.")
        redis_client = build_redis_client(
            redis_url,
            max_retries=int(app.config.get("REDIS_MAX_RETRIES", 3)),
            backoff_base=float(app.config.get("REDIS_BACKOFF_BASE", 0.05)),
            backoff_cap=float(app.config.get("REDIS_BACKOFF_CAP", 2.0)),
            socket_timeout=float(app.config.get("REDIS_SOCKET_TIMEOUT", 2.0)),
        )

    kv = KeyValueStore(redis_client)
    try:
        kv.ping()
    except StoreUnavailableError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    atexit.register(kv.close)
    app.extensions[KV_EXTENSION] = kv

    init_auth(app, kv)


def init_auth(app: Flask, kv: KeyValueStore) -> None:
    """Build the token lifecycle once and store it on ``app.extensions``.

    Settings are validated here, so a bad secret or duration stops startup.
    """
    from authkit.core.config import AuthSettings
    from authkit.infra.jwt.pyjwt_token_codec import JWTTokenCodec
    from authkit.infra.redis.redis_blacklist_store import RedisTokenBlacklistStore
    from authkit.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
    from authkit.services.identity.service import IdentityService
    from authkit.services.tokens.service import TokenLifecycleService

    settings = AuthSettings.from_mapping(
        app.config, production=bool(app.config.get("PRODUCTION", False))
    )
    codec = JWTTokenCodec(
        settings.access_secret,
        settings.access_token_ttl,
        algorithm=settings.algorithm,
    )
    app.extensions["auth_settings"] = settings
    app.extensions[TOKENS_EXTENSION] = TokenLifecycleService(
        codec=codec,
        refresh_tokens=RedisRefreshTokenStore(kv=kv, ttl_seconds=settings.refresh_token_ttl),
        blacklist=RedisTokenBlacklistStore(
            kv,
            codec,
            default_ttl=settings.access_token_ttl,
            fail_open=settings.blacklist_fail_open,
        ),
        users=IdentityService(),
    )
    log.info(
        "Token lifecycle ready: access=%s refresh=%s blacklist_fail_open=%s",
        format_duration(settings.access_token_ttl),
        format_duration(settings.refresh_token_ttl),
        settings.blacklist_fail_open,
    )


def get_kv_store() -> KeyValueStore:
    """Return the key-value store bound to the current app."""
    store = current_app.extensions.get(KV_EXTENSION)
    if store is None:
        raise RuntimeError("Key-value store is not initialized. Call init_app() first.")
    return cast("KeyValueStore", store)


def get_token_lifecycle() -> TokenLifecycleService:
    """Return the token lifecycle service bound to the current app."""
    service = current_app.extensions.get(TOKENS_EXTENSION)
    if service is None:
        raise RuntimeError("Token lifecycle is not initialized. Call init_app() first.")
    return cast("TokenLifecycleService", service)
