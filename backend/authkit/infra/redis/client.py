# comments in English; reST docstrings
"""Thin key-value facade over a redis-py client.

Every call is a single Redis command or a single MULTI/EXEC pipeline, so
callers get per-key atomicity and nothing more. Transient connection and
timeout errors are retried by the client's :class:`redis.retry.Retry`
policy; what is left after that surfaces as
:class:`~authkit.services._shared.errors.StoreUnavailableError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import redis  # type: ignore[import-untyped]
from redis.backoff import ExponentialBackoff  # type: ignore[import-untyped]
from redis.client import Pipeline  # type: ignore[import-untyped]
from redis.exceptions import (  # type: ignore[import-untyped]
    ConnectionError as RedisConnectionError,
)
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from redis.exceptions import TimeoutError as RedisTimeoutError  # type: ignore[import-untyped]
from redis.retry import Retry  # type: ignore[import-untyped]

from authkit.services._shared.errors import StoreUnavailableError

log = logging.getLogger(__name__)

T = TypeVar("T")


def build_redis_client(
    url: str,
    *,
    max_retries: int = 3,
    backoff_base: float = 0.05,
    backoff_cap: float = 2.0,
    socket_timeout: float | None = 2.0,
) -> redis.Redis:
    """
    Create a Redis client with a bounded retry policy.

    Delays grow exponentially from ``backoff_base`` up to ``backoff_cap``
    seconds, and at most ``max_retries`` retries are made per command.

    :param url: ``redis://`` or ``rediss://`` connection URL.
    :param max_retries: Retries per command after the first attempt.
    :param backoff_base: First backoff delay in seconds.
    :param backoff_cap: Upper bound for a single delay in seconds.
    :param socket_timeout: Connect/read timeout in seconds.
    :returns: Configured, not yet connected client.
    """
    retry = Retry(ExponentialBackoff(cap=backoff_cap, base=backoff_base), max_retries)
    return redis.Redis.from_url(
        url,
        retry=retry,
        retry_on_error=[RedisConnectionError, RedisTimeoutError],
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
    )


def _s(value: Any) -> str | None:
    """Decode a Redis reply into ``str`` whatever ``decode_responses`` is set to."""
    if value is None:
        return None
    if isinstance(value, bytes | bytearray):
        return value.decode("utf-8")
    return str(value)


class KeyValueStore:
    """
    String and set operations with explicit expiry over one Redis handle.

    :param client: A redis-py client (``redis.Redis`` or ``fakeredis.FakeRedis``).
    """

    def __init__(self, client: redis.Redis) -> None:
        self.client = client

    # -------------------- internals --------------------

    def _call(self, op: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except RedisError as exc:
            log.warning("Key-value store operation %s failed: %s", op, exc)
            raise StoreUnavailableError(f"key-value store {op} failed") from exc

    # -------------------- strings ----------------------

    def get(self, key: str) -> str | None:
        return _s(self._call("get", lambda: self.client.get(key)))

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """
        Store ``value`` under ``key`` for ``ttl_seconds``.

        :raises ValueError: If ``ttl_seconds`` is not positive.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._call("set", lambda: self.client.set(key, value, ex=int(ttl_seconds)))

    def get_and_delete(self, key: str) -> str | None:
        """Atomically delete ``key`` and return its previous value (``GETDEL``)."""
        return _s(self._call("getdel", lambda: self.client.getdel(key)))

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(self._call("delete", lambda: self.client.delete(*keys)))

    def exists(self, key: str) -> bool:
        return int(self._call("exists", lambda: self.client.exists(key))) > 0

    def ttl(self, key: str) -> int:
        """Remaining lifetime in seconds; ``-2`` if missing, ``-1`` if persistent."""
        return int(self._call("ttl", lambda: self.client.ttl(key)))

    def expire(self, key: str, ttl_seconds: int) -> bool:
        return bool(self._call("expire", lambda: self.client.expire(key, int(ttl_seconds))))

    # -------------------- sets -------------------------

    def set_add(self, key: str, member: str, ttl_seconds: int | None = None) -> None:
        """Add ``member`` to the set at ``key`` and optionally reset its expiry."""

        def _run() -> None:
            with self.client.pipeline(transaction=True) as pipe:
                pipe.sadd(key, member)
                if ttl_seconds is not None:
                    pipe.expire(key, int(ttl_seconds))
                pipe.execute()

        self._call("sadd", _run)

    def set_remove(self, key: str, *members: str) -> int:
        if not members:
            return 0
        return int(self._call("srem", lambda: self.client.srem(key, *members)))

    def set_members(self, key: str) -> set[str]:
        raw = self._call("smembers", lambda: self.client.smembers(key))
        return {m for m in (_s(item) for item in raw) if m is not None}

    # -------------------- transactions -----------------

    @contextmanager
    def transaction(self) -> Iterator[Pipeline]:
        """
        Queue commands on a MULTI/EXEC pipeline, executed when the block exits.

        Nothing is sent if the block raises.

        :raises StoreUnavailableError: If the pipeline fails to execute.
        """
        pipe = self.client.pipeline(transaction=True)
        try:
            yield pipe
            self._call("multi", pipe.execute)
        finally:
            pipe.reset()

    # -------------------- lifecycle --------------------

    def ping(self) -> bool:
        return bool(self._call("ping", self.client.ping))

    def close(self) -> None:
        try:
            self.client.close()
        except RedisError:
            log.warning("Error while closing key-value store connection.", exc_info=True)


__all__ = ["KeyValueStore", "build_redis_client"]
