"""Unit tests for the key-value facade over redis-py."""

from __future__ import annotations

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.retry import Retry

from authkit.infra.redis.client import KeyValueStore, build_redis_client
from authkit.services._shared.errors import StoreUnavailableError


class BrokenRedis:
    """Client double whose every command fails like an unreachable server."""

    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise RedisConnectionError("connection refused")

        return _fail


@pytest.fixture
def kv() -> KeyValueStore:
    return KeyValueStore(fakeredis.FakeRedis())


def test_set_get_and_ttl(kv):
    kv.set("k", "v", 30)
    assert kv.get("k") == "v"
    assert 0 < kv.ttl("k") <= 30
    assert kv.exists("k") is True


def test_set_requires_positive_ttl(kv):
    with pytest.raises(ValueError):
        kv.set("k", "v", 0)


def test_get_and_delete_is_single_shot(kv):
    kv.set("k", "v", 30)
    assert kv.get_and_delete("k") == "v"
    assert kv.get_and_delete("k") is None
    assert kv.exists("k") is False


def test_missing_key_reports_minus_two_ttl(kv):
    assert kv.get("nope") is None
    assert kv.ttl("nope") == -2


def test_set_operations(kv):
    kv.set_add("s", "a", ttl_seconds=60)
    kv.set_add("s", "b")
    assert kv.set_members("s") == {"a", "b"}
    assert 0 < kv.ttl("s") <= 60
    assert kv.set_remove("s", "a", "zzz") == 1
    assert kv.set_members("s") == {"b"}
    assert kv.set_remove("s") == 0


def test_delete_counts_removed_keys(kv):
    kv.set("a", "1", 10)
    kv.set("b", "1", 10)
    assert kv.delete("a", "b", "c") == 2
    assert kv.delete() == 0


def test_transaction_executes_all_commands(kv):
    with kv.transaction() as pipe:
        pipe.set("x", "1", ex=10)
        pipe.sadd("xs", "x")
    assert kv.get("x") == "1"
    assert kv.set_members("xs") == {"x"}


def test_transaction_sends_nothing_when_block_raises(kv):
    with pytest.raises(RuntimeError), kv.transaction() as pipe:
        pipe.set("x", "1", ex=10)
        raise RuntimeError("boom")
    assert kv.get("x") is None


def test_redis_errors_surface_as_store_unavailable():
    kv = KeyValueStore(BrokenRedis())
    with pytest.raises(StoreUnavailableError):
        kv.get("k")
    with pytest.raises(StoreUnavailableError):
        kv.ping()


def test_close_swallows_connection_errors():
    KeyValueStore(BrokenRedis()).close()


def test_build_redis_client_configures_retry():
    client = build_redis_client(
        "redis://localhost:6399/0", max_retries=5, backoff_base=0.01, backoff_cap=0.5
    )
    kwargs = client.connection_pool.connection_kwargs
    assert isinstance(kwargs["retry"], Retry)
    assert kwargs["socket_timeout"] == 2.0
