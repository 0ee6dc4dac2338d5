"""Tests for the Redis cache adapter."""

import json

from redis.exceptions import ConnectionError as RedisConnectionError

from reeldine.adapters.redis_cache import RedisCache
from reeldine.services.cache import InMemoryCache


class _FakeRedis:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.closed = False

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self.values[key] = value
        self.ttls[key] = ttl

    def close(self) -> None:
        self.closed = True


class _DownRedis:
    def get(self, key: str) -> str | None:
        raise RedisConnectionError("connection refused")

    def setex(self, key: str, ttl: int, value: str) -> None:
        raise RedisConnectionError("connection refused")


def test_redis_cache_roundtrip() -> None:
    client = _FakeRedis()
    cache = RedisCache(client=client)

    cache.set("search:foods:abc", {"foods": [], "pagination": {}}, 300)

    assert client.ttls["search:foods:abc"] == 300
    assert json.loads(client.values["search:foods:abc"]) == {
        "foods": [],
        "pagination": {},
    }
    assert cache.get("search:foods:abc") == {"foods": [], "pagination": {}}

    cache.close()
    assert client.closed is True


def test_redis_cache_discards_corrupt_entries() -> None:
    client = _FakeRedis()
    client.values["broken"] = "{not json"

    assert RedisCache(client=client).get("broken") is None


def test_redis_outage_reads_as_miss(app_logs) -> None:
    cache = RedisCache(client=_DownRedis())

    cache.set("key", {"a": 1}, 60)

    assert cache.get("key") is None
    assert "Redis get failed" in app_logs.text
    assert "Redis set failed" in app_logs.text


def test_in_memory_cache_expires_entries() -> None:
    cache = InMemoryCache()
    cache.set("fresh", [1, 2], 60)
    cache.set("stale", [3], 0)

    assert cache.get("fresh") == [1, 2]
    assert cache.get("stale") is None
