"""Redis-backed cache for search result pages."""

import json
import logging
from dataclasses import dataclass

import redis
from redis.exceptions import RedisError

from reeldine.services.cache import Cache

_logger = logging.getLogger(__name__)


@dataclass
class RedisCache(Cache):
    """Stores JSON values with ``SETEX``; an unreachable Redis reads as a miss."""

    client: redis.Redis

    @classmethod
    def create(cls, url: str) -> "RedisCache":
        return cls(
            client=redis.Redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=1,
                socket_timeout=1,
            )
        )

    def get(self, key: str) -> object | None:
        try:
            raw = self.client.get(key)
        except RedisError as exc:
            _logger.warning("Redis get failed for %s: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            _logger.warning("Discarding undecodable cache entry %s", key)
            return None

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        try:
            self.client.setex(key, ttl_seconds, json.dumps(value))
        except RedisError as exc:
            _logger.warning("Redis set failed for %s: %s", key, exc)

    def close(self) -> None:
        self.client.close()
