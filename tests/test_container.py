"""Tests for container wiring."""

import asyncio

from reeldine.adapters.redis_cache import RedisCache
from reeldine.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.search_service is not None
    assert isinstance(container.cache, RedisCache)
    assert container.suggestion_service.available is True
    assert container.notification_service.capacity == 100
    asyncio.run(container.close_resources())


def test_build_container_without_openai_key(settings) -> None:
    container = build_container(settings.model_copy(update={"openai_api_key": None}))

    assert container.suggestion_service.available is False
    asyncio.run(container.close_resources())
