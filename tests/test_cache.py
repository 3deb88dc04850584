"""Tests for the Redis record cache."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from qrlink.database import cache as cache_module
from qrlink.database.cache import RedisCache
from qrlink.database.models import Link


@pytest.fixture
def link():
    return Link(
        id=7,
        short_id="AbC123xY",
        original_url="https://example.com",
        expires_at="2030-01-01T12:00:00.000Z",
        created_at=datetime(2029, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def cache():
    redis_cache = RedisCache(redis_url="redis://localhost:6379/0", ttl_seconds=60)
    redis_cache.client = AsyncMock()
    return redis_cache


@pytest.mark.asyncio
class TestRedisCache:
    """Test Redis cache with a mocked client."""

    async def test_disabled_without_url(self, link):
        disabled = RedisCache(redis_url=None)
        await disabled.connect()

        assert not disabled.enabled
        assert await disabled.get_link("AbC123xY") is None
        assert not await disabled.set_link(link)

    async def test_set_link(self, cache, link):
        assert await cache.set_link(link)

        key, ttl, raw = cache.client.setex.await_args.args
        assert key == "qrlink:link:AbC123xY"
        assert ttl == 60
        assert json.loads(raw)["expires_at"] == "2030-01-01T12:00:00.000Z"

    async def test_get_link(self, cache, link):
        cache.client.get.return_value = json.dumps(link.to_dict())
        assert await cache.get_link("AbC123xY") == link

    async def test_get_miss(self, cache):
        cache.client.get.return_value = None
        assert await cache.get_link("AbC123xY") is None

    async def test_malformed_entry_is_dropped(self, cache):
        cache.client.get.return_value = "{not json"
        cache.client.delete.return_value = 1

        assert await cache.get_link("AbC123xY") is None
        cache.client.delete.assert_awaited_once_with("qrlink:link:AbC123xY")

    async def test_errors_degrade_to_miss(self, cache, link):
        cache.client.get.side_effect = RedisConnectionError("down")
        cache.client.setex.side_effect = RedisConnectionError("down")

        assert await cache.get_link("AbC123xY") is None
        assert not await cache.set_link(link)

    async def test_failed_connect_disables_cache(self, monkeypatch):
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("refused")
        monkeypatch.setattr(cache_module.redis, "from_url", lambda *a, **kw: client)

        redis_cache = RedisCache(redis_url="redis://localhost:6379/0")
        await redis_cache.connect()

        assert not redis_cache.enabled
