"""Cache keys and CacheService behaviour with a mocked Redis client."""

from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from docsearch.core.config import Settings
from docsearch.infrastructure.cache import CacheService, autocomplete_key, autocomplete_pattern


class TestAutocompleteKey:
    def test_format(self) -> None:
        assert autocomplete_key("ALL", " Java ", 10) == "autocomplete:all:10:java"

    def test_separator_in_prefix_is_encoded(self) -> None:
        key = autocomplete_key("title", "a:b", 5)
        assert key == "autocomplete:title:5:a%3Ab"

    def test_separator_in_field_rejected(self) -> None:
        with pytest.raises(ValueError):
            autocomplete_key("ti:tle", "java", 5)

    def test_pattern_matches_keys(self) -> None:
        assert autocomplete_pattern() == "autocomplete:*"


def _settings(**overrides) -> Settings:
    return Settings(redis_enabled=True, cache_ttl_autocomplete=60, **overrides)


class TestCacheService:
    async def test_get_deserializes_json(self) -> None:
        client = AsyncMock()
        client.get = AsyncMock(return_value='[{"text": "Java"}]')
        cache = CacheService(redis_client=client, settings=_settings())

        assert await cache.get("k") == [{"text": "Java"}]

    async def test_miss_returns_none(self) -> None:
        client = AsyncMock()
        client.get = AsyncMock(return_value=None)
        cache = CacheService(redis_client=client, settings=_settings())

        assert await cache.get("k") is None

    async def test_set_uses_default_ttl(self) -> None:
        client = AsyncMock()
        cache = CacheService(redis_client=client, settings=_settings())

        assert await cache.set("k", {"a": 1}) is True
        client.setex.assert_awaited_once_with("k", 60, '{"a": 1}')

    async def test_redis_error_degrades_to_miss(self) -> None:
        client = AsyncMock()
        client.get = AsyncMock(side_effect=redis.RedisError("boom"))
        cache = CacheService(redis_client=client, settings=_settings())

        assert await cache.get("k") is None

    async def test_disabled_cache_is_unavailable(self) -> None:
        cache = CacheService(settings=Settings(redis_enabled=False))
        await cache.connect()

        assert cache.is_available() is False
        assert await cache.get("k") is None
        assert await cache.set("k", 1) is False
        assert await cache.delete_pattern("*") == 0

    async def test_disconnect_closes_client(self) -> None:
        client = AsyncMock()
        cache = CacheService(redis_client=client, settings=_settings())

        await cache.disconnect()

        client.aclose.assert_awaited_once()
        assert cache.is_available() is False
