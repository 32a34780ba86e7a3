"""Unit tests for MemoryCacheProvider and RedisCacheProvider."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.redis_cache import RedisCacheProvider
from src.utils.errors import CacheStoreError


class _FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


# ======================================================================
# MemoryCacheProvider
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.fixture()
    def clock(self) -> _FakeClock:
        return _FakeClock()

    @pytest.fixture()
    def cache(self, clock: _FakeClock) -> MemoryCacheProvider:
        return MemoryCacheProvider(max_size=100, ttl=3600, timer=clock)

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, cache: MemoryCacheProvider) -> None:
        assert await cache.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "value1")
        assert await cache.get("key1") == "value1"

    @pytest.mark.asyncio
    async def test_set_overwrites_existing(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "old")
        await cache.set("key1", "new")
        assert await cache.get("key1") == "new"

    @pytest.mark.asyncio
    async def test_delete_removes_key(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "value1")
        await cache.delete("key1")
        assert await cache.get("key1") is None

    @pytest.mark.asyncio
    async def test_delete_nonexistent_is_noop(self, cache: MemoryCacheProvider) -> None:
        await cache.delete("nonexistent")  # should not raise

    @pytest.mark.asyncio
    async def test_exists(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "value1")
        assert await cache.exists("key1") is True
        assert await cache.exists("missing") is False

    @pytest.mark.asyncio
    async def test_stores_complex_values(self, cache: MemoryCacheProvider) -> None:
        data = {"numFound": 2, "docs": [{"title": "Dune"}, {"title": "Emma"}]}
        await cache.set("complex", data)
        assert await cache.get("complex") == data

    @pytest.mark.asyncio
    async def test_per_item_ttl_expires(
        self, cache: MemoryCacheProvider, clock: _FakeClock
    ) -> None:
        await cache.set("short", "a", ttl=10)
        await cache.set("long", "b", ttl=100)

        clock.now += 11
        assert await cache.get("short") is None
        assert await cache.get("long") == "b"
        assert await cache.exists("short") is False

    @pytest.mark.asyncio
    async def test_default_ttl_applies(
        self, cache: MemoryCacheProvider, clock: _FakeClock
    ) -> None:
        await cache.set("key1", "value1")
        clock.now += 3599
        assert await cache.get("key1") == "value1"
        clock.now += 2
        assert await cache.get("key1") is None

    @pytest.mark.asyncio
    async def test_keys_matching_glob(self, cache: MemoryCacheProvider) -> None:
        await cache.set("app:search:dune", 1)
        await cache.set("app:search:emma", 2)
        await cache.set("app:other:dune", 3)
        await cache.set("other:search:dune", 4)

        keys = await cache.keys_matching("app:search:*")
        assert sorted(keys) == ["app:search:dune", "app:search:emma"]

    @pytest.mark.asyncio
    async def test_keys_matching_skips_expired(
        self, cache: MemoryCacheProvider, clock: _FakeClock
    ) -> None:
        await cache.set("app:search:old", 1, ttl=5)
        await cache.set("app:search:new", 2, ttl=500)
        clock.now += 10
        assert await cache.keys_matching("app:search:*") == ["app:search:new"]

    @pytest.mark.asyncio
    async def test_evicts_when_full(self, clock: _FakeClock) -> None:
        cache = MemoryCacheProvider(max_size=2, ttl=60, timer=clock)
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.set("c", 3)
        assert len(await cache.keys_matching("*")) == 2
        assert await cache.get("c") == 3

    @pytest.mark.asyncio
    async def test_close_is_noop(self, cache: MemoryCacheProvider) -> None:
        await cache.close()


# ======================================================================
# RedisCacheProvider
# ======================================================================


def _scan_iter_over(keys: list[str]):
    async def _scan_iter(match: str | None = None, count: int | None = None):
        for key in keys:
            yield key

    return _scan_iter


class TestRedisCacheProvider:
    @pytest.fixture()
    def client(self) -> MagicMock:
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        client.set = AsyncMock(return_value=True)
        client.delete = AsyncMock(return_value=1)
        client.exists = AsyncMock(return_value=0)
        client.ping = AsyncMock(return_value=True)
        client.aclose = AsyncMock()
        return client

    @pytest.fixture()
    def cache(self, client: MagicMock) -> RedisCacheProvider:
        return RedisCacheProvider(client, ttl=1800)

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(
        self, cache: RedisCacheProvider, client: MagicMock
    ) -> None:
        assert await cache.get("k") is None
        client.get.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, cache: RedisCacheProvider, client: MagicMock) -> None:
        client.get.return_value = '{"numFound": 3, "docs": []}'
        assert await cache.get("k") == {"numFound": 3, "docs": []}

    @pytest.mark.asyncio
    async def test_get_invalid_json_raises(
        self, cache: RedisCacheProvider, client: MagicMock
    ) -> None:
        client.get.return_value = "{not json"
        with pytest.raises(CacheStoreError) as exc_info:
            await cache.get("k")
        assert exc_info.value.provider_name == "redis"

    @pytest.mark.asyncio
    async def test_get_connection_error_raises(
        self, cache: RedisCacheProvider, client: MagicMock
    ) -> None:
        client.get.side_effect = RedisConnectionError("refused")
        with pytest.raises(CacheStoreError):
            await cache.get("k")

    @pytest.mark.asyncio
    async def test_set_encodes_json_with_ttl(
        self, cache: RedisCacheProvider, client: MagicMock
    ) -> None:
        await cache.set("k", {"numFound": 1}, ttl=60)
        client.set.assert_awaited_once_with("k", json.dumps({"numFound": 1}), ex=60)

    @pytest.mark.asyncio
    async def test_set_uses_default_ttl(
        self, cache: RedisCacheProvider, client: MagicMock
    ) -> None:
        await cache.set("k", "v")
        assert client.set.await_args.kwargs["ex"] == 1800

    @pytest.mark.asyncio
    async def test_set_unserialisable_raises(self, cache: RedisCacheProvider) -> None:
        with pytest.raises(CacheStoreError):
            await cache.set("k", object())

    @pytest.mark.asyncio
    async def test_set_connection_error_raises(
        self, cache: RedisCacheProvider, client: MagicMock
    ) -> None:
        client.set.side_effect = RedisConnectionError("refused")
        with pytest.raises(CacheStoreError):
            await cache.set("k", "v")

    @pytest.mark.asyncio
    async def test_exists(self, cache: RedisCacheProvider, client: MagicMock) -> None:
        client.exists.return_value = 1
        assert await cache.exists("k") is True

    @pytest.mark.asyncio
    async def test_delete(self, cache: RedisCacheProvider, client: MagicMock) -> None:
        await cache.delete("k")
        client.delete.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_keys_matching_uses_scan(
        self, cache: RedisCacheProvider, client: MagicMock
    ) -> None:
        client.scan_iter = _scan_iter_over(["p:search:dune", "p:search:emma"])
        assert await cache.keys_matching("p:search:*") == ["p:search:dune", "p:search:emma"]

    @pytest.mark.asyncio
    async def test_keys_matching_error_raises(
        self, cache: RedisCacheProvider, client: MagicMock
    ) -> None:
        async def _broken(match: str | None = None, count: int | None = None):
            raise RedisConnectionError("refused")
            yield  # pragma: no cover

        client.scan_iter = _broken
        with pytest.raises(CacheStoreError):
            await cache.keys_matching("p:search:*")

    @pytest.mark.asyncio
    async def test_ping(self, cache: RedisCacheProvider, client: MagicMock) -> None:
        assert await cache.ping() is True
        client.ping.side_effect = RedisConnectionError("down")
        assert await cache.ping() is False

    @pytest.mark.asyncio
    async def test_close(self, cache: RedisCacheProvider, client: MagicMock) -> None:
        await cache.close()
        client.aclose.assert_awaited_once()
