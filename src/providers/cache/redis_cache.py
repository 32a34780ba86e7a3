"""Redis cache provider using ``redis.asyncio``.

Shared across processes, so every worker sees the same cached searches.
Values are stored as JSON text with a per-key expiry (``SET ... EX``).
Key enumeration walks the keyspace with ``SCAN`` rather than ``KEYS`` so
a large cache never blocks the Redis server.

Every ``redis.RedisError`` and every JSON decode failure is re-raised as
:class:`~src.utils.errors.CacheStoreError`; a missing key is ``None``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from src.interfaces.cache_provider import ICacheProvider
from src.utils.errors import CacheStoreError

if TYPE_CHECKING:
    from src.config.settings import Settings

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER = "redis"
_SCAN_BATCH = 500


class RedisCacheProvider(ICacheProvider):
    """Redis-backed cache.

    Parameters
    ----------
    client:
        A ``redis.asyncio.Redis`` client created with
        ``decode_responses=True``.
    ttl:
        Default time-to-live in seconds for writes that pass no TTL.
    """

    def __init__(self, client: aioredis.Redis, ttl: int = 1800) -> None:
        self._client = client
        self._default_ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> RedisCacheProvider:
        """Build a provider with a pooled client configured from *settings*."""
        client = aioredis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password or None,
            max_connections=settings.redis_pool_size,
            socket_timeout=settings.redis_socket_timeout,
            socket_connect_timeout=settings.redis_connect_timeout,
            retry_on_timeout=settings.redis_max_retries > 0,
            decode_responses=True,
        )
        logger.info(
            "redis_provider_initialized",
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
        )
        return cls(client, ttl=settings.cache_ttl_minutes * 60)

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(key)
        except RedisError as exc:
            raise CacheStoreError(f"GET {key} failed: {exc}", provider_name=_PROVIDER) from exc

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError) as exc:
            raise CacheStoreError(
                f"Value under {key} is not valid JSON", provider_name=_PROVIDER
            ) from exc

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        effective_ttl = ttl if ttl is not None else self._default_ttl
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise CacheStoreError(
                f"Value for {key} is not JSON serialisable", provider_name=_PROVIDER
            ) from exc
        try:
            await self._client.set(key, payload, ex=effective_ttl)
        except RedisError as exc:
            raise CacheStoreError(f"SET {key} failed: {exc}", provider_name=_PROVIDER) from exc
        logger.debug("cache_set", key=key, ttl=effective_ttl)

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as exc:
            raise CacheStoreError(f"DEL {key} failed: {exc}", provider_name=_PROVIDER) from exc

    async def exists(self, key: str) -> bool:
        try:
            return await self._client.exists(key) > 0
        except RedisError as exc:
            raise CacheStoreError(f"EXISTS {key} failed: {exc}", provider_name=_PROVIDER) from exc

    async def keys_matching(self, pattern: str) -> list[str]:
        try:
            return [key async for key in self._client.scan_iter(match=pattern, count=_SCAN_BATCH)]
        except RedisError as exc:
            raise CacheStoreError(
                f"SCAN {pattern} failed: {exc}", provider_name=_PROVIDER
            ) from exc

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def ping(self) -> bool:
        """Return ``True`` if Redis answers PING."""
        try:
            return bool(await self._client.ping())
        except RedisError as exc:
            logger.warning("redis_ping_failed", error=str(exc))
            return False

    async def close(self) -> None:
        await self._client.aclose()
