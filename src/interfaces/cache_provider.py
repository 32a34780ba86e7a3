"""Abstract base class for cache service providers.

Defines the key-value contract the query-resolution engine relies on.
Implementations may use an in-memory dict, Redis, or any other storage
backend; the resolver only ever sees this interface.

A missing key and a broken store are deliberately distinguishable:
``get`` returns ``None`` for the former and raises
:class:`~src.utils.errors.CacheStoreError` for the latter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Contract for key-value cache services.

    All operations are async to allow for network-backed stores (e.g. Redis)
    without blocking the event loop.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve the value stored under *key*.

        Parameters
        ----------
        key:
            The full cache key to look up.

        Returns
        -------
        Any or None
            The cached value if present and not expired; ``None`` otherwise.

        Raises
        ------
        src.utils.errors.CacheStoreError
            On connectivity or deserialization failure.
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* under *key* with an optional time-to-live.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The value to store.  Implementations must handle str, int,
            float, dict and list.
        ttl:
            Time-to-live in seconds.  ``None`` means the provider default.

        Raises
        ------
        src.utils.errors.CacheStoreError
            If the write could not be performed.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry stored under *key* (no-op if absent)."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present in the cache and not expired."""

    @abstractmethod
    async def keys_matching(self, pattern: str) -> list[str]:
        """Return every live key matching a glob-style *pattern*.

        Parameters
        ----------
        pattern:
            Glob pattern using ``*`` wildcards, e.g. ``"app:search:*"``.

        Returns
        -------
        list[str]
            Matching keys in the store's enumeration order.

        Raises
        ------
        src.utils.errors.CacheStoreError
            If enumeration fails.
        """

    async def close(self) -> None:
        """Release any connections held by the provider."""
