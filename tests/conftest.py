"""Shared pytest fixtures for the searchCache test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.search_provider import ISearchProvider
from src.models.search import SearchRecord
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.services.cache_resolver import CacheResolver
from src.utils.cache_keys import search_key
from src.utils.errors import CacheStoreError

PREFIX = "test_cache"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def _make_record(num_found: int = 1, titles: tuple[str, ...] = ("Project Hail Mary",)) -> SearchRecord:
    return SearchRecord(
        num_found=num_found,
        docs=[{"title": title, "key": f"/works/OL{i}W"} for i, title in enumerate(titles)],
    )


@pytest.fixture
def make_record():
    """Factory for SearchRecords with one doc per title."""
    return _make_record


@pytest.fixture
def sample_record() -> SearchRecord:
    return _make_record(num_found=42, titles=("The Lord of the Rings", "The Two Towers"))


# ---------------------------------------------------------------------------
# Cache stores
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_cache() -> MemoryCacheProvider:
    return MemoryCacheProvider(max_size=100, ttl=1800)


@pytest.fixture
def seed():
    """Return a coroutine that stores a record under ``<prefix>:search:<variant>``."""

    async def _seed(
        cache: ICacheProvider, variant: str, record: SearchRecord, prefix: str = PREFIX
    ) -> str:
        key = search_key(prefix, variant)
        await cache.set(key, record.to_cache_payload(), ttl=1800)
        return key

    return _seed


@pytest.fixture
def failing_cache() -> MagicMock:
    """A cache whose every operation raises CacheStoreError."""
    cache = MagicMock(spec=ICacheProvider)
    error = CacheStoreError("Connection refused", provider_name="redis")
    cache.get = AsyncMock(side_effect=error)
    cache.set = AsyncMock(side_effect=error)
    cache.delete = AsyncMock(side_effect=error)
    cache.exists = AsyncMock(side_effect=error)
    cache.keys_matching = AsyncMock(side_effect=error)
    return cache


# ---------------------------------------------------------------------------
# Resolution engine + upstream
# ---------------------------------------------------------------------------


@pytest.fixture
def resolver(memory_cache: MemoryCacheProvider) -> CacheResolver:
    return CacheResolver(cache=memory_cache, prefix=PREFIX, ttl_seconds=1800)


@pytest.fixture
def mock_search_provider() -> MagicMock:
    """Upstream provider returning a fixed two-document record."""
    provider = MagicMock(spec=ISearchProvider)
    provider.search = AsyncMock(
        return_value=_make_record(num_found=7, titles=("Project Hail Mary", "The Martian"))
    )
    provider.get_provider_name.return_value = "mock-search"
    provider.is_available.return_value = True
    return provider


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Return a minimal configuration dict, shaped like load_config() output."""
    return {
        "app": {"name": "searchCache", "version": "0.1.0"},
        "fuzzy": {
            "max_edit_distance": 3,
            "word_edit_distance": 2,
            "min_word_overlap": 0.6,
            "max_candidates": 5,
        },
    }
