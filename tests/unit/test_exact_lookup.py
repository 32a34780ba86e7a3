"""Unit tests for ExactVariationLookup."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.cache_provider import ICacheProvider
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.services.exact_lookup import ExactVariationLookup
from src.utils.errors import CacheStoreError
from src.utils.text_normalizer import generate_variations

PREFIX = "test_cache"


class TestExactVariationLookup:
    @pytest.fixture()
    def lookup(self, memory_cache: MemoryCacheProvider) -> ExactVariationLookup:
        return ExactVariationLookup(memory_cache, PREFIX)

    @pytest.mark.asyncio
    async def test_empty_store_is_not_a_hit(self, lookup: ExactVariationLookup) -> None:
        result = await lookup.lookup("dune", generate_variations("dune"))
        assert result.hit is False
        assert result.record is None
        assert result.matched_key is None

    @pytest.mark.asyncio
    async def test_hit_on_canonical_variation(
        self, lookup, memory_cache, seed, sample_record
    ) -> None:
        await seed(memory_cache, "the lord of the rings", sample_record)

        result = await lookup.lookup(
            "the lord of the rings", generate_variations("the lord of the rings")
        )

        assert result.hit is True
        assert result.record == sample_record
        assert result.matched_variant == "the lord of the rings"
        assert result.matched_key == "test_cache:search:the lord of the rings"

    @pytest.mark.asyncio
    async def test_hit_on_later_variation(
        self, lookup, memory_cache, seed, make_record
    ) -> None:
        await seed(memory_cache, "projecthailmary", make_record(num_found=3))

        result = await lookup.lookup(
            "project hail mary", generate_variations("project hail mary")
        )

        assert result.hit is True
        assert result.matched_variant == "projecthailmary"
        assert result.record.num_found == 3

    @pytest.mark.asyncio
    async def test_first_variation_in_order_wins(
        self, lookup, memory_cache, seed, make_record
    ) -> None:
        await seed(memory_cache, "hail mary project", make_record(num_found=2))
        await seed(memory_cache, "projecthailmary", make_record(num_found=3))

        result = await lookup.lookup(
            "project hail mary", generate_variations("project hail mary")
        )

        assert result.matched_variant == "hail mary project"
        assert result.record.num_found == 2

    @pytest.mark.asyncio
    async def test_unreadable_payload_skipped(
        self, lookup, memory_cache, seed, make_record
    ) -> None:
        await memory_cache.set("test_cache:search:project hail mary", {"numFound": -5})
        await seed(memory_cache, "projecthailmary", make_record(num_found=3))

        result = await lookup.lookup(
            "project hail mary", generate_variations("project hail mary")
        )

        assert result.hit is True
        assert result.matched_variant == "projecthailmary"

    @pytest.mark.asyncio
    async def test_store_error_on_one_variation_continues(self, make_record) -> None:
        record = make_record(num_found=9)
        cache = MagicMock(spec=ICacheProvider)
        cache.get = AsyncMock(
            side_effect=[
                CacheStoreError("timeout", provider_name="redis"),
                record.to_cache_payload(),
            ]
        )
        lookup = ExactVariationLookup(cache, PREFIX)

        result = await lookup.lookup(
            "project hail mary", generate_variations("project hail mary")
        )

        assert result.hit is True
        assert result.matched_variant == "hail mary project"
        assert result.record == record

    @pytest.mark.asyncio
    async def test_store_down_is_a_miss(self, failing_cache: MagicMock) -> None:
        lookup = ExactVariationLookup(failing_cache, PREFIX)
        result = await lookup.lookup("dune", ["dune"])
        assert result.hit is False

    @pytest.mark.asyncio
    async def test_unexpected_store_exception_is_a_miss(self) -> None:
        cache = MagicMock(spec=ICacheProvider)
        cache.get = AsyncMock(side_effect=RuntimeError("boom"))
        lookup = ExactVariationLookup(cache, PREFIX)

        result = await lookup.lookup("dune", ["dune"])
        assert result.hit is False
