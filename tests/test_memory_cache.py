"""Tests for the in-memory TTL cache."""

import pytest

from pokedex.db.memory_cache import MISSING, MemoryCache
from tests.fakes import FakeClock


class TestMemoryCache:

    def test_miss_on_empty(self):
        cache = MemoryCache()
        assert cache.get("absent") is MISSING

    def test_set_then_get(self):
        cache = MemoryCache()
        cache.set("k", [1, 2], ttl=60)
        assert cache.get("k") == [1, 2]

    def test_cached_none_is_a_hit(self):
        cache = MemoryCache()
        cache.set("k", None, ttl=60)
        assert cache.get("k") is None

    def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = MemoryCache(clock=clock)
        cache.set("k", "v", ttl=10)

        clock.advance(10)
        assert cache.get("k") == "v"

        clock.advance(1)
        assert cache.get("k") is MISSING
        assert len(cache) == 0

    def test_set_replaces_entry(self):
        cache = MemoryCache()
        cache.set("k", "old", ttl=60)
        cache.set("k", "new", ttl=60)
        assert cache.get("k") == "new"
        assert len(cache) == 1

    def test_clear(self):
        cache = MemoryCache()
        cache.set("a", 1, ttl=60)
        cache.set("b", 2, ttl=60)
        cache.clear()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_get_or_create_builds_once(self):
        cache = MemoryCache()
        calls = []

        async def factory():
            calls.append(1)
            return "value"

        assert await cache.get_or_create("k", factory, ttl=60) == "value"
        assert await cache.get_or_create("k", factory, ttl=60) == "value"
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_get_or_create_does_not_store_failures(self):
        cache = MemoryCache()

        async def failing():
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError):
            await cache.get_or_create("k", failing, ttl=60)
        assert cache.get("k") is MISSING
