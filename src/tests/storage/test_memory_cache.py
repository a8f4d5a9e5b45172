"""Unit tests for the in-memory cache tier."""

import pytest

from workflow_checkpoints.storage.memory_cache import InMemoryCacheTier


class ManualClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.mark.asyncio
class TestInMemoryCacheTier:
    """Test suite for InMemoryCacheTier."""

    async def test_set_get(self, manual_clock):
        """Test values are readable before their TTL."""
        cache = InMemoryCacheTier(clock=manual_clock)
        await cache.set("k", "v", 10)

        assert await cache.get("k") == "v"

    async def test_ttl_expiry(self, manual_clock):
        """Test values disappear once the TTL elapses."""
        cache = InMemoryCacheTier(clock=manual_clock)
        await cache.set("k", "v", 10)

        manual_clock.now += 10
        assert await cache.get("k") is None
        assert await cache.list_keys("*") == []

    async def test_delete(self, manual_clock):
        """Test delete reports whether the key existed."""
        cache = InMemoryCacheTier(clock=manual_clock)
        await cache.set("k", "v", 10)

        assert await cache.delete("k") is True
        assert await cache.delete("k") is False

    async def test_hash_operations(self):
        """Test hash fields are set, read and removed independently."""
        cache = InMemoryCacheTier()
        await cache.hash_set("h", "a", "1")
        await cache.hash_set("h", "b", "2")

        assert await cache.hash_get("h", "a") == "1"
        assert await cache.hash_get_all("h") == {"a": "1", "b": "2"}
        assert await cache.hash_delete("h", "a") is True
        assert await cache.hash_delete("h", "a") is False
        assert await cache.hash_get_all("h") == {"b": "2"}

    async def test_list_keys_pattern(self):
        """Test glob-style key listing."""
        cache = InMemoryCacheTier()
        await cache.set("p:checkpoint:T1::c1", "x", 60)
        await cache.set("p:checkpoint:T2::c1", "x", 60)
        await cache.hash_set("p:metadata:T1:", "c1", "{}")

        assert await cache.list_keys("p:checkpoint:*") == [
            "p:checkpoint:T1::c1",
            "p:checkpoint:T2::c1",
        ]
        assert await cache.list_keys("p:*:T1*") == ["p:checkpoint:T1::c1", "p:metadata:T1:"]

    async def test_clear(self):
        """Test clear empties the cache."""
        cache = InMemoryCacheTier()
        await cache.set("k", "v", 60)
        await cache.hash_set("h", "f", "v")
        cache.clear()

        assert await cache.list_keys("*") == []
