"""
Unit Tests - Dashboard Cache
"""
from ticket_analytics.serving import CacheManager, is_cache_ready


class TestCacheManagerWithoutRedis:
    """Redis is disabled in the test environment; the cache must step aside"""

    async def test_get_or_set_computes(self):
        cache = CacheManager("dashboard-test")
        calls = []

        async def build():
            calls.append(1)
            return {"days": 7}

        assert not is_cache_ready()
        assert await cache.get_or_set("2025-03-01:2025-03-07", build) == {"days": 7}
        assert await cache.get_or_set("2025-03-01:2025-03-07", build) == {"days": 7}
        assert len(calls) == 2

    async def test_reads_and_writes_are_noops(self):
        cache = CacheManager("dashboard-test")

        assert await cache.set("k", {"a": 1}) is False
        assert await cache.get("k") is None
        assert await cache.invalidate_all() == 0


class TestCacheManagerRedisOutage:
    """Redis is configured but every command fails; callers still get answers"""

    async def test_get_or_set_falls_back_to_compute(self, unreachable_redis):
        cache = CacheManager("dashboard-test")
        calls = []

        async def build():
            calls.append(1)
            return {"days": 7}

        assert is_cache_ready()
        assert await cache.get_or_set("2025-03-01:2025-03-07", build) == {"days": 7}
        assert calls == [1]

    async def test_reads_and_writes_degrade(self, unreachable_redis):
        cache = CacheManager("dashboard-test")

        assert await cache.get("k") is None
        assert await cache.set("k", {"a": 1}) is False
        assert await cache.invalidate_all() == 0
