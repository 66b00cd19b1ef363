"""
Redis Cache Module

Short-lived cache for dashboard responses. The rollup engine itself never
touches the cache; only the reporting layer does, and only when Redis is
enabled and reachable.
"""

import json
from datetime import timedelta
from typing import Any, Awaitable, Callable, Optional, Union

import structlog
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from ticket_analytics.config import get_settings

logger = structlog.get_logger(__name__)

# Global Redis connection
_redis_pool: Optional[ConnectionPool] = None
_redis_client: Optional[Redis] = None


async def init_redis() -> Optional[Redis]:
    """Initialize the Redis connection pool; returns None when caching is disabled"""
    global _redis_pool, _redis_client

    settings = get_settings()
    if not settings.redis.enabled:
        logger.info("Redis caching disabled")
        return None

    if _redis_client is not None:
        return _redis_client

    pool = ConnectionPool.from_url(
        settings.redis.get_url(),
        max_connections=settings.redis.max_connections,
        socket_timeout=settings.redis.socket_timeout,
        decode_responses=True,
    )
    client = Redis(connection_pool=pool)

    try:
        await client.ping()
    except Exception as e:
        logger.error("Redis connection failed", error=str(e))
        await pool.disconnect()
        raise

    _redis_pool, _redis_client = pool, client
    logger.info("Redis connection established")
    return _redis_client


async def close_redis() -> None:
    """Close Redis connection pool"""
    global _redis_pool, _redis_client

    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None

    if _redis_pool:
        await _redis_pool.disconnect()
        _redis_pool = None

    logger.info("Redis connection closed")


def is_cache_ready() -> bool:
    return _redis_client is not None


def get_redis() -> Redis:
    """Get Redis client instance"""
    if _redis_client is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis_client


class CacheManager:
    """
    JSON cache under one key namespace, with get-or-compute.

    Every method is a no-op (or a plain compute) while Redis is not
    initialised or a Redis command fails, so callers never branch on cache
    availability.

    Example:
        cache = CacheManager("dashboard")
        payload = await cache.get_or_set("2025-03-01:2025-03-31", build_payload)
    """

    def __init__(self, namespace: str, default_ttl: int = 300):
        self.namespace = namespace
        self.default_ttl = default_ttl

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        if not is_cache_ready():
            return None
        try:
            raw = await get_redis().get(self._key(key))
        except RedisError as e:
            logger.warning("Cache read failed", namespace=self.namespace, key=key, error=str(e))
            return None
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any, ttl: Optional[Union[int, timedelta]] = None) -> bool:
        """Store ``value`` as JSON; False when Redis is off or the value does not serialise"""
        if not is_cache_ready():
            return False
        try:
            payload = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            logger.warning("Cache value not serialisable", namespace=self.namespace, key=key, error=str(e))
            return False

        ttl = ttl or self.default_ttl
        if isinstance(ttl, timedelta):
            ttl = int(ttl.total_seconds())
        try:
            await get_redis().setex(self._key(key), ttl, payload)
        except RedisError as e:
            logger.warning("Cache write failed", namespace=self.namespace, key=key, error=str(e))
            return False
        return True

    async def invalidate_all(self) -> int:
        """Delete every key in the namespace"""
        if not is_cache_ready():
            return 0
        client = get_redis()
        try:
            keys = [k async for k in client.scan_iter(match=f"{self.namespace}:*")]
            deleted = await client.delete(*keys) if keys else 0
        except RedisError as e:
            logger.warning("Cache invalidation failed", namespace=self.namespace, error=str(e))
            return 0
        if not deleted:
            return 0
        logger.debug("Cache namespace invalidated", namespace=self.namespace, deleted=deleted)
        return deleted

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Any:
        cached = await self.get(key)
        if cached is not None:
            return cached

        value = await factory()
        await self.set(key, value, ttl)
        return value


dashboard_cache = CacheManager("dashboard", default_ttl=get_settings().analytics.cache_ttl_seconds)
