"""
Serving Module
"""
from .cache import CacheManager, close_redis, dashboard_cache, get_redis, init_redis, is_cache_ready

__all__ = [
    "init_redis",
    "close_redis",
    "get_redis",
    "is_cache_ready",
    "CacheManager",
    "dashboard_cache",
]
