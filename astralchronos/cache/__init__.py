"""
Caching package for Redis-based caching and rate limiting.
"""
from astralchronos.cache.redis_client import RedisClient, get_redis_client, close_redis_client
from astralchronos.cache.cache_manager import CacheManager, get_cache_manager
from astralchronos.cache.cache_keys import CacheKeys
from astralchronos.cache.rate_limiter import RateLimiter, get_rate_limiter

__all__ = [
    'RedisClient',
    'get_redis_client',
    'close_redis_client',
    'CacheManager',
    'get_cache_manager',
    'CacheKeys',
    'RateLimiter',
    'get_rate_limiter',
]
