"""
Rate limiting implementation using sliding window algorithm with Redis.
"""
import time
import logging
from typing import Optional, Dict, Any, Tuple

from astralchronos.cache.redis_client import RedisClient, get_redis_client
from astralchronos.cache.cache_keys import CacheKeys

logger = logging.getLogger(__name__)


class RateLimiter:
    """Sliding window rate limiter using Redis."""

    def __init__(self, redis_client: Optional[RedisClient] = None):
        self.redis = redis_client or get_redis_client()
        self.enabled = self.redis.is_connected()

        if not self.enabled:
            logger.info("Rate limiter initialized without Redis, all requests allowed")

    def is_enabled(self) -> bool:
        return self.enabled

    def _allow_all(self, limit: int, window_seconds: int, **extra) -> Dict[str, Any]:
        return {
            "allowed": True,
            "limit": limit,
            "remaining": limit,
            "reset_time": int(time.time() + window_seconds),
            "retry_after": None,
            **extra,
        }

    def check_rate_limit(
        self,
        identifier: str,
        endpoint: str,
        limit: int,
        window_seconds: int = 3600
    ) -> Tuple[bool, Dict[str, Any]]:
        """
        Check if request is within rate limit using sliding window.

        Args:
            identifier: Client identifier (IP address)
            endpoint: API endpoint being accessed
            limit: Maximum requests allowed in window
            window_seconds: Time window in seconds

        Returns:
            Tuple of (allowed, rate_limit_info)
        """
        if not self.is_enabled():
            return True, self._allow_all(limit, window_seconds)

        current_time = time.time()
        window_start = current_time - window_seconds
        cache_key = CacheKeys.rate_limit_key(identifier, endpoint)

        try:
            pipe = self.redis.pipeline()
            pipe.zremrangebyscore(cache_key, 0, window_start)
            pipe.zcard(cache_key)
            pipe.zadd(cache_key, {str(current_time): current_time})
            pipe.expire(cache_key, window_seconds + 60)
            results = pipe.execute()
            current_count = results[1]

            if current_count >= limit:
                # The rejected request does not count against the window
                self.redis.client.zrem(cache_key, str(current_time))

                oldest_request = self.redis.client.zrange(cache_key, 0, 0, withscores=True)
                if oldest_request:
                    retry_after = int(oldest_request[0][1] + window_seconds - current_time)
                else:
                    retry_after = window_seconds

                return False, {
                    "allowed": False,
                    "limit": limit,
                    "remaining": 0,
                    "reset_time": int(current_time + retry_after),
                    "retry_after": max(retry_after, 1)
                }

            return True, {
                "allowed": True,
                "limit": limit,
                "remaining": max(0, limit - current_count - 1),
                "reset_time": int(current_time + window_seconds),
                "retry_after": None
            }

        except Exception as e:
            logger.error(f"Rate limit check error for {identifier}:{endpoint}: {e}")
            return True, self._allow_all(limit, window_seconds, error=str(e))


_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get global rate limiter instance."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter()
    return _rate_limiter
