"""
Cache manager for dashboard feeds and webhook calendar data.
"""
import logging
from typing import Any, Dict, List, Optional

from astralchronos.cache.cache_keys import CacheKeys
from astralchronos.cache.redis_client import RedisClient, get_redis_client
from astralchronos.monitoring.metrics import get_metrics_collector

logger = logging.getLogger(__name__)


class CacheManager:
    """Manages caching operations for upstream payloads."""

    def __init__(self, redis_client: Optional[RedisClient] = None):
        self.redis = redis_client or get_redis_client()
        self.enabled = self.redis.is_connected()

        if not self.enabled:
            logger.info("Cache manager initialized without Redis, caching disabled")

    def is_enabled(self) -> bool:
        """Redis answered when the manager was created."""
        return self.enabled

    # Dashboard feeds
    def get_feed(self, name: str, *qualifiers) -> Optional[Any]:
        """Get a cached feed payload."""
        if not self.is_enabled():
            return None

        value = self.redis.get(CacheKeys.feed(name, *qualifiers))
        get_metrics_collector().record_cache_operation('get', 'hit' if value is not None else 'miss')
        return value

    def set_feed(self, name: str, data: Any, *qualifiers) -> bool:
        """Cache a feed payload with the feed's TTL."""
        if not self.is_enabled():
            return False

        return self.redis.set(CacheKeys.feed(name, *qualifiers), data, ttl=CacheKeys.feed_ttl(name))

    # Calendar
    def get_calendar_events(self, year: int, month: int) -> Optional[Dict[str, List[Dict[str, Any]]]]:
        if not self.is_enabled():
            return None
        return self.redis.get(CacheKeys.calendar_month(year, month))

    def set_calendar_events(self, year: int, month: int, events: Dict[str, List[Dict[str, Any]]]) -> bool:
        if not self.is_enabled():
            return False
        return self.redis.set(CacheKeys.calendar_month(year, month), events, ttl=CacheKeys.CALENDAR_TTL)


_cache_manager: Optional[CacheManager] = None


def get_cache_manager() -> CacheManager:
    """Get global cache manager instance."""
    global _cache_manager
    if _cache_manager is None:
        _cache_manager = CacheManager()
    return _cache_manager
