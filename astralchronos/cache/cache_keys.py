"""
Cache key definitions for consistent key naming.
"""


class CacheKeys:
    """Cache key definitions and TTLs."""

    FEED_PREFIX = "feed"
    CALENDAR_PREFIX = "calendar"
    RATE_LIMIT_PREFIX = "rate_limit"

    # TTL values (in seconds)
    FEED_TTL = 300  # 5 minutes
    ISS_TTL = 60
    NEWS_TTL = 900
    CALENDAR_TTL = 3600

    FEED_TTLS = {
        'iss': ISS_TTL,
        'news': NEWS_TTL,
    }

    @staticmethod
    def feed(name: str, *qualifiers) -> str:
        """Cache key for a dashboard feed, e.g. feed:sun:28.57:-80.65."""
        parts = [CacheKeys.FEED_PREFIX, name]
        parts.extend(str(q) for q in qualifiers)
        return ":".join(parts)

    @staticmethod
    def feed_ttl(name: str) -> int:
        return CacheKeys.FEED_TTLS.get(name, CacheKeys.FEED_TTL)

    @staticmethod
    def calendar_month(year: int, month: int) -> str:
        """Cache key for webhook-provided calendar events of a month."""
        return f"{CacheKeys.CALENDAR_PREFIX}:{year}:{month:02d}"

    @staticmethod
    def rate_limit_key(identifier: str, endpoint: str) -> str:
        return f"{CacheKeys.RATE_LIMIT_PREFIX}:{endpoint}:{identifier}"
