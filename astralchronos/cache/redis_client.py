"""
Redis client configuration and connection management.
"""
import json
import logging
from typing import Any, Optional

import redis
from redis.connection import ConnectionPool
from redis.exceptions import RedisError, ConnectionError

from astralchronos.config import get_settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Redis client wrapper with connection management and error handling."""

    def __init__(self, redis_url: Optional[str] = None):
        """
        Initialize Redis client with connection pooling.

        With no URL configured the client stays disconnected and every
        operation becomes a no-op.
        """
        self.redis_url = redis_url if redis_url is not None else get_settings().redis_url
        self._client: Optional[redis.Redis] = None
        self._pool: Optional[ConnectionPool] = None
        if self.redis_url:
            self._setup_connection()
        else:
            logger.info("No Redis URL configured, caching disabled")

    def _setup_connection(self) -> None:
        try:
            self._pool = redis.ConnectionPool.from_url(
                self.redis_url,
                max_connections=20,
                retry_on_timeout=True,
                socket_keepalive=True,
                health_check_interval=30,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            self._client = redis.Redis(connection_pool=self._pool)

            self._client.ping()
            logger.info("Redis connection established successfully")

        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._client = None
            self._pool = None

    @property
    def client(self) -> Optional[redis.Redis]:
        return self._client

    def is_connected(self) -> bool:
        """Check if Redis is connected and responsive."""
        try:
            if self._client is None:
                return False
            self._client.ping()
            return True
        except (RedisError, ConnectionError):
            return False

    def get(self, key: str) -> Optional[Any]:
        """Get value from Redis with JSON deserialization."""
        try:
            if self._client is None:
                return None

            value = self._client.get(key)
            if value is None:
                return None

            try:
                return json.loads(value)
            except (json.JSONDecodeError, TypeError):
                return value

        except Exception as e:
            logger.error(f"Redis GET error for key '{key}': {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value in Redis with JSON serialization."""
        try:
            if self._client is None:
                return False

            if isinstance(value, (dict, list, tuple, bool, int, float)):
                serialized_value = json.dumps(value, default=str)
            else:
                serialized_value = str(value)

            return bool(self._client.set(key, serialized_value, ex=ttl))

        except Exception as e:
            logger.error(f"Redis SET error for key '{key}': {e}")
            return False

    def pipeline(self):
        """Create Redis pipeline for batch operations."""
        if self._client is None:
            return None
        return self._client.pipeline()

    def close(self) -> None:
        """Close Redis connection."""
        try:
            if self._pool:
                self._pool.disconnect()
                logger.info("Redis connection closed")
        except Exception as e:
            logger.error(f"Error closing Redis connection: {e}")


_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Get global Redis client instance."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client


def close_redis_client() -> None:
    """Close global Redis client."""
    global _redis_client
    if _redis_client:
        _redis_client.close()
        _redis_client = None
