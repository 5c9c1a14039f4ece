"""Redis implementation of CacheStore.

Values are stored as plain strings with no expiry unless a TTL is given.
It's the default implementation and satisfies the CacheStore protocol.
"""

import logging

import redis

from movie_cache.config import Settings, get_redis_client
from movie_cache.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis key-value cache.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Every Redis failure is re-raised as ``CacheUnavailableError`` so the
    service layer can degrade without knowing about the driver.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
                The client should decode responses to ``str``.
        """
        self._client = redis_client if redis_client is not None else get_redis_client()

    @classmethod
    def create(cls, app_settings: Settings | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository from settings.

        Args:
            app_settings: Settings holding the Redis URL. If None, uses the
                environment settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(redis_client=get_redis_client(app_settings))

    def get(self, key: str) -> str | None:
        """Fetch the value stored under a key.

        Args:
            key: The cache key

        Returns:
            The stored text, or None on a miss
        """
        try:
            value = self._client.get(key)
        except redis.RedisError as e:
            raise CacheUnavailableError(f"Redis GET {key} failed: {e}") from e

        if isinstance(value, bytes):
            return value.decode()
        return value  # type: ignore[return-value]

    def set(self, key: str, value: str, ttl: int = 0) -> None:
        """Store a value under a key.

        Args:
            key: The cache key
            value: Serialized text to store
            ttl: Time-to-live in seconds, 0 means no expiry
        """
        try:
            self._client.set(key, value, ex=ttl if ttl > 0 else None)
        except redis.RedisError as e:
            raise CacheUnavailableError(f"Redis SET {key} failed: {e}") from e

    def delete(self, *keys: str) -> int:
        """Delete one or more keys in a single command.

        Args:
            keys: The cache keys to remove

        Returns:
            Number of keys removed
        """
        if not keys:
            return 0

        try:
            result: int = self._client.delete(*keys)  # type: ignore[assignment]
        except redis.RedisError as e:
            raise CacheUnavailableError(f"Redis DEL {' '.join(keys)} failed: {e}") from e
        return result

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning("Redis health check failed: %s", e)
            return False

    def close(self) -> None:
        """Release the connection pool."""
        self._client.close()
