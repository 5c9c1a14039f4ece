"""Cache storage protocol.

Defines the interface for a key-value cache holding serialized movie
representations.

Implementations can include:
- Redis (default)
- An in-process dictionary (tests)
- Memcached or any other key-value store
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. Implementations raise
    ``CacheUnavailableError`` when the backend cannot be reached.
    """

    def get(self, key: str) -> str | None:
        """Fetch the value stored under a key.

        Args:
            key: The cache key

        Returns:
            The stored text, or None on a miss
        """
        ...

    def set(self, key: str, value: str, ttl: int = 0) -> None:
        """Store a value under a key.

        Args:
            key: The cache key
            value: Serialized text to store
            ttl: Time-to-live in seconds, 0 means no expiry
        """
        ...

    def delete(self, *keys: str) -> int:
        """Delete one or more keys.

        Args:
            keys: The cache keys to remove

        Returns:
            Number of keys that existed and were removed
        """
        ...

    def health_check(self) -> bool:
        """Check if the cache is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...
