"""Movie service for core business logic.

This service owns the caching policy around the movies collection:

- Reads are look-aside: try the cache, fall back to the store on a miss,
  then populate the cache with what the store returned.
- Mutations never write through. Every update or delete ends by deleting
  the per-movie key and the list key, whether or not a document matched.
- The cache is never required. Any cache failure is logged and the request
  continues against the store alone.
"""

import json
import logging
from typing import Any

from movie_cache.config import CacheMode, ResponseShape, Settings, settings
from movie_cache.entities import DeleteResultEntity, MovieEntity, UpdateResultEntity
from movie_cache.errors import CacheUnavailableError, InvalidMovieIdError, MovieNotFoundError
from movie_cache.protocols import CacheStore, MovieStore

logger = logging.getLogger(__name__)


class MovieService:
    """Core movie orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - MovieStore: MongoDB by default
    - CacheStore: Redis by default

    Example:
        ```python
        from movie_cache.repositories import MongoMovieRepository, RedisCacheRepository
        from movie_cache.services import MovieService

        service = MovieService.create(
            store=MongoMovieRepository.create(),
            cache=RedisCacheRepository.create(),
        )
        service.get_movie("573a1390f29313caabcd4135")
        ```
    """

    def __init__(
        self,
        store: MovieStore,
        cache: CacheStore | None = None,
        cache_mode: CacheMode | None = None,
        response_shape: ResponseShape | None = None,
        list_limit: int | None = None,
        ttl: int | None = None,
        list_key: str | None = None,
        item_prefix: str | None = None,
    ) -> None:
        """Initialize the movie service.

        Args:
            store: Document store holding the movies (required).
            cache: Cache backend. Ignored when ``cache_mode`` is ``off``.
            cache_mode: Which reads are cached. Defaults to settings.
            response_shape: Raw documents or the simplified projection. Defaults to settings.
            list_limit: Maximum movies returned by ``list_movies``. Defaults to settings.
            ttl: Cache entry time-to-live in seconds, 0 for none. Defaults to settings.
            list_key: Cache key for the movie list. Defaults to settings.
            item_prefix: Prefix for per-movie cache keys. Defaults to settings.
        """
        self._store = store
        self._mode = cache_mode if cache_mode is not None else settings.cache_mode
        self._cache = cache if self._mode is not CacheMode.OFF else None
        self._shape = response_shape if response_shape is not None else settings.response_shape
        self._limit = list_limit if list_limit is not None else settings.list_limit
        self._ttl = ttl if ttl is not None else settings.cache_ttl
        self._list_key = list_key or settings.cache_list_key
        self._item_prefix = item_prefix or settings.cache_item_prefix

    @classmethod
    def create(
        cls,
        store: MovieStore,
        cache: CacheStore | None = None,
        app_settings: Settings | None = None,
    ) -> "MovieService":
        """Factory method to create MovieService from a Settings instance.

        Args:
            store: Document store (required).
            cache: Cache backend. If None, nothing is cached.
            app_settings: Cache mode, response shape, list limit, TTL and
                cache keys. If None, uses the environment settings.

        Returns:
            Configured MovieService instance
        """
        app_settings = app_settings or settings
        return cls(
            store=store,
            cache=cache,
            cache_mode=app_settings.cache_mode,
            response_shape=app_settings.response_shape,
            list_limit=app_settings.list_limit,
            ttl=app_settings.cache_ttl,
            list_key=app_settings.cache_list_key,
            item_prefix=app_settings.cache_item_prefix,
        )

    def item_key(self, movie_id: str) -> str:
        """Cache key for a single movie.

        Every spelling of an identifier maps to the same key.

        Raises:
            InvalidMovieIdError: If the identifier is malformed
        """
        return f"{self._item_prefix}{self._canonical_id(movie_id)}"

    def list_movies(self) -> list[dict[str, Any]]:
        """List up to ``list_limit`` movies.

        Business logic:
        1. Return the cached list if present
        2. Otherwise query the store and present each movie
        3. Cache the presented list under the list key

        Returns:
            Presented movies (raw documents or summaries)
        """
        cached = self._cache_get(self._list_key)
        if isinstance(cached, list):
            logger.debug("Cache hit: %s", self._list_key)
            return cached[: self._limit]

        logger.debug("Cache miss: %s, fetching from store", self._list_key)
        movies = [self._present(movie) for movie in self._store.find(self._limit)]
        self._cache_set(self._list_key, movies)
        return movies

    def get_movie(self, movie_id: str) -> dict[str, Any]:
        """Fetch a single movie.

        Per-movie caching only applies in ``document`` mode.

        Args:
            movie_id: The movie identifier

        Returns:
            The presented movie

        Raises:
            InvalidMovieIdError: If the identifier is malformed
            MovieNotFoundError: If no movie has that identifier
        """
        movie_id = self._canonical_id(movie_id)
        key = self.item_key(movie_id)

        if self._mode is CacheMode.DOCUMENT:
            cached = self._cache_get(key)
            if isinstance(cached, dict):
                logger.debug("Cache hit: %s", key)
                return cached
            logger.debug("Cache miss: %s, fetching from store", key)

        movie = self._store.find_one(movie_id)
        if movie is None:
            raise MovieNotFoundError(movie_id)

        presented = self._present(movie)
        if self._mode is CacheMode.DOCUMENT:
            self._cache_set(key, presented)
        return presented

    def update_title(self, movie_id: str, title: str) -> UpdateResultEntity:
        """Set a movie's title and invalidate every related cache entry.

        Args:
            movie_id: The movie identifier
            title: The new title

        Returns:
            Summary of the store update

        Raises:
            InvalidMovieIdError: If the identifier is malformed
        """
        movie_id = self._canonical_id(movie_id)
        result = self._store.update_title(movie_id, title)
        self._invalidate(movie_id)
        return result

    def delete_movie(self, movie_id: str) -> DeleteResultEntity:
        """Delete a movie and invalidate every related cache entry.

        Args:
            movie_id: The movie identifier

        Returns:
            Summary of the store delete

        Raises:
            InvalidMovieIdError: If the identifier is malformed
        """
        movie_id = self._canonical_id(movie_id)
        result = self._store.delete_one(movie_id)
        self._invalidate(movie_id)
        return result

    def store_healthy(self) -> bool:
        return self._store.health_check()

    def cache_healthy(self) -> bool | None:
        """Check the cache backend.

        Returns:
            None when caching is disabled, otherwise the backend's health
        """
        if self._cache is None:
            return None
        return self._cache.health_check()

    def _canonical_id(self, movie_id: str) -> str:
        if not self._store.is_valid_id(movie_id):
            raise InvalidMovieIdError(movie_id)
        return self._store.normalize_id(movie_id)

    def _present(self, movie: MovieEntity) -> dict[str, Any]:
        if self._shape is ResponseShape.SIMPLIFIED:
            return movie.to_summary()
        return movie.document

    def _cache_get(self, key: str) -> Any | None:
        if self._cache is None:
            return None

        try:
            raw = self._cache.get(key)
        except CacheUnavailableError as e:
            logger.warning("Cache read failed, falling back to store: %s", e)
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable cache entry: %s", key)
            return None

    def _cache_set(self, key: str, value: Any) -> None:
        if self._cache is None:
            return

        try:
            self._cache.set(key, json.dumps(value), ttl=self._ttl)
            logger.debug("Cached %s", key)
        except CacheUnavailableError as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    def _invalidate(self, movie_id: str) -> None:
        if self._cache is None:
            return

        keys = (self.item_key(movie_id), self._list_key)
        try:
            self._cache.delete(*keys)
            logger.debug("Invalidated %s", ", ".join(keys))
        except CacheUnavailableError as e:
            # Entries may now be stale until the cache comes back or they expire.
            logger.error("Cache invalidation failed for %s: %s", ", ".join(keys), e)

    @property
    def cache_mode(self) -> CacheMode:
        """Get the active cache mode."""
        return self._mode

    @property
    def response_shape(self) -> ResponseShape:
        """Get the active response shape."""
        return self._shape

    @property
    def cache(self) -> CacheStore | None:
        """Get the underlying cache (for testing)."""
        return self._cache
