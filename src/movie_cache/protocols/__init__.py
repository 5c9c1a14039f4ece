"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis -> Memcached, MongoDB -> anything)
- Unit testing with in-memory implementations
- Clear separation of concerns

Usage:
    ```python
    from movie_cache.protocols import CacheStore, MovieStore

    cache: CacheStore = RedisCacheRepository(client)
    store: MovieStore = MongoMovieRepository(collection)
    ```
"""

from .cache_store import CacheStore
from .movie_store import MovieStore

__all__ = [
    "CacheStore",
    "MovieStore",
]
