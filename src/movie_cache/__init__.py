"""Movie Cache - CRUD API over MongoDB with a Redis look-aside cache.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (MovieStore, CacheStore)
    - repositories: Data access implementations (MongoDB, Redis)
    - services: Business logic, including the caching policy
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from movie_cache.repositories import MongoMovieRepository, RedisCacheRepository
    from movie_cache.services import MovieService

    service = MovieService.create(
        store=MongoMovieRepository.create(),
        cache=RedisCacheRepository.create(),
    )
    ```

For HTTP API:
    ```python
    from movie_cache.api.app import app
    ```
"""

__version__ = "0.1.0"

from movie_cache.config import CacheMode, ResponseShape, get_mongo_client, get_redis_client, settings
from movie_cache.dto import UpdateMovieRequest
from movie_cache.entities import DeleteResultEntity, MovieEntity, UpdateResultEntity
from movie_cache.errors import (
    CacheUnavailableError,
    InvalidMovieIdError,
    MovieCacheError,
    MovieNotFoundError,
    StoreUnavailableError,
)
from movie_cache.handlers import MovieHandler
from movie_cache.protocols import CacheStore, MovieStore
from movie_cache.repositories import MongoMovieRepository, RedisCacheRepository
from movie_cache.services import MovieService

__all__ = [
    # Configuration
    "settings",
    "CacheMode",
    "ResponseShape",
    "get_mongo_client",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStore",
    "MovieStore",
    # Services (business logic)
    "MovieService",
    # Handlers (HTTP)
    "MovieHandler",
    # Repositories (data access)
    "MongoMovieRepository",
    "RedisCacheRepository",
    # Entities (domain models)
    "MovieEntity",
    "UpdateResultEntity",
    "DeleteResultEntity",
    # DTOs (API contracts)
    "UpdateMovieRequest",
    # Errors
    "MovieCacheError",
    "InvalidMovieIdError",
    "MovieNotFoundError",
    "StoreUnavailableError",
    "CacheUnavailableError",
]
