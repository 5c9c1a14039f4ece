"""Repository layer for data access.

This layer wraps the external stores (MongoDB, Redis) behind the
protocol-based interfaces in ``movie_cache.protocols``. The repositories
are protocol-based (structural typing), not inheritance-based.
"""

from movie_cache.protocols import CacheStore, MovieStore

from .mongo_repository import MongoMovieRepository
from .redis_repository import RedisCacheRepository

__all__ = [
    "CacheStore",
    "MovieStore",
    "MongoMovieRepository",
    "RedisCacheRepository",
]
