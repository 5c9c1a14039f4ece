"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from movie_cache.services import MovieService

    service = MovieService.create(store=store, cache=cache)
    ```
"""

from .movie_service import MovieService

__all__ = [
    "MovieService",
]
