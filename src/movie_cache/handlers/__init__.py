"""Handler layer for HTTP endpoints.

Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .movie_handler import MovieHandler

__all__ = [
    "MovieHandler",
]
