"""Domain errors raised by repositories and services.

Handlers translate these into HTTP responses; nothing below the handler
layer knows about status codes.
"""


class MovieCacheError(Exception):
    """Base class for all movie cache errors."""


class InvalidMovieIdError(MovieCacheError):
    """The identifier is not a valid store identifier."""

    def __init__(self, movie_id: str) -> None:
        super().__init__(f"Invalid movie id: {movie_id!r}")
        self.movie_id = movie_id


class MovieNotFoundError(MovieCacheError):
    """No movie exists for the identifier."""

    def __init__(self, movie_id: str) -> None:
        super().__init__(f"Movie not found: {movie_id}")
        self.movie_id = movie_id


class StoreUnavailableError(MovieCacheError):
    """The document store failed or could not be reached."""


class CacheUnavailableError(MovieCacheError):
    """The cache store failed or could not be reached."""
