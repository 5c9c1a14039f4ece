"""Movie storage protocol.

Defines the interface for the document store that owns the movies
collection. Identifiers are passed as strings; implementations validate
them and raise ``InvalidMovieIdError`` for malformed values.
"""

from typing import Protocol, runtime_checkable

from movie_cache.entities import DeleteResultEntity, MovieEntity, UpdateResultEntity


@runtime_checkable
class MovieStore(Protocol):
    """Protocol for movie document stores.

    Implementations raise ``StoreUnavailableError`` when the backend fails.
    """

    def is_valid_id(self, movie_id: str) -> bool:
        """Check whether a string is a well-formed identifier.

        Args:
            movie_id: The identifier to check

        Returns:
            True if the identifier can be used in queries
        """
        ...

    def normalize_id(self, movie_id: str) -> str:
        """Return the canonical spelling of a valid identifier.

        Two strings that address the same document normalize to the same
        value, so it can be used to build cache keys.

        Args:
            movie_id: A well-formed identifier

        Returns:
            The canonical identifier
        """
        ...

    def find(self, limit: int) -> list[MovieEntity]:
        """Fetch up to ``limit`` movies in natural order.

        Args:
            limit: Maximum number of movies to return

        Returns:
            List of movie entities
        """
        ...

    def find_one(self, movie_id: str) -> MovieEntity | None:
        """Fetch a single movie by identifier.

        Args:
            movie_id: The movie identifier

        Returns:
            The movie, or None if absent
        """
        ...

    def update_title(self, movie_id: str, title: str) -> UpdateResultEntity:
        """Set the title of a single movie.

        Args:
            movie_id: The movie identifier
            title: The new title

        Returns:
            Summary of the update
        """
        ...

    def delete_one(self, movie_id: str) -> DeleteResultEntity:
        """Delete a single movie.

        Args:
            movie_id: The movie identifier

        Returns:
            Summary of the delete
        """
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...
