"""HTTP handlers for movie operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error translation.
"""

import logging
from typing import Any

from fastapi import HTTPException, status

from movie_cache.dto import (
    DeleteResultResponse,
    HealthCheckResponse,
    UpdateMovieRequest,
    UpdateResultResponse,
)
from movie_cache.errors import InvalidMovieIdError, MovieNotFoundError
from movie_cache.services import MovieService

logger = logging.getLogger(__name__)


class MovieHandler:
    """HTTP handlers for the movies resource.

    This handler delegates business logic to MovieService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Mapping domain errors to status codes

    Handler methods are synchronous; FastAPI runs the routes that call
    them in its threadpool so blocking driver calls never stall the
    event loop.

    Example:
        ```python
        handler = MovieHandler(movie_service=service)

        @app.get("/movies/{movie_id}")
        def get_movie(movie_id: str):
            return handler.get_movie(movie_id)
        ```
    """

    def __init__(self, movie_service: MovieService) -> None:
        """Initialize the movie handler.

        Args:
            movie_service: The movie service for business logic (required).
        """
        self._movies = movie_service

    def list_movies(self) -> list[dict[str, Any]]:
        """Handle GET /movies requests.

        Returns:
            Up to ten movies, raw or simplified

        Raises:
            HTTPException: If the store fails
        """
        try:
            return self._movies.list_movies()
        except Exception as e:
            raise self._server_error("Failed to list movies", e) from e

    def get_movie(self, movie_id: str) -> dict[str, Any]:
        """Handle GET /movies/{id} requests.

        Args:
            movie_id: Identifier from the path segment

        Returns:
            The movie, raw or simplified

        Raises:
            HTTPException: 400 for a malformed id, 404 if absent, 500 otherwise
        """
        try:
            return self._movies.get_movie(movie_id)
        except InvalidMovieIdError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except MovieNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found") from e
        except Exception as e:
            raise self._server_error(f"Failed to fetch movie {movie_id}", e) from e

    def update_movie(self, movie_id: str, request: UpdateMovieRequest) -> UpdateResultResponse:
        """Handle PATCH /movies/{id} requests.

        Args:
            movie_id: Identifier from the path segment
            request: The update request DTO

        Returns:
            UpdateResultResponse summarising the store update

        Raises:
            HTTPException: 400 for a malformed id, 500 otherwise
        """
        try:
            result = self._movies.update_title(movie_id, request.title)
        except InvalidMovieIdError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            raise self._server_error(f"Failed to update movie {movie_id}", e) from e

        return UpdateResultResponse.from_entity(result)

    def delete_movie(self, movie_id: str) -> DeleteResultResponse:
        """Handle DELETE /movies/{id} requests.

        Args:
            movie_id: Identifier from the path segment

        Returns:
            DeleteResultResponse summarising the store delete

        Raises:
            HTTPException: 400 for a malformed id, 500 otherwise
        """
        try:
            result = self._movies.delete_movie(movie_id)
        except InvalidMovieIdError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            raise self._server_error(f"Failed to delete movie {movie_id}", e) from e

        return DeleteResultResponse.from_entity(result)

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        The cache being down does not make the service unhealthy, reads
        still succeed against the store.

        Raises:
            HTTPException: 503 if the store is unreachable
        """
        store_ok = self._movies.store_healthy()
        cache_ok = self._movies.cache_healthy()

        if cache_ok is None:
            cache_state = "disabled"
        else:
            cache_state = "connected" if cache_ok else "unavailable"

        if not store_ok:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Store unavailable (cache: {cache_state})",
            )

        return HealthCheckResponse(status="healthy", store="connected", cache=cache_state)

    @staticmethod
    def _server_error(message: str, error: Exception) -> HTTPException:
        logger.exception("%s: %s", message, error)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{message}: {error}",
        )
