import logging
import os
import time
from http import HTTPStatus
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from movie_cache import __version__
from movie_cache.api.dependencies import HandlerDep, ServiceDep, lifespan
from movie_cache.config import ErrorFormat, Settings, settings
from movie_cache.dto import (
    DeleteResultResponse,
    ErrorResponse,
    HealthCheckResponse,
    UpdateMovieRequest,
    UpdateResultResponse,
)
from movie_cache.protocols import CacheStore, MovieStore
from movie_cache.utils import setup_logger

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Malformed movie id"},
    500: {"model": ErrorResponse, "description": "Store failure"},
}


def _render_error(
    request: Request,
    app_settings: Settings,
    status_code: int,
    detail: str,
) -> Response:
    """Render an error body in the configured format."""
    if app_settings.error_format is ErrorFormat.HTML:
        templates: Jinja2Templates = request.app.state.templates
        return templates.TemplateResponse(
            request,
            "error.html",
            {
                "message": HTTPStatus(status_code).phrase,
                "status_code": status_code,
                "error": detail if app_settings.is_development else "",
            },
            status_code=status_code,
        )
    return JSONResponse(status_code=status_code, content={"error": detail})


def _register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        response = _render_error(request, app_settings, exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
        messages = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        return _render_error(
            request,
            app_settings,
            422,
            "; ".join(messages),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _render_error(
            request,
            app_settings,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(exc) or exc.__class__.__name__,
        )


def _register_routes(app: FastAPI) -> None:
    @app.get("/")
    def root(service: ServiceDep) -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Movie Cache API",
            "version": __version__,
            "cache_mode": service.cache_mode.value,
            "response_shape": service.response_shape.value,
            "endpoints": {
                "movies": "/movies",
                "movie": "/movies/{id}",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return handler.health_check()

    @app.get("/movies", response_model=list[dict[str, Any]], responses={500: ERROR_RESPONSES[500]})
    def list_movies(handler: HandlerDep) -> list[dict[str, Any]]:
        """List up to ten movies, from the cache when possible."""
        return handler.list_movies()

    @app.get(
        "/movies/{movie_id}",
        response_model=dict[str, Any],
        responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "No such movie"}},
    )
    def get_movie(movie_id: str, handler: HandlerDep) -> dict[str, Any]:
        """Fetch a single movie by id."""
        return handler.get_movie(movie_id)

    @app.patch("/movies/{movie_id}", response_model=UpdateResultResponse, responses=ERROR_RESPONSES)
    def update_movie(
        movie_id: str,
        request: UpdateMovieRequest,
        handler: HandlerDep,
    ) -> UpdateResultResponse:
        """
        Update a movie's title.

        The movie's cache entry and the cached list are invalidated
        whether or not a document matched.
        """
        return handler.update_movie(movie_id, request)

    @app.delete("/movies/{movie_id}", response_model=DeleteResultResponse, responses=ERROR_RESPONSES)
    def delete_movie(movie_id: str, handler: HandlerDep) -> DeleteResultResponse:
        """Delete a movie and invalidate its cache entries."""
        return handler.delete_movie(movie_id)


def create_app(
    app_settings: Settings | None = None,
    movie_store: MovieStore | None = None,
    cache_store: CacheStore | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use. Defaults to the environment settings.
        movie_store: Store to use instead of MongoDB (tests).
        cache_store: Cache to use instead of Redis (tests).

    Returns:
        Configured FastAPI application; clients are created on startup.
    """
    app_settings = app_settings or settings
    setup_logger(level=app_settings.log_level)

    app = FastAPI(
        title="Movie Cache API",
        description="CRUD over a MongoDB movies collection with a Redis look-aside cache",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.movie_store = movie_store
    app.state.cache_store = cache_store
    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            "%s %s %d %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    _register_exception_handlers(app, app_settings)
    _register_routes(app)

    if os.path.isdir(app_settings.static_dir):
        app.mount("/static", StaticFiles(directory=app_settings.static_dir), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "movie_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
