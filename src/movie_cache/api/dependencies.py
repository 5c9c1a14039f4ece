"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Clients and services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
    - Stores placed on app.state before startup (tests) are used as-is
      and are not closed on shutdown
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool

from movie_cache.config import Settings
from movie_cache.handlers import MovieHandler
from movie_cache.repositories import MongoMovieRepository, RedisCacheRepository
from movie_cache.services import MovieService

logger = logging.getLogger(__name__)


def get_movie_service(request: Request) -> MovieService:
    """Dependency injection for MovieService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The MovieService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "movie_service", None)
    if service is None:
        raise RuntimeError("MovieService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> MovieHandler:
    """Dependency injection for MovieHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The MovieHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "movie_handler", None)
    if handler is None:
        raise RuntimeError("MovieHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores them in app.state:
    1. Repositories (data access) - MongoDB always, Redis unless caching is off
    2. Service (business logic) - stored in app.state.movie_service
    3. Handler (HTTP endpoints) - stored in app.state.movie_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Closes the clients created here and removes services from app.state
    """
    app_settings: Settings = app.state.settings
    owned = []

    store = getattr(app.state, "movie_store", None)
    cache = getattr(app.state, "cache_store", None)
    try:
        if store is None:
            store = MongoMovieRepository.create(app_settings)
            owned.append(store)
        if cache is None and app_settings.caching_enabled:
            cache = RedisCacheRepository.create(app_settings)
            owned.append(cache)
    except Exception:
        for resource in owned:
            resource.close()
        raise

    movie_service = MovieService.create(store=store, cache=cache, app_settings=app_settings)
    movie_handler = MovieHandler(movie_service=movie_service)

    app.state.movie_store = store
    app.state.cache_store = cache
    app.state.movie_service = movie_service
    app.state.movie_handler = movie_handler

    logger.info("Movie service initialized")
    logger.info("Cache mode: %s", app_settings.cache_mode.value)
    logger.info("Response shape: %s", app_settings.response_shape.value)
    if not await run_in_threadpool(movie_service.store_healthy):
        logger.error("MongoDB is not reachable at startup, requests will fail until it is")
    if await run_in_threadpool(movie_service.cache_healthy) is False:
        logger.warning("Redis is not reachable at startup, reads will bypass the cache")

    yield

    del app.state.movie_handler
    del app.state.movie_service
    for resource in owned:
        resource.close()
    if store in owned:
        app.state.movie_store = None
    if cache is not None and cache in owned:
        app.state.cache_store = None
    if owned:
        logger.info("Closed %d client(s)", len(owned))
    logger.info("Movie service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[MovieHandler, Depends(get_handler)]
ServiceDep = Annotated[MovieService, Depends(get_movie_service)]
