"""
Shared fixtures: in-memory stores satisfying the MovieStore and CacheStore
protocols, so no MongoDB or Redis is needed.
"""

from datetime import datetime

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from movie_cache.api.app import create_app
from movie_cache.config import CacheMode, ErrorFormat, ResponseShape, Settings
from movie_cache.entities import DeleteResultEntity, MovieEntity, UpdateResultEntity
from movie_cache.errors import CacheUnavailableError, InvalidMovieIdError
from movie_cache.repositories.mongo_repository import document_to_entity


class FakeMovieStore:
    """Dict-backed MovieStore that counts calls per operation."""

    def __init__(self, documents: list[dict]) -> None:
        self.documents = {doc["_id"]: dict(doc) for doc in documents}
        self.calls: dict[str, int] = {"find": 0, "find_one": 0, "update_title": 0, "delete_one": 0}
        self.healthy = True

    def is_valid_id(self, movie_id: str) -> bool:
        return ObjectId.is_valid(movie_id)

    def normalize_id(self, movie_id: str) -> str:
        return str(self._oid(movie_id))

    def _oid(self, movie_id: str) -> ObjectId:
        if not self.is_valid_id(movie_id):
            raise InvalidMovieIdError(movie_id)
        return ObjectId(movie_id)

    def find(self, limit: int) -> list[MovieEntity]:
        self.calls["find"] += 1
        return [document_to_entity(doc) for doc in list(self.documents.values())[:limit]]

    def find_one(self, movie_id: str) -> MovieEntity | None:
        self.calls["find_one"] += 1
        doc = self.documents.get(self._oid(movie_id))
        return document_to_entity(doc) if doc else None

    def update_title(self, movie_id: str, title: str) -> UpdateResultEntity:
        self.calls["update_title"] += 1
        doc = self.documents.get(self._oid(movie_id))
        if doc is None:
            return UpdateResultEntity(acknowledged=True, matched_count=0, modified_count=0)
        modified = int(doc.get("title") != title)
        doc["title"] = title
        return UpdateResultEntity(acknowledged=True, matched_count=1, modified_count=modified)

    def delete_one(self, movie_id: str) -> DeleteResultEntity:
        self.calls["delete_one"] += 1
        removed = self.documents.pop(self._oid(movie_id), None)
        return DeleteResultEntity(acknowledged=True, deleted_count=int(removed is not None))

    def health_check(self) -> bool:
        return self.healthy


class FakeCache:
    """Dict-backed CacheStore; set ``fail`` to simulate an outage."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.deleted: list[str] = []
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise CacheUnavailableError("cache down")

    def get(self, key: str) -> str | None:
        self._check()
        return self.data.get(key)

    def set(self, key: str, value: str, ttl: int = 0) -> None:
        self._check()
        self.data[key] = value
        self.ttls[key] = ttl

    def delete(self, *keys: str) -> int:
        self._check()
        self.deleted.extend(keys)
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    def health_check(self) -> bool:
        return not self.fail


def make_movies(count: int) -> list[dict]:
    return [
        {
            "_id": ObjectId(),
            "title": f"Movie {i}",
            "name": f"movie-{i}",
            "year": 1990 + i,
            "released": datetime(1990 + i, 1, 1),
            "cast": ["Someone", "Someone Else"],
        }
        for i in range(count)
    ]


@pytest.fixture
def movies():
    """Twelve movies, more than the list limit."""
    return make_movies(12)


@pytest.fixture
def store(movies):
    return FakeMovieStore(movies)


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def movie_id(movies):
    return str(movies[0]["_id"])


@pytest.fixture
def make_settings():
    """Build Settings for a given variant; static files are off unless a directory is given."""

    def _make(
        cache_mode: CacheMode = CacheMode.DOCUMENT,
        response_shape: ResponseShape = ResponseShape.SIMPLIFIED,
        error_format: ErrorFormat = ErrorFormat.JSON,
        app_env: str = "production",
        static_dir: str = "/nonexistent-static-dir",
    ) -> Settings:
        return Settings(
            cache_mode=cache_mode,
            response_shape=response_shape,
            error_format=error_format,
            app_env=app_env,
            cache_ttl=0,
            list_limit=10,
            cache_list_key="movies",
            cache_item_prefix="movie:",
            static_dir=static_dir,
        )

    return _make


@pytest.fixture
def make_client(make_settings, store, cache):
    """Start an app against the fake stores; yields a factory."""
    clients = []

    def _make(raise_server_exceptions: bool = True, **kwargs) -> TestClient:
        app = create_app(make_settings(**kwargs), movie_store=store, cache_store=cache)
        client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    """Document-level caching with simplified responses."""
    return make_client()
