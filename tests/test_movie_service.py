"""
Tests for the caching policy in MovieService.
"""

import json

import pytest
from bson import ObjectId

from movie_cache.config import CacheMode, ResponseShape, Settings, settings
from movie_cache.errors import InvalidMovieIdError, MovieNotFoundError, StoreUnavailableError
from movie_cache.services import MovieService


def make_service(store, cache, mode=CacheMode.DOCUMENT, shape=ResponseShape.SIMPLIFIED, ttl=0):
    return MovieService(
        store=store,
        cache=cache,
        cache_mode=mode,
        response_shape=shape,
        list_limit=10,
        ttl=ttl,
        list_key="movies",
        item_prefix="movie:",
    )


def test_get_movie_caches_once(store, cache, movie_id):
    """A second read is served from the cache without touching the store."""
    service = make_service(store, cache)

    first = service.get_movie(movie_id)
    second = service.get_movie(movie_id)

    assert first == second
    assert first == {"id": movie_id, "name": "movie-0", "title": "Movie 0"}
    assert store.calls["find_one"] == 1
    assert json.loads(cache.data[f"movie:{movie_id}"]) == first


def test_get_movie_raw_shape(store, cache, movie_id):
    service = make_service(store, cache, shape=ResponseShape.RAW)

    movie = service.get_movie(movie_id)

    assert movie["_id"] == movie_id
    assert movie["year"] == 1990
    assert movie["released"] == "1990-01-01T00:00:00.000Z"
    assert movie["cast"] == ["Someone", "Someone Else"]


def test_get_movie_invalid_id_never_reaches_store_or_cache(store, cache):
    service = make_service(store, cache)

    with pytest.raises(InvalidMovieIdError):
        service.get_movie("not-an-object-id")

    assert store.calls["find_one"] == 0
    assert cache.data == {}


def test_get_movie_not_found_is_not_cached(store, cache):
    service = make_service(store, cache)
    missing = str(ObjectId())

    with pytest.raises(MovieNotFoundError):
        service.get_movie(missing)

    assert f"movie:{missing}" not in cache.data


def test_list_movies_respects_limit_and_caches(store, cache):
    service = make_service(store, cache)

    movies = service.list_movies()
    again = service.list_movies()

    assert len(movies) == 10
    assert again == movies
    assert store.calls["find"] == 1
    assert len(json.loads(cache.data["movies"])) == 10


def test_list_movies_truncates_oversized_cache_entry(store, cache):
    cache.data["movies"] = json.dumps([{"id": str(i)} for i in range(25)])
    service = make_service(store, cache)

    assert len(service.list_movies()) == 10
    assert store.calls["find"] == 0


def test_update_invalidates_item_and_list(store, cache, movie_id):
    service = make_service(store, cache)
    service.list_movies()
    service.get_movie(movie_id)

    result = service.update_title(movie_id, "Renamed")

    assert result.matched_count == 1
    assert result.modified_count == 1
    assert "movies" not in cache.data
    assert f"movie:{movie_id}" not in cache.data
    assert service.get_movie(movie_id)["title"] == "Renamed"
    assert service.list_movies()[0]["title"] == "Renamed"


def test_update_without_match_still_invalidates(store, cache):
    service = make_service(store, cache)
    missing = str(ObjectId())
    cache.data[f"movie:{missing}"] = json.dumps({"id": missing, "name": None, "title": "stale"})
    cache.data["movies"] = "[]"

    result = service.update_title(missing, "Anything")

    assert result.matched_count == 0
    assert cache.data == {}


def test_delete_invalidates_and_subsequent_get_is_not_found(store, cache, movie_id):
    service = make_service(store, cache)
    service.get_movie(movie_id)
    service.list_movies()

    result = service.delete_movie(movie_id)

    assert result.deleted_count == 1
    assert set(cache.deleted) >= {f"movie:{movie_id}", "movies"}
    with pytest.raises(MovieNotFoundError):
        service.get_movie(movie_id)
    assert all(movie["id"] != movie_id for movie in service.list_movies())


def test_interleaved_update_and_delete_leave_no_stale_entry(store, cache, movie_id):
    """Whatever order mutations complete in, the last one clears the cache."""
    service = make_service(store, cache)

    service.update_title(movie_id, "First")
    service.get_movie(movie_id)
    service.delete_movie(movie_id)

    assert f"movie:{movie_id}" not in cache.data
    with pytest.raises(MovieNotFoundError):
        service.get_movie(movie_id)


def test_cache_outage_falls_back_to_store(store, cache, movie_id):
    cache.fail = True
    service = make_service(store, cache)

    assert len(service.list_movies()) == 10
    assert service.get_movie(movie_id)["id"] == movie_id
    assert service.update_title(movie_id, "Still works").matched_count == 1
    assert service.delete_movie(movie_id).deleted_count == 1
    assert store.calls["find"] == 1
    assert store.calls["find_one"] == 1


def test_unreadable_cache_entry_is_treated_as_miss(store, cache, movie_id):
    cache.data[f"movie:{movie_id}"] = "{not json"
    service = make_service(store, cache)

    assert service.get_movie(movie_id)["title"] == "Movie 0"
    assert store.calls["find_one"] == 1


def test_list_mode_does_not_cache_single_movies(store, cache, movie_id):
    service = make_service(store, cache, mode=CacheMode.LIST, shape=ResponseShape.RAW)

    service.get_movie(movie_id)
    service.get_movie(movie_id)
    service.list_movies()

    assert store.calls["find_one"] == 2
    assert list(cache.data) == ["movies"]


def test_off_mode_never_touches_cache(store, cache, movie_id):
    service = make_service(store, cache, mode=CacheMode.OFF, shape=ResponseShape.RAW)

    service.list_movies()
    service.list_movies()
    service.get_movie(movie_id)
    service.update_title(movie_id, "x")

    assert store.calls["find"] == 2
    assert cache.data == {}
    assert cache.deleted == []
    assert service.cache is None
    assert service.cache_healthy() is None


def test_ttl_is_passed_to_cache(store, cache, movie_id):
    service = make_service(store, cache, ttl=60)

    service.get_movie(movie_id)

    assert cache.ttls[f"movie:{movie_id}"] == 60


def test_store_errors_propagate(store, cache):
    def broken(limit):
        raise StoreUnavailableError("mongo down")

    store.find = broken
    service = make_service(store, cache)

    with pytest.raises(StoreUnavailableError):
        service.list_movies()


def test_id_spellings_share_one_cache_entry(store, cache, movie_id):
    """Reads with an upper-case id are invalidated by mutations with the lower-case id."""
    service = make_service(store, cache)
    shouting = movie_id.upper()

    assert service.get_movie(shouting)["title"] == "Movie 0"
    assert list(cache.data) == [f"movie:{movie_id}"]

    service.update_title(movie_id, "Renamed")
    assert service.get_movie(shouting)["title"] == "Renamed"

    service.delete_movie(movie_id)
    with pytest.raises(MovieNotFoundError):
        service.get_movie(shouting)


def test_item_key_is_canonical(store, cache, movie_id):
    service = make_service(store, cache)

    assert service.item_key(movie_id.upper()) == f"movie:{movie_id}"
    with pytest.raises(InvalidMovieIdError):
        service.item_key("nope")


def test_create_applies_settings(store, cache, movie_id):
    app_settings = Settings(
        cache_mode=CacheMode.LIST,
        response_shape=ResponseShape.RAW,
        cache_ttl=30,
        list_limit=5,
        cache_list_key="all-movies",
        cache_item_prefix="film:",
    )
    service = MovieService.create(store=store, cache=cache, app_settings=app_settings)

    movies = service.list_movies()
    service.get_movie(movie_id)

    assert service.cache_mode is CacheMode.LIST
    assert service.response_shape is ResponseShape.RAW
    assert len(movies) == 5
    assert "_id" in movies[0]
    assert list(cache.data) == ["all-movies"]
    assert cache.ttls["all-movies"] == 30

    service.update_title(movie_id, "Renamed")
    assert set(cache.deleted) == {f"film:{movie_id}", "all-movies"}


def test_defaults_come_from_environment_settings(store, cache, movie_id):
    service = MovieService(store=store, cache=cache)

    assert service.cache_mode is settings.cache_mode
    assert service.response_shape is settings.response_shape
    assert len(service.list_movies()) == settings.list_limit

    service.update_title(movie_id, "Renamed")
    if settings.caching_enabled:
        assert set(cache.deleted) == {
            f"{settings.cache_item_prefix}{movie_id}",
            settings.cache_list_key,
        }
