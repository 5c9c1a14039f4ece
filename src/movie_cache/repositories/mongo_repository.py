"""MongoDB implementation of MovieStore.

Documents are read from a single collection and converted to
``MovieEntity`` with every BSON value reduced to a JSON-compatible one.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from movie_cache.config import Settings, get_mongo_client, settings
from movie_cache.entities import DeleteResultEntity, MovieEntity, UpdateResultEntity
from movie_cache.errors import InvalidMovieIdError, StoreUnavailableError

logger = logging.getLogger(__name__)


def to_jsonable(value: Any) -> Any:
    """Convert a BSON value into something ``json.dumps`` accepts.

    ObjectIds become hex strings and datetimes UTC ISO-8601 strings with a
    ``Z`` suffix. Any other non-JSON type falls back to ``str()``.
    """
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        utc = value.astimezone(timezone.utc)
        return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def document_to_entity(document: dict[str, Any]) -> MovieEntity:
    """Build a MovieEntity from a raw MongoDB document."""
    jsonable = to_jsonable(document)
    return MovieEntity(
        id=jsonable["_id"],
        title=jsonable.get("title"),
        name=jsonable.get("name"),
        document=jsonable,
    )


class MongoMovieRepository:
    """MongoDB movies collection.

    This class satisfies the MovieStore protocol through structural
    typing. Driver errors are re-raised as ``StoreUnavailableError``.
    """

    def __init__(self, collection: Collection) -> None:
        """Initialize the repository.

        Args:
            collection: The pymongo collection holding movie documents.
        """
        self._collection = collection

    @classmethod
    def create(cls, app_settings: Settings | None = None) -> "MongoMovieRepository":
        """Factory method to create MongoMovieRepository from settings.

        Args:
            app_settings: Connection, database and collection settings.
                If None, uses the environment settings.

        Returns:
            Configured MongoMovieRepository
        """
        app_settings = app_settings or settings
        client = get_mongo_client(app_settings)
        db = client[app_settings.mongo_database]
        return cls(collection=db[app_settings.mongo_collection])

    def is_valid_id(self, movie_id: str) -> bool:
        """Check whether a string is a valid ObjectId."""
        return ObjectId.is_valid(movie_id)

    def normalize_id(self, movie_id: str) -> str:
        """Return the lower-case hex form of an ObjectId string."""
        return str(self._object_id(movie_id))

    def _object_id(self, movie_id: str) -> ObjectId:
        if not self.is_valid_id(movie_id):
            raise InvalidMovieIdError(movie_id)
        return ObjectId(movie_id)

    def find(self, limit: int) -> list[MovieEntity]:
        """Fetch up to ``limit`` movies.

        Args:
            limit: Maximum number of movies to return

        Returns:
            List of movie entities
        """
        try:
            documents = list(self._collection.find({}).limit(limit))
        except PyMongoError as e:
            raise StoreUnavailableError(f"Failed to list movies: {e}") from e
        return [document_to_entity(doc) for doc in documents]

    def find_one(self, movie_id: str) -> MovieEntity | None:
        """Fetch a single movie by identifier.

        Args:
            movie_id: The movie identifier

        Returns:
            The movie, or None if absent

        Raises:
            InvalidMovieIdError: If the identifier is not an ObjectId
        """
        query = {"_id": self._object_id(movie_id)}
        try:
            document = self._collection.find_one(query)
        except PyMongoError as e:
            raise StoreUnavailableError(f"Failed to fetch movie {movie_id}: {e}") from e
        if document is None:
            return None
        return document_to_entity(document)

    def update_title(self, movie_id: str, title: str) -> UpdateResultEntity:
        """Set the title of a single movie.

        Args:
            movie_id: The movie identifier
            title: The new title

        Returns:
            Summary of the update
        """
        query = {"_id": self._object_id(movie_id)}
        try:
            result = self._collection.update_one(query, {"$set": {"title": title}})
        except PyMongoError as e:
            raise StoreUnavailableError(f"Failed to update movie {movie_id}: {e}") from e

        logger.debug(
            "Updated movie %s: matched=%d modified=%d",
            movie_id,
            result.matched_count,
            result.modified_count,
        )
        return UpdateResultEntity(
            acknowledged=result.acknowledged,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_id=str(result.upserted_id) if result.upserted_id is not None else None,
        )

    def delete_one(self, movie_id: str) -> DeleteResultEntity:
        """Delete a single movie.

        Args:
            movie_id: The movie identifier

        Returns:
            Summary of the delete
        """
        query = {"_id": self._object_id(movie_id)}
        try:
            result = self._collection.delete_one(query)
        except PyMongoError as e:
            raise StoreUnavailableError(f"Failed to delete movie {movie_id}: {e}") from e

        logger.debug("Deleted movie %s: deleted=%d", movie_id, result.deleted_count)
        return DeleteResultEntity(
            acknowledged=result.acknowledged,
            deleted_count=result.deleted_count,
        )

    def health_check(self) -> bool:
        """Check if MongoDB is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            self._collection.database.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("MongoDB health check failed: %s", e)
            return False

    def close(self) -> None:
        """Close the underlying client."""
        self._collection.database.client.close()
