import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

import redis
from dotenv import load_dotenv
from pymongo import MongoClient

load_dotenv()


class CacheMode(str, Enum):
    """How much of the read path goes through the cache."""

    OFF = "off"
    LIST = "list"
    DOCUMENT = "document"


class ResponseShape(str, Enum):
    """Representation returned for a movie."""

    RAW = "raw"
    SIMPLIFIED = "simplified"


class ErrorFormat(str, Enum):
    """Body format for error responses."""

    JSON = "json"
    HTML = "html"


_INT_FIELDS = {
    "mongo_timeout_ms": "MONGO_TIMEOUT_MS",
    "cache_ttl": "CACHE_TTL",
    "list_limit": "MOVIES_LIST_LIMIT",
    "api_port": "PORT",
}

_ENUM_FIELDS = {
    "cache_mode": (CacheMode, "CACHE_MODE"),
    "response_shape": (ResponseShape, "RESPONSE_SHAPE"),
    "error_format": (ErrorFormat, "ERROR_FORMAT"),
}


def _to_int(value: int | str, env_var: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{env_var} must be an integer, got {value!r}") from None


def _to_enum(value: Enum | str, enum_cls: type[Enum], env_var: str) -> Enum:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"{env_var} must be one of {choices}, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # MongoDB
    mongo_uri: str = os.getenv("ATLAS_URI") or "mongodb://localhost:27017"
    mongo_database: str = os.getenv("MONGO_DATABASE", "sample_mflix")
    mongo_collection: str = os.getenv("MONGO_COLLECTION", "movies")
    mongo_timeout_ms: int = os.getenv("MONGO_TIMEOUT_MS", "5000")  # type: ignore[assignment]

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Cache
    cache_mode: CacheMode = os.getenv("CACHE_MODE", "document")  # type: ignore[assignment]
    cache_ttl: int = os.getenv("CACHE_TTL", "0")  # type: ignore[assignment]  # 0 = no expiry
    cache_list_key: str = os.getenv("CACHE_LIST_KEY", "movies")
    cache_item_prefix: str = os.getenv("CACHE_ITEM_PREFIX", "movie:")

    # Movies
    response_shape: ResponseShape = os.getenv("RESPONSE_SHAPE", "simplified")  # type: ignore[assignment]
    list_limit: int = os.getenv("MOVIES_LIST_LIMIT", "10")  # type: ignore[assignment]

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = os.getenv("PORT", "3000")  # type: ignore[assignment]
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"
    app_env: str = os.getenv("APP_ENV", "production")
    error_format: ErrorFormat = os.getenv("ERROR_FORMAT", "json")  # type: ignore[assignment]
    static_dir: str = os.getenv("STATIC_DIR", "public")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def caching_enabled(self) -> bool:
        """Check whether any cache key is in use.

        Returns:
            True unless the cache mode is ``off``
        """
        return self.cache_mode is not CacheMode.OFF

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        # Values read from the environment arrive as strings.
        for name, env_var in _INT_FIELDS.items():
            object.__setattr__(self, name, _to_int(getattr(self, name), env_var))
        for name, (enum_cls, env_var) in _ENUM_FIELDS.items():
            object.__setattr__(self, name, _to_enum(getattr(self, name), enum_cls, env_var))

        if not 1 <= self.list_limit <= 10:
            raise ValueError(f"MOVIES_LIST_LIMIT must be between 1 and 10, got {self.list_limit}")

        if self.cache_ttl < 0:
            raise ValueError("CACHE_TTL must be 0 (no expiry) or a positive number of seconds")

        if not self.cache_list_key:
            raise ValueError("CACHE_LIST_KEY must not be empty")

        if self.cache_list_key.startswith(self.cache_item_prefix):
            raise ValueError(
                f"CACHE_LIST_KEY {self.cache_list_key!r} collides with "
                f"CACHE_ITEM_PREFIX {self.cache_item_prefix!r}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(app_settings: Settings | None = None) -> redis.Redis:
    """Create a Redis client instance.

    Responses are decoded to ``str`` since every cached value is JSON text.
    """
    app_settings = app_settings or settings
    return redis.from_url(
        app_settings.redis_url,
        password=app_settings.redis_password,
        decode_responses=True,
    )


def get_mongo_client(app_settings: Settings | None = None) -> MongoClient:
    """Create a MongoDB client instance.

    The driver connects lazily, so this never blocks on the network.
    Datetimes come back timezone-aware in UTC.
    """
    app_settings = app_settings or settings
    return MongoClient(
        app_settings.mongo_uri,
        serverSelectionTimeoutMS=app_settings.mongo_timeout_ms,
        tz_aware=True,
    )
