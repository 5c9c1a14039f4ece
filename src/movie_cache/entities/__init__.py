"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .movie import MovieEntity
from .results import DeleteResultEntity, UpdateResultEntity

__all__ = ["MovieEntity", "UpdateResultEntity", "DeleteResultEntity"]
