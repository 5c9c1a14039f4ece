"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
Internal domain logic should use entities from the entities package.
"""

from .requests import UpdateMovieRequest
from .responses import (
    DeleteResultResponse,
    ErrorResponse,
    HealthCheckResponse,
    UpdateResultResponse,
)

__all__ = [
    "UpdateMovieRequest",
    "UpdateResultResponse",
    "DeleteResultResponse",
    "HealthCheckResponse",
    "ErrorResponse",
]
