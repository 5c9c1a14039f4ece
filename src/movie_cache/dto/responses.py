"""Response DTOs for API endpoints.

Mutation summaries keep the camelCase keys the store driver reports
(``matchedCount``, ``deletedCount``) so existing clients keep working.
"""

from pydantic import BaseModel, Field

from movie_cache.entities import DeleteResultEntity, UpdateResultEntity


class UpdateResultResponse(BaseModel):
    """Response DTO for an update operation."""

    acknowledged: bool = Field(..., description="Whether the store acknowledged the write")
    matched_count: int = Field(
        ...,
        description="Documents matched by the identifier (0 or 1)",
        ge=0,
        serialization_alias="matchedCount",
    )
    modified_count: int = Field(
        ...,
        description="Documents whose title actually changed (0 or 1)",
        ge=0,
        serialization_alias="modifiedCount",
    )
    upserted_id: str | None = Field(
        None,
        description="Identifier of an upserted document (always null, updates never upsert)",
        serialization_alias="upsertedId",
    )

    @classmethod
    def from_entity(cls, entity: UpdateResultEntity) -> "UpdateResultResponse":
        return cls(
            acknowledged=entity.acknowledged,
            matched_count=entity.matched_count,
            modified_count=entity.modified_count,
            upserted_id=entity.upserted_id,
        )


class DeleteResultResponse(BaseModel):
    """Response DTO for a delete operation."""

    acknowledged: bool = Field(..., description="Whether the store acknowledged the write")
    deleted_count: int = Field(
        ...,
        description="Documents removed (0 or 1)",
        ge=0,
        serialization_alias="deletedCount",
    )

    @classmethod
    def from_entity(cls, entity: DeleteResultEntity) -> "DeleteResultResponse":
        return cls(acknowledged=entity.acknowledged, deleted_count=entity.deleted_count)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store: str = Field(..., description="'connected' or 'unavailable'")
    cache: str = Field(..., description="'connected', 'unavailable' or 'disabled'")


class ErrorResponse(BaseModel):
    """Response DTO for JSON error bodies."""

    error: str = Field(..., description="Human-readable error message")
