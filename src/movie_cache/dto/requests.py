"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class UpdateMovieRequest(BaseModel):
    """Request DTO for PATCH /movies/{id}.

    Only the title can be changed.
    """

    title: str = Field(..., description="The new movie title", min_length=1)
