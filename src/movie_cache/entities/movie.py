"""Movie domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class MovieEntity:
    """Domain entity for a single movie document.

    This is an internal representation used by services and repositories.
    For API contracts, use the DTO classes from the dto package.

    Attributes:
        id: The store identifier as a 24-character hex string
        title: The movie title, if the document has one
        name: The movie name, if the document has one
        document: The full document in JSON-compatible form
    """

    id: str
    title: str | None = None
    name: str | None = None
    document: dict[str, Any] = field(default_factory=dict)

    def to_summary(self) -> dict[str, Any]:
        """Return the simplified ``{id, name, title}`` projection."""
        return {"id": self.id, "name": self.name, "title": self.title}
