"""Mutation result domain entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UpdateResultEntity:
    """Outcome of a single-document update.

    Attributes:
        acknowledged: Whether the store acknowledged the write
        matched_count: Number of documents matched by the filter
        modified_count: Number of documents actually changed
        upserted_id: Identifier of an upserted document, if any
    """

    acknowledged: bool
    matched_count: int
    modified_count: int
    upserted_id: str | None = None


@dataclass(frozen=True)
class DeleteResultEntity:
    """Outcome of a single-document delete."""

    acknowledged: bool
    deleted_count: int
