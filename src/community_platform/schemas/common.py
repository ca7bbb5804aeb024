"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

ItemT = TypeVar("ItemT")


class Pagination(BaseModel):
    """Pagination block of an offset page (pages are 1-indexed)."""

    current: int
    limit: int
    records: int
    pages: int

    model_config = ConfigDict(from_attributes=True)


class PageResponse(BaseModel, Generic[ItemT]):
    """One offset page of results."""

    pagination: Pagination
    data: list[ItemT]


class CursorPageResponse(BaseModel, Generic[ItemT]):
    """One cursor page of results."""

    data: list[ItemT]
    next_cursor: str | None = Field(
        None,
        description="Opaque token for the next page; null on the last page.",
    )


class ErrorResponse(BaseModel):
    """Body returned for every engine error."""

    detail: str
    kind: str
