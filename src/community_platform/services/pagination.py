"""Offset and cursor pagination over deterministically ordered results.

Offset pages are 1-indexed everywhere. Cursors are opaque URL-safe base64
tokens encoding the last seen ``(created_at, id)`` pair of the Newest order.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

from sqlalchemy import ColumnElement, and_, or_

from community_platform.core.errors import ValidationError
from community_platform.core.settings import settings
from community_platform.db.time import as_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")


def clamp_limit(limit: int | None, *, strict: bool = False) -> int:
    """Clamp ``limit`` to ``[1, PAGE_MAX_LIMIT]``; None means the default.

    With ``strict`` an out-of-range value is rejected instead of clamped.
    """
    if limit is None:
        return settings.page_default_limit
    if strict and not 1 <= limit <= settings.page_max_limit:
        raise ValidationError(f"limit must be between 1 and {settings.page_max_limit}.")
    return max(1, min(settings.page_max_limit, int(limit)))


@dataclass(frozen=True)
class PageSpec:
    """Requested offset page (1-indexed) and page size."""

    page: int = 1
    limit: int = 20

    @classmethod
    def build(cls, page: int | None = None, limit: int | None = None) -> PageSpec:
        """Validate ``page`` and clamp ``limit``."""
        current = 1 if page is None else int(page)
        if current < 1:
            raise ValidationError("page must be >= 1.")
        return cls(page=current, limit=clamp_limit(limit))

    @property
    def offset(self) -> int:
        """Number of rows skipped before this page."""
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageInfo:
    """Pagination block returned with every offset page."""

    current: int
    limit: int
    records: int
    pages: int


def page_info(spec: PageSpec, records: int) -> PageInfo:
    """Build the pagination block for ``records`` total matches."""
    return PageInfo(
        current=spec.page,
        limit=spec.limit,
        records=records,
        pages=math.ceil(records / spec.limit),
    )


@dataclass
class Page(Generic[T]):
    """One offset page of results."""

    items: list[T]
    info: PageInfo


@dataclass
class CursorPage(Generic[T]):
    """One cursor page; ``next_cursor`` is None on the last page."""

    items: list[T] = field(default_factory=list)
    next_cursor: str | None = None


def paginate(items: Sequence[T], spec: PageSpec) -> Page[T]:
    """Slice a fully ranked sequence into the requested page."""
    window = list(items[spec.offset : spec.offset + spec.limit])
    return Page(items=window, info=page_info(spec, len(items)))


@dataclass(frozen=True)
class Cursor:
    """Last-seen position in the Newest order."""

    created_at: datetime
    id: str


def encode_cursor(created_at: datetime, ident: str) -> str:
    """Encode a position as an opaque token."""
    payload = json.dumps(
        {"t": as_utc(created_at).isoformat(), "i": ident},
        separators=(",", ":"),
    ).encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")


def decode_cursor(token: str | None) -> Cursor | None:
    """Decode a token produced by :func:`encode_cursor`.

    Malformed or stale tokens decode to None so the caller restarts from the
    beginning of the listing.
    """
    if not token:
        return None
    padding = "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(token + padding)
        payload = json.loads(raw.decode("utf-8"))
        ident = payload["i"]
        created_at = datetime.fromisoformat(payload["t"])
    except (binascii.Error, ValueError, KeyError, TypeError) as exc:
        logger.debug("Ignoring malformed cursor %r: %s", token, exc)
        return None
    if not isinstance(ident, str) or not ident:
        logger.debug("Ignoring cursor %r without an identifier", token)
        return None
    return Cursor(created_at=as_utc(created_at), id=ident)


def after_cursor_clause(
    created_column: ColumnElement[datetime],
    id_column: ColumnElement[str],
    cursor: Cursor,
) -> ColumnElement[bool]:
    """SQL predicate selecting rows strictly after ``cursor`` in Newest order."""
    return or_(
        created_column < cursor.created_at,
        and_(created_column == cursor.created_at, id_column < cursor.id),
    )


def is_after_cursor(created_at: datetime, ident: str, cursor: Cursor) -> bool:
    """In-memory counterpart of :func:`after_cursor_clause`."""
    created = as_utc(created_at)
    if created != cursor.created_at:
        return created < cursor.created_at
    return ident < cursor.id


def slice_after_cursor(
    items: Sequence[T],
    token: str | None,
    limit: int,
    position: Callable[[T], tuple[datetime, str]],
) -> CursorPage[T]:
    """Cursor-paginate a sequence already in Newest order."""
    cursor = decode_cursor(token)
    remaining = [
        item for item in items if cursor is None or is_after_cursor(*position(item), cursor)
    ]
    return cursor_page(remaining[: limit + 1], limit, position)


def cursor_page(
    fetched: Sequence[T],
    limit: int,
    position: Callable[[T], tuple[datetime, str]],
) -> CursorPage[T]:
    """Build a page from up to ``limit + 1`` fetched rows."""
    window = list(fetched[:limit])
    next_cursor = None
    if len(fetched) > limit and window:
        next_cursor = encode_cursor(*position(window[-1]))
    return CursorPage(items=window, next_cursor=next_cursor)


__all__ = [
    "Cursor",
    "CursorPage",
    "Page",
    "PageInfo",
    "PageSpec",
    "after_cursor_clause",
    "clamp_limit",
    "cursor_page",
    "decode_cursor",
    "encode_cursor",
    "is_after_cursor",
    "page_info",
    "paginate",
    "slice_after_cursor",
]
