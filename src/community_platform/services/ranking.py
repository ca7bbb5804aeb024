"""Deterministic sort orders for listings and search.

Every sort mode is expressed as a single composite comparator returning -1, 0
or 1. Identifiers are unique, so two distinct rows never compare equal and
each mode is a total order: issuing the same query twice against unchanged
data yields the same sequence.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import cmp_to_key
from typing import Any, TypeVar

from community_platform.core.errors import ValidationError
from community_platform.core.settings import settings
from community_platform.db.time import as_utc

T = TypeVar("T")

TIER_EXACT = 0
TIER_PREFIX = 1
TIER_CONTAINS = 2
TIER_OTHER = 3


class SortMode(str, Enum):
    """Sort families supported by the ranking engine."""

    NEWEST = "newest"
    TOP = "top"
    NAME_MATCH = "name_match"


@dataclass(frozen=True)
class RankKey:
    """Sort attributes of one candidate row."""

    id: str
    created_at: datetime
    score: int = 0
    tier: int = TIER_OTHER


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def compare_newest(a: RankKey, b: RankKey) -> int:
    """created_at descending, then id descending."""
    return _cmp(as_utc(b.created_at), as_utc(a.created_at)) or _cmp(b.id, a.id)


def compare_top(a: RankKey, b: RankKey) -> int:
    """score descending, then created_at descending, then id descending."""
    return _cmp(b.score, a.score) or compare_newest(a, b)


def compare_name_match(a: RankKey, b: RankKey) -> int:
    """Match tier ascending, then created_at descending, then id descending."""
    return _cmp(a.tier, b.tier) or compare_newest(a, b)


COMPARATORS: dict[SortMode, Callable[[RankKey, RankKey], int]] = {
    SortMode.NEWEST: compare_newest,
    SortMode.TOP: compare_top,
    SortMode.NAME_MATCH: compare_name_match,
}


def rank(
    items: Iterable[T],
    mode: SortMode,
    key: Callable[[T], RankKey],
) -> list[T]:
    """Return ``items`` in the total order defined by ``mode``."""
    comparator = COMPARATORS[mode]
    decorated = [(key(item), item) for item in items]
    decorated.sort(key=cmp_to_key(lambda left, right: comparator(left[0], right[0])))
    return [item for _, item in decorated]


def rank_by_field(
    items: Iterable[T],
    value: Callable[[T], Any],
    ident: Callable[[T], str],
    *,
    descending: bool,
) -> list[T]:
    """Order by an explicit field in either direction, tie-breaking on id descending."""
    sign = -1 if descending else 1

    def comparator(left: T, right: T) -> int:
        primary = _cmp(_comparable(value(left)), _comparable(value(right))) * sign
        return primary or _cmp(ident(right), ident(left))

    return sorted(items, key=cmp_to_key(comparator))


def _comparable(value: Any) -> Any:
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, str):
        return value.casefold()
    return value


def name_match_tier(name: str, query: str | None) -> int:
    """Classify how closely a community name matches the search query."""
    if not query:
        return TIER_OTHER
    name_folded = name.casefold()
    query_folded = query.casefold()
    if name_folded == query_folded:
        return TIER_EXACT
    if name_folded.startswith(query_folded):
        return TIER_PREFIX
    if query_folded in name_folded:
        return TIER_CONTAINS
    return TIER_OTHER


def normalize_query(raw: str | None) -> str | None:
    """Trim a free-text query.

    Returns None when no text filter applies. Raises ``ValidationError`` when the
    trimmed query is shorter than the configured minimum rather than silently
    dropping the filter.
    """
    if raw is None:
        return None
    query = raw.strip()
    if not query:
        return None
    if len(query) < settings.search_min_query_length:
        raise ValidationError(
            f"Search query must be at least {settings.search_min_query_length} characters."
        )
    return query


def matches_text(query: str | None, *fields: str | None) -> bool:
    """Case-insensitive substring match of ``query`` against any of ``fields``."""
    if query is None:
        return True
    needle = query.casefold()
    return any(field is not None and needle in field.casefold() for field in fields)


__all__ = [
    "COMPARATORS",
    "RankKey",
    "SortMode",
    "compare_name_match",
    "compare_newest",
    "compare_top",
    "matches_text",
    "name_match_tier",
    "normalize_query",
    "rank",
    "rank_by_field",
]
