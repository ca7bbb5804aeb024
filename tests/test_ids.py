"""Tests for identifiers and time helpers."""

from datetime import UTC, datetime, timedelta, timezone

from community_platform.db.ids import new_id
from community_platform.db.time import as_utc, utcnow


def test_ids_are_unique_and_increasing() -> None:
    ids = [new_id() for _ in range(500)]
    assert len(set(ids)) == len(ids)
    assert ids == sorted(ids)
    assert all(len(ident) == 32 for ident in ids)


def test_as_utc_normalizes_values() -> None:
    naive = datetime(2026, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    shifted = datetime(2026, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc(shifted).hour == 12
    assert utcnow().tzinfo is not None
