"""Tests for the composite sort comparators."""

from datetime import UTC, datetime, timedelta

import pytest

from community_platform.core.errors import ValidationError
from community_platform.services.ranking import (
    TIER_CONTAINS,
    TIER_EXACT,
    TIER_OTHER,
    TIER_PREFIX,
    RankKey,
    SortMode,
    compare_newest,
    compare_top,
    matches_text,
    name_match_tier,
    normalize_query,
    rank,
    rank_by_field,
)

T0 = datetime(2026, 3, 1, tzinfo=UTC)


def test_newest_orders_by_time_then_id() -> None:
    older = RankKey(id="0002", created_at=T0)
    newer = RankKey(id="0001", created_at=T0 + timedelta(seconds=1))
    tie_low = RankKey(id="0003", created_at=T0)

    assert compare_newest(newer, older) == -1
    assert compare_newest(older, newer) == 1
    # Equal timestamps fall back to id descending
    assert compare_newest(tie_low, older) == -1
    assert compare_newest(older, older) == 0


def test_newest_treats_naive_values_as_utc() -> None:
    aware = RankKey(id="a", created_at=T0)
    naive = RankKey(id="b", created_at=T0.replace(tzinfo=None))
    assert compare_newest(naive, aware) == -1


def test_top_prefers_score_then_recency() -> None:
    items = [
        RankKey(id="01", created_at=T0, score=5),
        RankKey(id="02", created_at=T0 + timedelta(minutes=1), score=5),
        RankKey(id="03", created_at=T0 + timedelta(minutes=2), score=-1),
        RankKey(id="04", created_at=T0, score=7),
    ]
    ranked = rank(items, SortMode.TOP, lambda key: key)
    assert [key.id for key in ranked] == ["04", "02", "01", "03"]
    assert compare_top(items[0], items[0]) == 0


def test_rank_is_deterministic_for_any_input_order() -> None:
    items = [RankKey(id=f"{i:04d}", created_at=T0, score=i % 3) for i in range(20)]
    forward = rank(items, SortMode.TOP, lambda key: key)
    backward = rank(list(reversed(items)), SortMode.TOP, lambda key: key)
    assert forward == backward


def test_name_match_tiers_then_newest() -> None:
    names = {
        "a1": ("python", T0),
        "a2": ("pythonistas", T0 + timedelta(minutes=5)),
        "a3": ("learnpython", T0 + timedelta(minutes=9)),
        "a4": ("snakes", T0 + timedelta(minutes=20)),
        "a5": ("PyThOn", T0 + timedelta(minutes=1)),
    }
    ranked = rank(
        names,
        SortMode.NAME_MATCH,
        lambda ident: RankKey(
            id=ident,
            created_at=names[ident][1],
            tier=name_match_tier(names[ident][0], "python"),
        ),
    )
    assert ranked == ["a5", "a1", "a2", "a3", "a4"]


@pytest.mark.parametrize(
    ("name", "query", "tier"),
    [
        ("Python", "python", TIER_EXACT),
        ("pythonistas", "PYTH", TIER_PREFIX),
        ("learnpython", "python", TIER_CONTAINS),
        ("snakes", "python", TIER_OTHER),
        ("anything", None, TIER_OTHER),
    ],
)
def test_name_match_tier(name: str, query: str | None, tier: int) -> None:
    assert name_match_tier(name, query) == tier


def test_normalize_query() -> None:
    assert normalize_query(None) is None
    assert normalize_query("   ") is None
    assert normalize_query("  ab ") == "ab"
    with pytest.raises(ValidationError):
        normalize_query(" a ")


def test_matches_text_is_case_insensitive() -> None:
    assert matches_text("HeLLo", "say hello world", None)
    assert not matches_text("bye", "say hello world")
    assert matches_text(None, "anything")


def test_rank_by_field_direction_and_tie_break() -> None:
    rows = [("b", "Zeta"), ("a", "alpha"), ("c", "zeta"), ("d", "Beta")]
    ascending = rank_by_field(rows, lambda row: row[1], lambda row: row[0], descending=False)
    assert [row[0] for row in ascending] == ["a", "d", "c", "b"]
    descending = rank_by_field(rows, lambda row: row[1], lambda row: row[0], descending=True)
    assert [row[0] for row in descending] == ["c", "b", "d", "a"]
