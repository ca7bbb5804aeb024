"""Tests for listings, search and their pagination."""

from datetime import timedelta, timezone

import pytest

from community_platform.core.errors import NotFoundError, ValidationError
from community_platform.models import TargetKind, VoteState
from community_platform.services import content
from community_platform.services.listing import (
    CommentFilter,
    CommentScope,
    CommunityFilter,
    CommunitySortField,
    PostFilter,
    SortDirection,
    global_latest_posts,
    list_comments,
    list_content,
    list_posts,
    list_posts_after,
    search_communities,
)
from community_platform.services.pagination import PageSpec
from community_platform.services.ranking import SortMode
from community_platform.services.votes import set_vote
from tests.conftest import at


@pytest.fixture()
def posts(community, test_user, make_post):
    """Twelve posts; the last three share a timestamp."""
    created = [make_post(community, test_user, created_at=at(i)) for i in range(9)]
    created += [make_post(community, test_user, created_at=at(20)) for _ in range(3)]
    return created


def _expected_newest(items):
    return sorted(items, key=lambda post: (post.created_at, post.id), reverse=True)


def test_newest_order(db_session, posts) -> None:
    page = list_posts(db_session, PostFilter(), SortMode.NEWEST, PageSpec.build(1, 100))
    assert [item.post.id for item in page.items] == [post.id for post in _expected_newest(posts)]
    assert page.info.records == 12


@pytest.mark.parametrize("limit", [1, 5, 7, 12, 100])
def test_offset_pages_are_complete(db_session, posts, limit) -> None:
    first = list_posts(db_session, PostFilter(), SortMode.NEWEST, PageSpec.build(1, limit))
    seen = []
    for number in range(1, first.info.pages + 1):
        page = list_posts(db_session, PostFilter(), SortMode.NEWEST, PageSpec.build(number, limit))
        seen.extend(item.post.id for item in page.items)
    assert seen == [post.id for post in _expected_newest(posts)]
    assert len(set(seen)) == len(seen)


@pytest.mark.parametrize("limit", [1, 4, 5, 11])
def test_cursor_pages_are_complete(db_session, posts, limit) -> None:
    seen = []
    cursor = None
    while True:
        page = list_posts_after(db_session, PostFilter(), cursor, limit)
        seen.extend(item.post.id for item in page.items)
        if page.next_cursor is None:
            break
        cursor = page.next_cursor
    assert seen == [post.id for post in _expected_newest(posts)]


def test_malformed_cursor_starts_over(db_session, posts) -> None:
    page = list_posts_after(db_session, PostFilter(), "%%%", 3)
    assert [item.post.id for item in page.items] == [post.id for post in _expected_newest(posts)[:3]]


def test_top_order_uses_live_scores(db_session, community, test_user, other_user, third_user, make_post) -> None:
    low = make_post(community, test_user, created_at=at(3))
    high = make_post(community, test_user, created_at=at(1))
    tie_new = make_post(community, test_user, created_at=at(2))
    set_vote(db_session, other_user.id, high.id, TargetKind.POST, VoteState.UPVOTE)
    set_vote(db_session, third_user.id, high.id, TargetKind.POST, VoteState.UPVOTE)
    set_vote(db_session, other_user.id, low.id, TargetKind.POST, VoteState.DOWNVOTE)

    page = list_posts(db_session, PostFilter(), SortMode.TOP)
    assert [item.post.id for item in page.items] == [high.id, tie_new.id, low.id]
    assert [item.score for item in page.items] == [2, 0, -1]


def test_text_filter_and_short_query(db_session, community, test_user, make_post) -> None:
    match = make_post(community, test_user, title="Gardening tips", created_at=at(1))
    make_post(community, test_user, title="Cooking notes", created_at=at(2))
    body_match = make_post(community, test_user, body="All about GARDENING here", created_at=at(3))

    page = list_posts(db_session, PostFilter(query="gardening"))
    assert [item.post.id for item in page.items] == [body_match.id, match.id]
    with pytest.raises(ValidationError):
        list_posts(db_session, PostFilter(query="g"))
    assert list_posts(db_session, PostFilter(query="   ")).info.records == 3


def test_date_and_community_filters(db_session, community, test_user, make_community, make_post) -> None:
    other = make_community("elsewhere")
    make_post(community, test_user, created_at=at(1))
    inside = make_post(community, test_user, created_at=at(5))
    make_post(other, test_user, created_at=at(5))

    page = list_posts(
        db_session,
        PostFilter(community_id=community.id, created_from=at(2), created_to=at(6)),
    )
    assert [item.post.id for item in page.items] == [inside.id]
    with pytest.raises(NotFoundError):
        list_posts(db_session, PostFilter(community_id="0" * 32))


def test_date_bounds_with_utc_offset(db_session, community, test_user, make_post) -> None:
    tokyo = timezone(timedelta(hours=9))
    make_post(community, test_user, created_at=at(1))
    inside = make_post(community, test_user, created_at=at(5))
    make_post(community, test_user, created_at=at(10))

    page = list_posts(
        db_session,
        PostFilter(
            created_from=at(2).astimezone(tokyo),
            created_to=at(6).astimezone(tokyo),
        ),
    )
    assert [item.post.id for item in page.items] == [inside.id]


def test_comment_counts_in_summaries(db_session, test_post, other_user, make_comment) -> None:
    make_comment(test_post, other_user)
    doomed = make_comment(test_post, other_user)
    content.delete_comment(db_session, other_user.id, doomed.id)

    item = list_posts(db_session, PostFilter()).items[0]
    assert item.comment_count == 1


def test_global_latest_is_limited(db_session, posts) -> None:
    latest = global_latest_posts(db_session)
    assert len(latest) == 10
    assert [item.post.id for item in latest] == [post.id for post in _expected_newest(posts)[:10]]


def test_comment_scopes_and_replies(db_session, test_post, test_user, other_user, make_comment) -> None:
    root = make_comment(test_post, other_user, created_at=at(1))
    reply = make_comment(test_post, test_user, parent=root, created_at=at(2))
    other_root = make_comment(test_post, test_user, created_at=at(3))

    top = list_comments(db_session, CommentFilter(post_id=test_post.id, scope=CommentScope.TOP_LEVEL))
    assert [item.comment.id for item in top.items] == [other_root.id, root.id]
    replies = list_comments(db_session, CommentFilter(scope=CommentScope.REPLIES))
    assert [item.comment.id for item in replies.items] == [reply.id]
    children = list_comments(db_session, CommentFilter(parent_comment_id=root.id))
    assert [item.comment.id for item in children.items] == [reply.id]


def test_comment_top_sort(db_session, test_post, test_user, other_user, third_user, make_comment) -> None:
    older = make_comment(test_post, other_user, created_at=at(1))
    newer = make_comment(test_post, other_user, created_at=at(2))
    set_vote(db_session, third_user.id, older.id, TargetKind.COMMENT, VoteState.UPVOTE)

    page = list_comments(db_session, CommentFilter(post_id=test_post.id), SortMode.TOP)
    assert [item.comment.id for item in page.items] == [older.id, newer.id]
    with pytest.raises(ValidationError):
        list_comments(db_session, CommentFilter(), SortMode.NAME_MATCH)


def test_community_search_name_match(db_session, make_community) -> None:
    exact = make_community("python", created_at=at(1))
    prefix = make_community("pythonistas", created_at=at(5))
    contains = make_community("learnpython", created_at=at(9))
    described = make_community("snakes", created_at=at(20), description="Python and friends")
    make_community("cooking", created_at=at(30))

    page = search_communities(db_session, CommunityFilter(query="Python"))
    assert [c.id for c in page.items] == [exact.id, prefix.id, contains.id, described.id]


def test_community_search_folds_non_ascii_names(db_session, make_community) -> None:
    apples = make_community("Äpfel", created_at=at(1))
    pie = make_community("ÄpfelKuchen", created_at=at(2))
    make_community("Birnen", created_at=at(3))

    page = search_communities(db_session, CommunityFilter(query="äpfel"))
    assert [c.id for c in page.items] == [apples.id, pie.id]
    assert page.info.records == 2


def test_community_default_and_explicit_sorts(db_session, make_community) -> None:
    alpha = make_community("Alpha", created_at=at(3))
    beta = make_community("beta", created_at=at(1))
    gamma = make_community("Gamma", created_at=at(2))

    newest = search_communities(db_session, CommunityFilter())
    assert [c.id for c in newest.items] == [alpha.id, gamma.id, beta.id]

    by_name = search_communities(
        db_session,
        CommunityFilter(sort_by=CommunitySortField.NAME, sort_dir=SortDirection.ASC),
    )
    assert [c.id for c in by_name.items] == [alpha.id, beta.id, gamma.id]


def test_list_content_dispatch(db_session, test_post) -> None:
    assert list_content(db_session, PostFilter()).items[0].post.id == test_post.id
    assert list_content(db_session, CommentFilter()).items == []
    assert list_content(db_session, CommunityFilter(), SortMode.NEWEST).info.records == 1
    with pytest.raises(ValidationError):
        list_content(db_session, CommunityFilter(), SortMode.TOP)
