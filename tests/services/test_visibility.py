"""Tests for visibility rules."""

from datetime import UTC, datetime

import pytest

from community_platform.core.errors import NotFoundError
from community_platform.services import content
from community_platform.services.listing import CommentFilter, PostFilter, list_comments, list_posts
from community_platform.services.visibility import (
    get_visible_comment,
    get_visible_community,
    get_visible_post,
    is_comment_visible,
    is_post_visible,
)


def test_deleted_comment_is_excluded(db_session, test_post, other_user, make_comment) -> None:
    kept = make_comment(test_post, other_user, content="still here")
    gone = make_comment(test_post, other_user, content="going away")
    content.delete_comment(db_session, other_user.id, gone.id)

    page = list_comments(db_session, CommentFilter(post_id=test_post.id))
    assert [item.comment.id for item in page.items] == [kept.id]
    assert page.info.records == 1
    with pytest.raises(NotFoundError):
        get_visible_comment(db_session, gone.id)


def test_comments_under_deleted_post_are_hidden(
    db_session, test_post, test_user, test_comment
) -> None:
    content.delete_post(db_session, test_user.id, test_post.id)

    page = list_comments(db_session, CommentFilter())
    assert page.items == []
    with pytest.raises(NotFoundError):
        get_visible_comment(db_session, test_comment.id)
    with pytest.raises(NotFoundError):
        list_comments(db_session, CommentFilter(post_id=test_post.id))


def test_disabled_community_hides_posts_unless_opted_in(
    db_session, community, test_post
) -> None:
    community.disabled_at = datetime(2026, 2, 1, tzinfo=UTC)
    db_session.commit()

    assert list_posts(db_session, PostFilter()).items == []
    included = list_posts(db_session, PostFilter(include_disabled=True))
    assert [item.post.id for item in included.items] == [test_post.id]
    with pytest.raises(NotFoundError):
        get_visible_post(db_session, test_post.id)
    assert get_visible_post(db_session, test_post.id, include_disabled=True).id == test_post.id
    # Community lookups still resolve disabled communities
    assert get_visible_community(db_session, community.id).id == community.id


def test_deleted_community_is_not_found(db_session, community) -> None:
    community.deleted_at = datetime(2026, 2, 1, tzinfo=UTC)
    db_session.commit()
    with pytest.raises(NotFoundError):
        get_visible_community(db_session, community.id)


def test_predicates_match_clauses(community, test_post, test_comment) -> None:
    assert is_post_visible(test_post, community)
    assert is_comment_visible(test_comment, test_post, community)
    assert not is_comment_visible(test_comment, None, community)
    community.disabled_at = datetime(2026, 2, 1, tzinfo=UTC)
    assert not is_post_visible(test_post, community)
    assert is_post_visible(test_post, community, include_disabled=True)
