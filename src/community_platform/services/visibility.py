"""Visibility rules shared by every listing, search and lookup.

A content row is visible when it is not soft-deleted and no ancestor is
soft-deleted or (unless the caller opts out) disabled. The same rules exist in
two forms: SQL clauses used for both count and data queries, and plain
predicates over loaded rows.
"""

from __future__ import annotations

from sqlalchemy import ColumnElement, Select, and_, select
from sqlalchemy.orm import Session

from community_platform.core.errors import NotFoundError
from community_platform.models import Comment, Community, Post


def community_visible_clause(*, include_disabled: bool = False) -> ColumnElement[bool]:
    """SQL predicate for communities eligible for listings."""
    conditions = [Community.deleted_at.is_(None)]
    if not include_disabled:
        conditions.append(Community.disabled_at.is_(None))
    return and_(*conditions)


def post_visible_clause(*, include_disabled: bool = False) -> ColumnElement[bool]:
    """SQL predicate for posts; the query must join ``Community``."""
    return and_(
        Post.deleted_at.is_(None),
        community_visible_clause(include_disabled=include_disabled),
    )


def comment_visible_clause(*, include_disabled: bool = False) -> ColumnElement[bool]:
    """SQL predicate for comments; the query must join ``Post`` and ``Community``."""
    return and_(
        Comment.deleted_at.is_(None),
        post_visible_clause(include_disabled=include_disabled),
    )


def visible_posts(*, include_disabled: bool = False) -> Select[tuple[Post]]:
    """Base statement selecting visible posts."""
    return (
        select(Post)
        .join(Community, Community.id == Post.community_id)
        .where(post_visible_clause(include_disabled=include_disabled))
    )


def visible_comments(*, include_disabled: bool = False) -> Select[tuple[Comment]]:
    """Base statement selecting visible comments."""
    return (
        select(Comment)
        .join(Post, Post.id == Comment.post_id)
        .join(Community, Community.id == Post.community_id)
        .where(comment_visible_clause(include_disabled=include_disabled))
    )


def is_community_visible(community: Community | None, *, include_disabled: bool = False) -> bool:
    """Predicate form of :func:`community_visible_clause`."""
    if community is None or community.deleted_at is not None:
        return False
    return include_disabled or community.disabled_at is None


def is_post_visible(
    post: Post | None,
    community: Community | None,
    *,
    include_disabled: bool = False,
) -> bool:
    """Predicate form of :func:`post_visible_clause`."""
    if post is None or post.deleted_at is not None:
        return False
    return is_community_visible(community, include_disabled=include_disabled)


def is_comment_visible(
    comment: Comment | None,
    post: Post | None,
    community: Community | None,
    *,
    include_disabled: bool = False,
) -> bool:
    """Predicate form of :func:`comment_visible_clause`."""
    if comment is None or comment.deleted_at is not None:
        return False
    return is_post_visible(post, community, include_disabled=include_disabled)


def get_visible_community(
    db: Session,
    community_id: str,
    *,
    include_disabled: bool = True,
    for_update: bool = False,
) -> Community:
    """Load a live community or raise ``NotFoundError``."""
    stmt = select(Community).where(
        Community.id == community_id,
        community_visible_clause(include_disabled=include_disabled),
    )
    if for_update:
        stmt = stmt.with_for_update()
    community = db.scalars(stmt).first()
    if community is None:
        raise NotFoundError("Community not found")
    return community


def get_visible_post(
    db: Session,
    post_id: str,
    *,
    include_disabled: bool = False,
    for_update: bool = False,
) -> Post:
    """Load a visible post or raise ``NotFoundError``."""
    stmt = visible_posts(include_disabled=include_disabled).where(Post.id == post_id)
    if for_update:
        stmt = stmt.with_for_update(of=Post)
    post = db.scalars(stmt).first()
    if post is None:
        raise NotFoundError("Post not found")
    return post


def get_visible_comment(
    db: Session,
    comment_id: str,
    *,
    include_disabled: bool = False,
    for_update: bool = False,
) -> Comment:
    """Load a visible comment or raise ``NotFoundError``."""
    stmt = visible_comments(include_disabled=include_disabled).where(Comment.id == comment_id)
    if for_update:
        stmt = stmt.with_for_update(of=Comment)
    comment = db.scalars(stmt).first()
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment
