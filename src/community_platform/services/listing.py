"""Listing and search over posts, comments and communities.

Every listing follows the same pipeline: visibility filter, optional text
filter, ranking, pagination. The Newest order is pushed down to SQL; Top and
Name-Match need live scores or match tiers, so the filtered candidates are
loaded and ranked in Python before slicing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Union

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.orm import Session

from community_platform.core.errors import ValidationError
from community_platform.core.settings import settings
from community_platform.db.time import as_utc
from community_platform.models import Comment, Community, Post, TargetKind
from community_platform.services.pagination import (
    CursorPage,
    Page,
    PageSpec,
    after_cursor_clause,
    clamp_limit,
    cursor_page,
    decode_cursor,
    page_info,
    paginate,
)
from community_platform.services.ranking import (
    RankKey,
    SortMode,
    matches_text,
    name_match_tier,
    normalize_query,
    rank,
    rank_by_field,
)
from community_platform.services.visibility import (
    community_visible_clause,
    get_visible_comment,
    get_visible_community,
    get_visible_post,
    visible_comments,
    visible_posts,
)
from community_platform.services.votes import scores_for

logger = logging.getLogger(__name__)


class CommentScope(str, Enum):
    """Restrict comment listings by nesting level."""

    ALL = "all"
    TOP_LEVEL = "top_level"
    REPLIES = "replies"


class CommunitySortField(str, Enum):
    """Explicit community sort keys."""

    CREATED_AT = "created_at"
    LAST_ACTIVE_AT = "last_active_at"
    NAME = "name"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class PostFilter:
    community_id: str | None = None
    query: str | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    include_disabled: bool = False


@dataclass(frozen=True)
class CommentFilter:
    post_id: str | None = None
    parent_comment_id: str | None = None
    scope: CommentScope = CommentScope.ALL
    query: str | None = None
    include_disabled: bool = False


@dataclass(frozen=True)
class CommunityFilter:
    query: str | None = None
    include_disabled: bool = False
    sort_by: CommunitySortField | None = None
    sort_dir: SortDirection = SortDirection.DESC


@dataclass(frozen=True)
class ScoredPost:
    """A post together with its live score and visible comment count."""

    post: Post
    score: int
    comment_count: int


@dataclass(frozen=True)
class ScoredComment:
    """A comment together with its live score."""

    comment: Comment
    score: int


def _text_filter(query: str, *columns: Any) -> ColumnElement[bool]:
    needle = query.lower()
    return or_(*(func.lower(column).contains(needle, autoescape=True) for column in columns))


def _count(db: Session, stmt: Select[Any]) -> int:
    return db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0


def comment_counts(db: Session, post_ids: Sequence[str]) -> dict[str, int]:
    """Number of live comments per post."""
    if not post_ids:
        return {}
    counts = {post_id: 0 for post_id in post_ids}
    rows = db.execute(
        select(Comment.post_id, func.count())
        .where(Comment.post_id.in_(list(post_ids)), Comment.deleted_at.is_(None))
        .group_by(Comment.post_id)
    )
    for post_id, count in rows:
        counts[post_id] = int(count)
    return counts


def _decorate_posts(db: Session, posts: Sequence[Post], scores: dict[str, int] | None = None) -> list[ScoredPost]:
    ids = [post.id for post in posts]
    if scores is None:
        scores = scores_for(db, ids, TargetKind.POST)
    counts = comment_counts(db, ids)
    return [
        ScoredPost(post=post, score=scores.get(post.id, 0), comment_count=counts.get(post.id, 0))
        for post in posts
    ]


def _post_statement(db: Session, filt: PostFilter) -> Select[tuple[Post]]:
    query = normalize_query(filt.query)
    if filt.community_id is not None:
        get_visible_community(db, filt.community_id, include_disabled=filt.include_disabled)

    stmt = visible_posts(include_disabled=filt.include_disabled)
    if filt.community_id is not None:
        stmt = stmt.where(Post.community_id == filt.community_id)
    if query is not None:
        stmt = stmt.where(_text_filter(query, Post.title, Post.body))
    if filt.created_from is not None:
        stmt = stmt.where(Post.created_at >= as_utc(filt.created_from))
    if filt.created_to is not None:
        stmt = stmt.where(Post.created_at <= as_utc(filt.created_to))
    return stmt


def _check_sort(sort: SortMode, allowed: tuple[SortMode, ...]) -> None:
    if sort not in allowed:
        raise ValidationError(f"Unsupported sort '{sort.value}' for this listing.")


def list_posts(
    db: Session,
    filt: PostFilter,
    sort: SortMode | str = SortMode.NEWEST,
    spec: PageSpec | None = None,
) -> Page[ScoredPost]:
    """Offset-paginate visible posts in Newest or Top order.

    Raises:
        ValidationError: On a too-short query or an unsupported sort.
        NotFoundError: If ``community_id`` names a missing community.
    """
    mode = SortMode(sort)
    _check_sort(mode, (SortMode.NEWEST, SortMode.TOP))
    spec = spec or PageSpec.build()
    stmt = _post_statement(db, filt)

    if mode is SortMode.NEWEST:
        records = _count(db, stmt)
        posts = db.scalars(
            stmt.order_by(Post.created_at.desc(), Post.id.desc())
            .offset(spec.offset)
            .limit(spec.limit)
        ).all()
        return Page(items=_decorate_posts(db, posts), info=page_info(spec, records))

    candidates = db.scalars(stmt).all()
    scores = scores_for(db, [post.id for post in candidates], TargetKind.POST)
    logger.debug("Ranking %d candidate posts by score", len(candidates))
    ranked = rank(
        candidates,
        SortMode.TOP,
        lambda post: RankKey(id=post.id, created_at=post.created_at, score=scores[post.id]),
    )
    window = paginate(ranked, spec)
    return Page(items=_decorate_posts(db, window.items, scores), info=window.info)


def list_posts_after(
    db: Session,
    filt: PostFilter,
    cursor: str | None = None,
    limit: int | None = None,
) -> CursorPage[ScoredPost]:
    """Cursor-paginate visible posts in Newest order."""
    size = clamp_limit(limit)
    stmt = _post_statement(db, filt)
    position = decode_cursor(cursor)
    if position is not None:
        stmt = stmt.where(after_cursor_clause(Post.created_at, Post.id, position))
    fetched = db.scalars(
        stmt.order_by(Post.created_at.desc(), Post.id.desc()).limit(size + 1)
    ).all()
    page = cursor_page(fetched, size, lambda post: (post.created_at, post.id))
    return CursorPage(items=_decorate_posts(db, page.items), next_cursor=page.next_cursor)


def global_latest_posts(db: Session) -> list[ScoredPost]:
    """The newest visible posts across every community."""
    posts = db.scalars(
        visible_posts()
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(settings.global_latest_limit)
    ).all()
    return _decorate_posts(db, posts)


def _comment_statement(db: Session, filt: CommentFilter) -> Select[tuple[Comment]]:
    query = normalize_query(filt.query)
    if filt.post_id is not None:
        get_visible_post(db, filt.post_id, include_disabled=filt.include_disabled)
    if filt.parent_comment_id is not None:
        get_visible_comment(db, filt.parent_comment_id, include_disabled=filt.include_disabled)

    stmt = visible_comments(include_disabled=filt.include_disabled)
    if filt.post_id is not None:
        stmt = stmt.where(Comment.post_id == filt.post_id)
    if filt.parent_comment_id is not None:
        stmt = stmt.where(Comment.parent_comment_id == filt.parent_comment_id)
    if filt.scope is CommentScope.TOP_LEVEL:
        stmt = stmt.where(Comment.parent_comment_id.is_(None))
    elif filt.scope is CommentScope.REPLIES:
        stmt = stmt.where(Comment.parent_comment_id.is_not(None))
    if query is not None:
        stmt = stmt.where(_text_filter(query, Comment.content))
    return stmt


def list_comments(
    db: Session,
    filt: CommentFilter,
    sort: SortMode | str = SortMode.NEWEST,
    spec: PageSpec | None = None,
) -> Page[ScoredComment]:
    """Offset-paginate visible comments in Newest or Top order."""
    mode = SortMode(sort)
    _check_sort(mode, (SortMode.NEWEST, SortMode.TOP))
    spec = spec or PageSpec.build()
    stmt = _comment_statement(db, filt)

    if mode is SortMode.NEWEST:
        records = _count(db, stmt)
        comments = db.scalars(
            stmt.order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset(spec.offset)
            .limit(spec.limit)
        ).all()
        scores = scores_for(db, [comment.id for comment in comments], TargetKind.COMMENT)
        return Page(
            items=[ScoredComment(comment=c, score=scores.get(c.id, 0)) for c in comments],
            info=page_info(spec, records),
        )

    candidates = db.scalars(stmt).all()
    scores = scores_for(db, [comment.id for comment in candidates], TargetKind.COMMENT)
    ranked = rank(
        candidates,
        SortMode.TOP,
        lambda comment: RankKey(id=comment.id, created_at=comment.created_at, score=scores[comment.id]),
    )
    window = paginate(ranked, spec)
    return Page(
        items=[ScoredComment(comment=c, score=scores[c.id]) for c in window.items],
        info=window.info,
    )


_COMMUNITY_FIELDS = {
    CommunitySortField.CREATED_AT: lambda community: community.created_at,
    CommunitySortField.LAST_ACTIVE_AT: lambda community: community.last_active_at,
    CommunitySortField.NAME: lambda community: community.name,
}


def search_communities(
    db: Session,
    filt: CommunityFilter,
    spec: PageSpec | None = None,
) -> Page[Community]:
    """Search communities by name or description.

    With an explicit ``sort_by`` the results follow that field; otherwise a
    query ranks by Name-Match and no query falls back to Newest. Text matching
    uses ``str.casefold`` like the Name-Match tiers, since SQLite's ``lower()``
    only folds ASCII.
    """
    spec = spec or PageSpec.build()
    query = normalize_query(filt.query)
    stmt = select(Community).where(community_visible_clause(include_disabled=filt.include_disabled))

    if query is None and filt.sort_by is None:
        records = _count(db, stmt)
        communities = db.scalars(
            stmt.order_by(Community.created_at.desc(), Community.id.desc())
            .offset(spec.offset)
            .limit(spec.limit)
        ).all()
        return Page(items=list(communities), info=page_info(spec, records))

    candidates = [
        community
        for community in db.scalars(stmt).all()
        if matches_text(query, community.name, community.description)
    ]
    if filt.sort_by is not None:
        ranked = rank_by_field(
            candidates,
            _COMMUNITY_FIELDS[CommunitySortField(filt.sort_by)],
            lambda community: community.id,
            descending=SortDirection(filt.sort_dir) is SortDirection.DESC,
        )
        return paginate(ranked, spec)

    ranked = rank(
        candidates,
        SortMode.NAME_MATCH,
        lambda community: RankKey(
            id=community.id,
            created_at=community.created_at,
            tier=name_match_tier(community.name, query),
        ),
    )
    return paginate(ranked, spec)


ContentFilter = Union[PostFilter, CommentFilter, CommunityFilter]


def list_content(
    db: Session,
    filt: ContentFilter,
    sort: SortMode | str | None = None,
    spec: PageSpec | None = None,
) -> Page[Any]:
    """Dispatch a listing request on the type of ``filt``.

    Community searches accept only Newest or Name-Match here; their order is
    chosen from the filter itself.
    """
    if isinstance(filt, PostFilter):
        return list_posts(db, filt, sort or SortMode.NEWEST, spec)
    if isinstance(filt, CommentFilter):
        return list_comments(db, filt, sort or SortMode.NEWEST, spec)
    if sort is not None:
        _check_sort(SortMode(sort), (SortMode.NEWEST, SortMode.NAME_MATCH))
    return search_communities(db, filt, spec)
