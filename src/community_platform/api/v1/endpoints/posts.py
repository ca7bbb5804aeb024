"""Post-related endpoints for the community platform API."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query, status
from sqlalchemy.orm import Session

from community_platform.models import Post, TargetKind
from community_platform.schemas.comment import (
    CommentCreate,
    CommentDetail,
    CommentResponse,
    to_comment_response,
)
from community_platform.schemas.common import CursorPageResponse, PageResponse, Pagination
from community_platform.schemas.post import (
    PostCreate,
    PostDetail,
    PostSummary,
    PostUpdate,
    to_post_detail,
    to_post_summary,
)
from community_platform.schemas.snapshot import PostSnapshotResponse
from community_platform.schemas.vote import VoteRequest, VoteResponse
from community_platform.services import content, listing, snapshots, votes
from community_platform.services.listing import CommentFilter, CommentScope, PostFilter
from community_platform.services.ranking import SortMode
from community_platform.services.visibility import get_visible_post

from ..dependencies import PageSpecDep, SessionDep, UserIdDep

router = APIRouter(prefix="/posts", tags=["posts"])


def _post_detail(db: Session, post: Post, user_id: str | None) -> PostDetail:
    return to_post_detail(
        post,
        score=votes.score_of(db, post.id, TargetKind.POST),
        comment_count=listing.comment_counts(db, [post.id])[post.id],
        my_vote=votes.my_vote(db, user_id, post.id, TargetKind.POST),
    )


@router.get("", response_model=PageResponse[PostSummary])
async def list_posts(
    db: SessionDep,
    page_spec: PageSpecDep,
    community_id: str | None = Query(None, description="Restrict to one community"),
    q: str | None = Query(None, description="Case-insensitive text in title or body"),
    sort: Annotated[SortMode, Query(description="newest or top")] = SortMode.NEWEST,
    created_from: datetime | None = Query(None),
    created_to: datetime | None = Query(None),
) -> PageResponse[PostSummary]:
    """List visible posts with offset pagination."""
    result = listing.list_posts(
        db,
        PostFilter(
            community_id=community_id,
            query=q,
            created_from=created_from,
            created_to=created_to,
        ),
        sort,
        page_spec,
    )
    return PageResponse[PostSummary](
        pagination=Pagination.model_validate(result.info),
        data=[to_post_summary(item) for item in result.items],
    )


@router.get("/feed", response_model=CursorPageResponse[PostSummary])
async def post_feed(
    db: SessionDep,
    cursor: str | None = Query(None, description="Token from the previous page"),
    limit: int | None = Query(None),
    community_id: str | None = Query(None),
    q: str | None = Query(None),
) -> CursorPageResponse[PostSummary]:
    """Newest posts with cursor pagination."""
    result = listing.list_posts_after(
        db,
        PostFilter(community_id=community_id, query=q),
        cursor,
        limit,
    )
    return CursorPageResponse[PostSummary](
        data=[to_post_summary(item) for item in result.items],
        next_cursor=result.next_cursor,
    )


@router.get("/latest", response_model=list[PostSummary])
async def latest_posts(db: SessionDep) -> list[PostSummary]:
    """The newest posts across all communities."""
    return [to_post_summary(item) for item in listing.global_latest_posts(db)]


@router.post("", response_model=PostDetail, status_code=status.HTTP_201_CREATED)
async def create_post(payload: PostCreate, db: SessionDep, user_id: UserIdDep) -> PostDetail:
    """Publish a post in a community."""
    post = content.create_post(
        db,
        user_id,
        payload.community_id,
        title=payload.title,
        body=payload.body,
        author_display_name=payload.author_display_name,
    )
    return _post_detail(db, post, user_id)


@router.get("/{post_id}", response_model=PostDetail)
async def get_post(post_id: str, db: SessionDep, user_id: UserIdDep) -> PostDetail:
    """Get a single post with its score and the caller's vote."""
    return _post_detail(db, get_visible_post(db, post_id), user_id)


@router.put("/{post_id}", response_model=PostDetail)
async def update_post(
    post_id: str,
    payload: PostUpdate,
    db: SessionDep,
    user_id: UserIdDep,
) -> PostDetail:
    """Edit a post; the previous version is kept in its history."""
    changes = payload.model_dump(exclude_unset=True)
    post = content.edit_post(db, user_id, post_id, **changes)
    return _post_detail(db, post, user_id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: str, db: SessionDep, user_id: UserIdDep) -> None:
    """Soft-delete a post."""
    content.delete_post(db, user_id, post_id)


@router.get("/{post_id}/history", response_model=PageResponse[PostSnapshotResponse])
async def list_post_history(
    post_id: str,
    db: SessionDep,
    page_spec: PageSpecDep,
) -> PageResponse[PostSnapshotResponse]:
    """List previous versions of a post, newest edit first."""
    result = snapshots.list_snapshots(db, TargetKind.POST, post_id, page_spec)
    return PageResponse[PostSnapshotResponse](
        pagination=Pagination.model_validate(result.info),
        data=[PostSnapshotResponse.model_validate(item) for item in result.items],
    )


@router.get("/{post_id}/history/{snapshot_id}", response_model=PostSnapshotResponse)
async def get_post_history_entry(post_id: str, snapshot_id: str, db: SessionDep) -> PostSnapshotResponse:
    """Get one previous version of a post."""
    snapshot = snapshots.get_snapshot(db, TargetKind.POST, post_id, snapshot_id)
    return PostSnapshotResponse.model_validate(snapshot)


@router.put("/{post_id}/vote", response_model=VoteResponse)
async def vote_on_post(
    post_id: str,
    payload: VoteRequest,
    db: SessionDep,
    user_id: UserIdDep,
) -> VoteResponse:
    """Set the caller's vote on a post."""
    outcome = votes.set_vote(db, user_id, post_id, TargetKind.POST, payload.state)
    return VoteResponse.model_validate(outcome)


@router.delete("/{post_id}/vote", response_model=VoteResponse)
async def clear_post_vote(post_id: str, db: SessionDep, user_id: UserIdDep) -> VoteResponse:
    """Remove the caller's vote on a post."""
    outcome = votes.clear_vote(db, user_id, post_id, TargetKind.POST)
    return VoteResponse.model_validate(outcome)


@router.get("/{post_id}/comments", response_model=PageResponse[CommentResponse])
async def list_post_comments(
    post_id: str,
    db: SessionDep,
    page_spec: PageSpecDep,
    sort: Annotated[SortMode, Query(description="newest or top")] = SortMode.NEWEST,
    scope: CommentScope = Query(CommentScope.ALL),
) -> PageResponse[CommentResponse]:
    """List visible comments of a post."""
    result = listing.list_comments(db, CommentFilter(post_id=post_id, scope=scope), sort, page_spec)
    return PageResponse[CommentResponse](
        pagination=Pagination.model_validate(result.info),
        data=[to_comment_response(item) for item in result.items],
    )


@router.post(
    "/{post_id}/comments",
    response_model=CommentDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: str,
    payload: CommentCreate,
    db: SessionDep,
    user_id: UserIdDep,
) -> CommentDetail:
    """Comment on a post or reply to one of its comments."""
    comment = content.create_comment(
        db,
        user_id,
        post_id,
        content=payload.content,
        parent_comment_id=payload.parent_comment_id,
    )
    return CommentDetail.model_validate(comment)
