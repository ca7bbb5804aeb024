"""Comment-related endpoints for the community platform API."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from community_platform.models import TargetKind
from community_platform.schemas.comment import (
    CommentDetail,
    CommentResponse,
    CommentUpdate,
    to_comment_response,
)
from community_platform.schemas.common import PageResponse, Pagination
from community_platform.schemas.snapshot import CommentSnapshotResponse
from community_platform.schemas.vote import VoteRequest, VoteResponse
from community_platform.services import content, listing, snapshots, votes
from community_platform.services.listing import CommentFilter, CommentScope, ScoredComment
from community_platform.services.pagination import Page
from community_platform.services.ranking import SortMode
from community_platform.services.visibility import get_visible_comment

from ..dependencies import PageSpecDep, SessionDep, UserIdDep

router = APIRouter(prefix="/comments", tags=["comments"])


def _page(result: Page[ScoredComment]) -> PageResponse[CommentResponse]:
    return PageResponse[CommentResponse](
        pagination=Pagination.model_validate(result.info),
        data=[to_comment_response(item) for item in result.items],
    )


@router.get("", response_model=PageResponse[CommentResponse])
async def search_comments(
    db: SessionDep,
    page_spec: PageSpecDep,
    q: str | None = Query(None, description="Case-insensitive text in the comment"),
    post_id: str | None = Query(None),
    scope: CommentScope = Query(CommentScope.ALL, description="all, top_level or replies"),
    sort: Annotated[SortMode, Query(description="newest or top")] = SortMode.NEWEST,
) -> PageResponse[CommentResponse]:
    """Search visible comments."""
    result = listing.list_comments(
        db,
        CommentFilter(post_id=post_id, scope=scope, query=q),
        sort,
        page_spec,
    )
    return _page(result)


@router.get("/{comment_id}", response_model=CommentDetail)
async def get_comment(comment_id: str, db: SessionDep, user_id: UserIdDep) -> CommentDetail:
    """Get a single comment with its score and the caller's vote."""
    comment = get_visible_comment(db, comment_id)
    return CommentDetail.model_validate(comment).model_copy(
        update={
            "score": votes.score_of(db, comment.id, TargetKind.COMMENT),
            "my_vote": votes.my_vote(db, user_id, comment.id, TargetKind.COMMENT),
        }
    )


@router.put("/{comment_id}", response_model=CommentDetail)
async def update_comment(
    comment_id: str,
    payload: CommentUpdate,
    db: SessionDep,
    user_id: UserIdDep,
) -> CommentDetail:
    """Edit a comment; the previous version is kept in its history."""
    comment = content.edit_comment(db, user_id, comment_id, content=payload.content)
    return CommentDetail.model_validate(comment).model_copy(
        update={
            "score": votes.score_of(db, comment.id, TargetKind.COMMENT),
            "my_vote": votes.my_vote(db, user_id, comment.id, TargetKind.COMMENT),
        }
    )


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: str, db: SessionDep, user_id: UserIdDep) -> None:
    """Soft-delete a comment."""
    content.delete_comment(db, user_id, comment_id)


@router.get("/{comment_id}/replies", response_model=PageResponse[CommentResponse])
async def list_replies(
    comment_id: str,
    db: SessionDep,
    page_spec: PageSpecDep,
) -> PageResponse[CommentResponse]:
    """List direct replies to a comment, newest first."""
    result = listing.list_comments(
        db,
        CommentFilter(parent_comment_id=comment_id),
        SortMode.NEWEST,
        page_spec,
    )
    return _page(result)


@router.get("/{comment_id}/history", response_model=PageResponse[CommentSnapshotResponse])
async def list_comment_history(
    comment_id: str,
    db: SessionDep,
    page_spec: PageSpecDep,
) -> PageResponse[CommentSnapshotResponse]:
    """List previous versions of a comment, newest edit first."""
    result = snapshots.list_snapshots(db, TargetKind.COMMENT, comment_id, page_spec)
    return PageResponse[CommentSnapshotResponse](
        pagination=Pagination.model_validate(result.info),
        data=[CommentSnapshotResponse.model_validate(item) for item in result.items],
    )


@router.get("/{comment_id}/history/{snapshot_id}", response_model=CommentSnapshotResponse)
async def get_comment_history_entry(
    comment_id: str,
    snapshot_id: str,
    db: SessionDep,
) -> CommentSnapshotResponse:
    """Get one previous version of a comment."""
    snapshot = snapshots.get_snapshot(db, TargetKind.COMMENT, comment_id, snapshot_id)
    return CommentSnapshotResponse.model_validate(snapshot)


@router.put("/{comment_id}/vote", response_model=VoteResponse)
async def vote_on_comment(
    comment_id: str,
    payload: VoteRequest,
    db: SessionDep,
    user_id: UserIdDep,
) -> VoteResponse:
    """Set the caller's vote on a comment."""
    outcome = votes.set_vote(db, user_id, comment_id, TargetKind.COMMENT, payload.state)
    return VoteResponse.model_validate(outcome)


@router.delete("/{comment_id}/vote", response_model=VoteResponse)
async def clear_comment_vote(comment_id: str, db: SessionDep, user_id: UserIdDep) -> VoteResponse:
    """Remove the caller's vote on a comment."""
    outcome = votes.clear_vote(db, user_id, comment_id, TargetKind.COMMENT)
    return VoteResponse.model_validate(outcome)
