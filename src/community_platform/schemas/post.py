"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from community_platform.models import Post, VoteState
from community_platform.services.listing import ScoredPost


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    community_id: str = Field(..., description="Community the post is published in")
    title: str = Field(..., description="5 to 120 characters")
    body: str = Field(..., description="Plain text, 10 to 10,000 characters")
    author_display_name: str | None = Field(None, description="Optional byline, up to 32 characters")


class PostUpdate(BaseModel):
    """Schema for editing a post; omitted fields keep their value."""

    title: str | None = None
    body: str | None = None
    author_display_name: str | None = None


class PostSummary(BaseModel):
    """Schema for post information returned in listings."""

    id: str
    community_id: str
    author_user_id: str | None
    title: str
    body: str
    author_display_name: str | None
    created_at: datetime
    updated_at: datetime
    score: int = 0
    comment_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class PostDetail(PostSummary):
    """Single post with the caller's own vote."""

    my_vote: VoteState = VoteState.NONE


def to_post_summary(item: ScoredPost) -> PostSummary:
    """Serialize a ranked post."""
    return PostSummary.model_validate(item.post).model_copy(
        update={"score": item.score, "comment_count": item.comment_count}
    )


def to_post_detail(post: Post, score: int, comment_count: int, my_vote: VoteState) -> PostDetail:
    return PostDetail.model_validate(post).model_copy(
        update={"score": score, "comment_count": comment_count, "my_vote": my_vote}
    )
