"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from community_platform.models import VoteState
from community_platform.services.listing import ScoredComment


class CommentCreate(BaseModel):
    """Schema for creating a comment or a reply."""

    content: str = Field(..., description="2 to 2,000 characters")
    parent_comment_id: str | None = Field(None, description="Comment being replied to")


class CommentUpdate(BaseModel):
    """Schema for editing a comment."""

    content: str


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: str
    post_id: str
    parent_comment_id: str | None
    author_user_id: str | None
    content: str
    created_at: datetime
    updated_at: datetime
    score: int = 0

    model_config = ConfigDict(from_attributes=True)


class CommentDetail(CommentResponse):
    my_vote: VoteState = VoteState.NONE


def to_comment_response(item: ScoredComment) -> CommentResponse:
    """Serialize a ranked comment."""
    return CommentResponse.model_validate(item.comment).model_copy(update={"score": item.score})
