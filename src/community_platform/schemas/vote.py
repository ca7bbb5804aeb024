"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from community_platform.models import TargetKind, VoteState


class VoteRequest(BaseModel):
    """Schema for setting the caller's vote."""

    state: VoteState = Field(..., description="UPVOTE, DOWNVOTE, or NONE to clear")


class VoteResponse(BaseModel):
    """Target score and the caller's resulting vote state."""

    target_id: str
    target_kind: TargetKind
    score: int
    my_vote: VoteState

    model_config = ConfigDict(from_attributes=True)
