"""Membership and recent-community schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from community_platform.schemas.community import CommunityResponse


class MembershipRequest(BaseModel):
    """Desired membership state."""

    joined: bool = Field(..., description="true to join, false to leave")


class MembershipResponse(BaseModel):
    """Membership state after a toggle."""

    community_id: str
    joined: bool
    member_count: int
    joined_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class MembershipListItem(BaseModel):
    """A community the caller belongs to."""

    community: CommunityResponse
    joined_at: datetime


class RecentCommunityResponse(BaseModel):
    """Entry of the recent communities sidebar."""

    community_id: str
    name: str
    member_count: int
    last_activity_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommunityMemberResponse(BaseModel):
    """One membership row of a community roster."""

    id: str
    community_id: str
    user_id: str
    joined: bool
    joined_at: datetime
    ended_at: datetime | None

    model_config = ConfigDict(from_attributes=True)
