"""Endpoints scoped to the authenticated caller."""

from fastapi import APIRouter

from community_platform.schemas.common import PageResponse, Pagination
from community_platform.schemas.community import CommunityResponse
from community_platform.schemas.membership import MembershipListItem, RecentCommunityResponse
from community_platform.services import membership, recency

from ..dependencies import PageSpecDep, SessionDep, UserIdDep

router = APIRouter(prefix="/me", tags=["me"])


@router.get("/recent-communities", response_model=list[RecentCommunityResponse])
async def recent_communities(db: SessionDep, user_id: UserIdDep) -> list[RecentCommunityResponse]:
    """The caller's most recently active communities."""
    return [
        RecentCommunityResponse.model_validate(entry)
        for entry in recency.list_recent(db, user_id)
    ]


@router.get("/memberships", response_model=PageResponse[MembershipListItem])
async def my_memberships(
    db: SessionDep,
    user_id: UserIdDep,
    page_spec: PageSpecDep,
) -> PageResponse[MembershipListItem]:
    """Communities the caller currently belongs to."""
    result = membership.list_memberships(db, user_id, page_spec)
    return PageResponse[MembershipListItem](
        pagination=Pagination.model_validate(result.info),
        data=[
            MembershipListItem(
                community=CommunityResponse.model_validate(community),
                joined_at=member.joined_at,
            )
            for member, community in result.items
        ],
    )
