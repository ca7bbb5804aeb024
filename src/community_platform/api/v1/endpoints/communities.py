"""Community-related endpoints for the community platform API."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from community_platform.schemas.common import PageResponse, Pagination
from community_platform.schemas.community import CommunityCreate, CommunityResponse, CommunityUpdate
from community_platform.schemas.membership import (
    CommunityMemberResponse,
    MembershipRequest,
    MembershipResponse,
)
from community_platform.schemas.post import PostSummary, to_post_summary
from community_platform.services import content, listing, membership
from community_platform.services.listing import (
    CommunityFilter,
    CommunitySortField,
    PostFilter,
    SortDirection,
)
from community_platform.services.ranking import SortMode

from ..dependencies import PageSpecDep, SessionDep, UserIdDep

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("", response_model=PageResponse[CommunityResponse])
async def search_communities(
    db: SessionDep,
    page_spec: PageSpecDep,
    q: str | None = Query(None, description="Case-insensitive text in name or description"),
    sort_by: CommunitySortField | None = Query(None, description="created_at, last_active_at or name"),
    sort_dir: SortDirection = Query(SortDirection.DESC),
) -> PageResponse[CommunityResponse]:
    """Search communities; name matches rank first when a query is given."""
    result = listing.search_communities(
        db,
        CommunityFilter(query=q, sort_by=sort_by, sort_dir=sort_dir),
        page_spec,
    )
    return PageResponse[CommunityResponse](
        pagination=Pagination.model_validate(result.info),
        data=[CommunityResponse.model_validate(item) for item in result.items],
    )


@router.post("", response_model=CommunityResponse, status_code=status.HTTP_201_CREATED)
async def create_community(
    payload: CommunityCreate,
    db: SessionDep,
    user_id: UserIdDep,
) -> CommunityResponse:
    """Create a community; the creator joins it."""
    community = content.create_community(db, user_id, payload.name, payload.description)
    return CommunityResponse.model_validate(community)


@router.get("/{community_id}", response_model=CommunityResponse)
async def get_community(community_id: str, db: SessionDep, user_id: UserIdDep) -> CommunityResponse:
    """Get a community; signed-in visits count as recent activity."""
    community = content.get_community(db, community_id, user_id)
    return CommunityResponse.model_validate(community)


@router.put("/{community_id}", response_model=CommunityResponse)
async def update_community(
    community_id: str,
    payload: CommunityUpdate,
    db: SessionDep,
    user_id: UserIdDep,
) -> CommunityResponse:
    """Edit a community's description or artwork; owner only."""
    changes = payload.model_dump(exclude_unset=True)
    community = content.update_community(db, user_id, community_id, **changes)
    return CommunityResponse.model_validate(community)


@router.delete("/{community_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_community(community_id: str, db: SessionDep, user_id: UserIdDep) -> None:
    """Soft-delete a community; owner only."""
    content.delete_community(db, user_id, community_id)


@router.get("/{community_id}/posts", response_model=PageResponse[PostSummary])
async def list_community_posts(
    community_id: str,
    db: SessionDep,
    page_spec: PageSpecDep,
    q: str | None = Query(None),
    sort: Annotated[SortMode, Query(description="newest or top")] = SortMode.NEWEST,
) -> PageResponse[PostSummary]:
    """List visible posts of one community."""
    result = listing.list_posts(db, PostFilter(community_id=community_id, query=q), sort, page_spec)
    return PageResponse[PostSummary](
        pagination=Pagination.model_validate(result.info),
        data=[to_post_summary(item) for item in result.items],
    )


@router.put("/{community_id}/membership", response_model=MembershipResponse)
async def set_membership(
    community_id: str,
    payload: MembershipRequest,
    db: SessionDep,
    user_id: UserIdDep,
) -> MembershipResponse:
    """Join or leave a community; repeating the current state is a no-op."""
    outcome = membership.set_membership(db, user_id, community_id, payload.joined)
    return MembershipResponse.model_validate(outcome)


@router.get("/{community_id}/members", response_model=PageResponse[CommunityMemberResponse])
async def list_community_members(
    community_id: str,
    db: SessionDep,
    user_id: UserIdDep,
    page_spec: PageSpecDep,
    include_ended: bool = Query(False, description="Include members who have left"),
) -> PageResponse[CommunityMemberResponse]:
    """The community roster for its owner, or the caller's own row otherwise."""
    result = membership.list_community_members(
        db, user_id, community_id, page_spec, include_ended=include_ended
    )
    return PageResponse[CommunityMemberResponse](
        pagination=Pagination.model_validate(result.info),
        data=[CommunityMemberResponse.model_validate(member) for member in result.items],
    )
