"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentDetail, CommentResponse, CommentUpdate
from .common import CursorPageResponse, ErrorResponse, PageResponse, Pagination
from .community import CommunityCreate, CommunityResponse, CommunityUpdate
from .membership import (
    CommunityMemberResponse,
    MembershipListItem,
    MembershipRequest,
    MembershipResponse,
    RecentCommunityResponse,
)
from .post import PostCreate, PostDetail, PostSummary, PostUpdate
from .snapshot import CommentSnapshotResponse, PostSnapshotResponse
from .vote import VoteRequest, VoteResponse

__all__ = [
    "CommentCreate", "CommentDetail", "CommentResponse", "CommentUpdate",
    "CursorPageResponse", "ErrorResponse", "PageResponse", "Pagination",
    "CommunityCreate", "CommunityResponse", "CommunityUpdate",
    "CommunityMemberResponse", "MembershipListItem", "MembershipRequest", "MembershipResponse", "RecentCommunityResponse",
    "PostCreate", "PostDetail", "PostSummary", "PostUpdate",
    "CommentSnapshotResponse", "PostSnapshotResponse",
    "VoteRequest", "VoteResponse",
]
