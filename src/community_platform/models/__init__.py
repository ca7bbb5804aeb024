"""SQLAlchemy models for the community platform."""

from .community import Community, CommunityMember, RecentCommunity
from .post import Comment, Post
from .snapshot import CommentSnapshot, PostSnapshot
from .user import User
from .vote import TargetKind, Vote, VoteState

__all__ = [
    "Community", "CommunityMember", "RecentCommunity",
    "Comment", "Post",
    "CommentSnapshot", "PostSnapshot",
    "User",
    "TargetKind", "Vote", "VoteState",
]
