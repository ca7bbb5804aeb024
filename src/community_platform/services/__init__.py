"""Engine services: visibility, votes, ranking, pagination, history, membership."""

from .content import (
    create_comment,
    create_community,
    create_post,
    delete_comment,
    delete_community,
    delete_post,
    edit_comment,
    edit_post,
    get_community,
    update_community,
)
from .listing import (
    CommentFilter,
    CommentScope,
    CommunityFilter,
    CommunitySortField,
    PostFilter,
    ScoredComment,
    ScoredPost,
    SortDirection,
    global_latest_posts,
    list_comments,
    list_content,
    list_posts,
    list_posts_after,
    search_communities,
)
from .membership import MembershipOutcome, list_community_members, list_memberships, set_membership
from .pagination import CursorPage, Page, PageInfo, PageSpec
from .ranking import SortMode
from .recency import RecentCommunityEntry, list_recent, touch
from .snapshots import get_snapshot, list_snapshots, record_snapshot
from .votes import VoteOutcome, clear_vote, my_vote, score_of, scores_for, set_vote

__all__ = [
    "CommentFilter",
    "CommentScope",
    "CommunityFilter",
    "CommunitySortField",
    "CursorPage",
    "MembershipOutcome",
    "Page",
    "PageInfo",
    "PageSpec",
    "PostFilter",
    "RecentCommunityEntry",
    "ScoredComment",
    "ScoredPost",
    "SortDirection",
    "SortMode",
    "VoteOutcome",
    "clear_vote",
    "create_comment",
    "create_community",
    "create_post",
    "delete_comment",
    "delete_community",
    "delete_post",
    "edit_comment",
    "edit_post",
    "get_community",
    "get_snapshot",
    "global_latest_posts",
    "list_comments",
    "list_community_members",
    "list_content",
    "list_memberships",
    "list_posts",
    "list_posts_after",
    "list_recent",
    "list_snapshots",
    "my_vote",
    "record_snapshot",
    "score_of",
    "scores_for",
    "search_communities",
    "set_membership",
    "set_vote",
    "touch",
    "update_community",
]
