"""Models capturing voting interactions on posts and comments."""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from community_platform.db.ids import new_id
from community_platform.db.session import Base
from community_platform.db.time import utcnow


class VoteState(str, Enum):
    """Per-voter state on a single target."""

    NONE = "NONE"
    UPVOTE = "UPVOTE"
    DOWNVOTE = "DOWNVOTE"


class TargetKind(str, Enum):
    """Kinds of content that can receive votes."""

    POST = "post"
    COMMENT = "comment"


class Vote(Base):
    """Per-user vote on a post or comment.

    A row in state NONE is equivalent to no row at all; clearing a vote keeps
    the row so its id stays stable across toggles.
    """

    __tablename__ = "vote"
    __table_args__ = (
        CheckConstraint("state IN ('NONE', 'UPVOTE', 'DOWNVOTE')", name="ck_vote_state"),
        CheckConstraint("target_kind IN ('post', 'comment')", name="ck_vote_target_kind"),
        # At most one vote per (voter, target).
        UniqueConstraint("voter_user_id", "target_kind", "target_id", name="uq_vote_voter_target"),
        Index("ix_vote_target", "target_kind", "target_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    voter_user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    target_kind: Mapped[str] = mapped_column(String(8), nullable=False)
    target_id: Mapped[str] = mapped_column(String(32), nullable=False)
    state: Mapped[str] = mapped_column(String(8), nullable=False, default=VoteState.NONE.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
