"""Append-only edit history for posts and comments."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from community_platform.db.ids import new_id
from community_platform.db.session import Base
from community_platform.db.time import utcnow


class PostSnapshot(Base):
    """State of a post immediately before one of its edits."""

    __tablename__ = "post_snapshot"
    __table_args__ = (
        Index("ix_post_snapshot_post_created", "post_id", "created_at", "id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    editor_user_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("user_account.id"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    author_display_name: Mapped[str | None] = mapped_column(String(32), nullable=True)
    # Time the edit that produced this snapshot was applied.
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class CommentSnapshot(Base):
    """State of a comment immediately before one of its edits."""

    __tablename__ = "comment_snapshot"
    __table_args__ = (
        Index("ix_comment_snapshot_comment_created", "comment_id", "created_at", "id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    comment_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=False,
    )
    editor_user_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("user_account.id"),
        nullable=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
