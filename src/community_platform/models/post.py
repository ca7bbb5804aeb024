"""SQLAlchemy models for posts and comments."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from community_platform.db.ids import new_id
from community_platform.db.session import Base
from community_platform.db.time import utcnow


class Post(Base):
    """Top-level content item published inside a community."""

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_community_created", "community_id", "created_at", "id"),
    )

    # Time-ordered id; doubles as the final tie-breaker in every sort.
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    community_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("community.id"),
        nullable=False,
    )
    author_user_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("user_account.id"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    author_display_name: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Comment(Base):
    """Comment on a post, optionally replying to another comment of the same post."""

    __tablename__ = "comment"
    __table_args__ = (
        Index("ix_comment_post_created", "post_id", "created_at", "id"),
        Index("ix_comment_parent", "parent_comment_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("post.id"),
        nullable=False,
    )
    parent_comment_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("comment.id"),
        nullable=True,
    )
    author_user_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("user_account.id"),
        nullable=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
