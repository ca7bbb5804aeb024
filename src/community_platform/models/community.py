"""SQLAlchemy models for communities, memberships and recent activity."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from community_platform.db.ids import new_id
from community_platform.db.session import Base
from community_platform.db.time import utcnow


class Community(Base):
    """Community metadata used for grouping posts and members."""

    __tablename__ = "community"
    __table_args__ = (
        CheckConstraint("member_count >= 0", name="ck_community_member_count"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(30), nullable=False)
    # Lower-cased name; uniqueness is case-insensitive.
    name_key: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo_uri: Mapped[str | None] = mapped_column(String(255), nullable=True)
    banner_uri: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_user_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("user_account.id"),
        nullable=True,
    )
    # Denormalized; reconciled against live memberships on every toggle.
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    last_active_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Administratively disabled communities drop out of listings by default.
    disabled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class CommunityMember(Base):
    """Membership of a user in a community; leaving deactivates the row."""

    __tablename__ = "community_member"
    __table_args__ = (
        UniqueConstraint("user_id", "community_id", name="uq_community_member_user_community"),
        Index("ix_community_member_community_joined", "community_id", "joined"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    community_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("community.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    joined: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Set on every effective join, including rejoins.
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class RecentCommunity(Base):
    """Last time a user was active in a community."""

    __tablename__ = "recent_community"
    __table_args__ = (
        UniqueConstraint("user_id", "community_id", name="uq_recent_community_user_community"),
        Index("ix_recent_community_user_activity", "user_id", "last_activity_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    community_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("community.id", ondelete="CASCADE"),
        nullable=False,
    )
    last_activity_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
