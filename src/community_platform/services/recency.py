"""Per-user recent community activity for the left sidebar."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from community_platform.core.errors import AuthRequiredError
from community_platform.core.settings import settings
from community_platform.db.session import unit_of_work
from community_platform.db.time import as_utc, utcnow
from community_platform.models import Community, RecentCommunity
from community_platform.services.visibility import get_visible_community

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecentCommunityEntry:
    """One item of a user's recent communities list."""

    community_id: str
    name: str
    member_count: int
    last_activity_at: datetime


def record_activity(
    db: Session,
    user_id: str,
    community: Community,
    now: datetime | None = None,
) -> RecentCommunity:
    """Upsert ``last_activity_at`` for (user, community) inside the caller's transaction.

    Also advances the community's ``last_active_at`` so explicit
    "last active" sorts reflect the same activity.
    """
    now = now or utcnow()
    entry = db.scalars(
        select(RecentCommunity)
        .where(
            RecentCommunity.user_id == user_id,
            RecentCommunity.community_id == community.id,
        )
        .with_for_update()
    ).first()
    if entry is None:
        entry = RecentCommunity(
            user_id=user_id,
            community_id=community.id,
            last_activity_at=now,
            created_at=now,
            updated_at=now,
        )
        db.add(entry)
    else:
        entry.last_activity_at = now
        entry.updated_at = now
    if community.last_active_at is None or as_utc(community.last_active_at) < as_utc(now):
        community.last_active_at = now
    db.flush()
    return entry


def touch(
    db: Session,
    user_id: str | None,
    community_id: str,
    now: datetime | None = None,
) -> RecentCommunity:
    """Record that ``user_id`` was active in ``community_id`` at ``now``."""
    if user_id is None:
        raise AuthRequiredError()
    with unit_of_work(db):
        community = get_visible_community(db, community_id)
        entry = record_activity(db, user_id, community, now)
    logger.debug("Recorded activity of %s in community %s", user_id, community_id)
    return entry


def list_recent(
    db: Session,
    user_id: str | None,
    limit: int | None = None,
) -> list[RecentCommunityEntry]:
    """Return the user's most recently active communities, newest first.

    The list is capped at ``RECENT_COMMUNITIES_LIMIT`` entries; older rows stay
    in storage but are not exposed. Deleted communities are skipped.
    """
    if user_id is None:
        raise AuthRequiredError()
    cap = settings.recent_communities_limit
    if limit is not None:
        # SQLite reads a negative LIMIT as unbounded.
        cap = max(1, min(limit, cap))
    rows = db.execute(
        select(RecentCommunity, Community)
        .join(Community, Community.id == RecentCommunity.community_id)
        .where(
            RecentCommunity.user_id == user_id,
            Community.deleted_at.is_(None),
        )
        .order_by(RecentCommunity.last_activity_at.desc(), RecentCommunity.community_id.desc())
        .limit(cap)
    ).all()
    return [
        RecentCommunityEntry(
            community_id=community.id,
            name=community.name,
            member_count=community.member_count,
            last_activity_at=entry.last_activity_at,
        )
        for entry, community in rows
    ]
