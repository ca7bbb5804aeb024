"""Idempotent community membership toggles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from community_platform.core.errors import AuthRequiredError
from community_platform.db.session import unit_of_work
from community_platform.db.time import utcnow
from community_platform.models import Community, CommunityMember
from community_platform.services.pagination import Page, PageSpec, page_info
from community_platform.services.recency import record_activity
from community_platform.services.visibility import get_visible_community

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MembershipOutcome:
    """Membership state after a toggle."""

    community_id: str
    joined: bool
    member_count: int
    joined_at: datetime | None


def _live_member_count(db: Session, community_id: str) -> int:
    return db.scalar(
        select(func.count())
        .select_from(CommunityMember)
        .where(
            CommunityMember.community_id == community_id,
            CommunityMember.joined.is_(True),
        )
    ) or 0


def set_membership(
    db: Session,
    user_id: str | None,
    community_id: str,
    joined: bool,
    now: datetime | None = None,
) -> MembershipOutcome:
    """Join or leave a community.

    Requesting the state the user is already in changes nothing. An effective
    join records recent activity for the user. ``member_count`` is recomputed
    from the live membership rows in the same transaction, so a drifted
    counter is repaired on the next toggle.

    Raises:
        AuthRequiredError: If the caller is anonymous.
        NotFoundError: If the community is missing or deleted.
    """
    if user_id is None:
        raise AuthRequiredError()
    now = now or utcnow()

    with unit_of_work(db):
        community = get_visible_community(db, community_id, for_update=True)
        membership = db.scalars(
            select(CommunityMember)
            .where(
                CommunityMember.user_id == user_id,
                CommunityMember.community_id == community_id,
            )
            .with_for_update()
        ).first()

        changed = False
        if joined:
            if membership is None:
                membership = CommunityMember(
                    user_id=user_id,
                    community_id=community_id,
                    joined=True,
                    joined_at=now,
                    created_at=now,
                    updated_at=now,
                )
                db.add(membership)
                changed = True
            elif not membership.joined:
                membership.joined = True
                membership.joined_at = now
                membership.ended_at = None
                membership.updated_at = now
                changed = True
        elif membership is not None and membership.joined:
            membership.joined = False
            membership.ended_at = now
            membership.updated_at = now
            changed = True
        db.flush()

        live = _live_member_count(db, community_id)
        if community.member_count != live:
            if not changed:
                logger.warning(
                    "member_count drift on community %s: stored %d, live %d",
                    community_id, community.member_count, live,
                )
            community.member_count = live
            community.updated_at = now

        if changed and joined:
            record_activity(db, user_id, community, now)

        is_joined = membership is not None and membership.joined
        outcome = MembershipOutcome(
            community_id=community_id,
            joined=is_joined,
            member_count=live,
            joined_at=membership.joined_at if is_joined and membership is not None else None,
        )

    if changed:
        logger.info(
            "User %s %s community %s (members: %d)",
            user_id, "joined" if joined else "left", community_id, outcome.member_count,
        )
    return outcome


def list_memberships(
    db: Session,
    user_id: str | None,
    spec: PageSpec,
) -> Page[tuple[CommunityMember, Community]]:
    """List communities the user currently belongs to, most recently joined first."""
    if user_id is None:
        raise AuthRequiredError()
    base = (
        select(CommunityMember, Community)
        .join(Community, Community.id == CommunityMember.community_id)
        .where(
            CommunityMember.user_id == user_id,
            CommunityMember.joined.is_(True),
            Community.deleted_at.is_(None),
        )
    )
    records = db.scalar(select(func.count()).select_from(base.subquery())) or 0
    rows = db.execute(
        base.order_by(CommunityMember.joined_at.desc(), CommunityMember.id.desc())
        .offset(spec.offset)
        .limit(spec.limit)
    ).all()
    return Page(items=[(member, community) for member, community in rows], info=page_info(spec, records))


def list_community_members(
    db: Session,
    viewer_id: str | None,
    community_id: str,
    spec: PageSpec,
    *,
    include_ended: bool = False,
) -> Page[CommunityMember]:
    """Page through a community's membership rows, latest join first.

    The owner sees the whole roster; any other member sees only their own
    row. Ended memberships are included only on request.

    Raises:
        AuthRequiredError: If the caller is anonymous.
        NotFoundError: If the community is missing or deleted.
    """
    if viewer_id is None:
        raise AuthRequiredError()
    community = get_visible_community(db, community_id)

    base = select(CommunityMember).where(CommunityMember.community_id == community_id)
    if not include_ended:
        base = base.where(CommunityMember.joined.is_(True))
    if community.owner_user_id != viewer_id:
        base = base.where(CommunityMember.user_id == viewer_id)

    records = db.scalar(select(func.count()).select_from(base.subquery())) or 0
    members = db.scalars(
        base.order_by(CommunityMember.joined_at.desc(), CommunityMember.id.desc())
        .offset(spec.offset)
        .limit(spec.limit)
    ).all()
    return Page(items=list(members), info=page_info(spec, records))
