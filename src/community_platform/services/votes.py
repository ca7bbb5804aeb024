"""Vote ledger: per-voter vote state on posts and comments and target scores."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import Select, case, func, select
from sqlalchemy.orm import Session

from community_platform.core.errors import AuthRequiredError, SelfActionForbiddenError
from community_platform.db.session import unit_of_work
from community_platform.db.time import utcnow
from community_platform.models import TargetKind, User, Vote, VoteState
from community_platform.services.visibility import get_visible_comment, get_visible_post

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteOutcome:
    """Result of a vote mutation as seen by the voter."""

    target_id: str
    target_kind: TargetKind
    score: int
    my_vote: VoteState


_SCORE_EXPR = func.coalesce(
    func.sum(
        case(
            (Vote.state == VoteState.UPVOTE.value, 1),
            (Vote.state == VoteState.DOWNVOTE.value, -1),
            else_=0,
        )
    ),
    0,
)


def _active_votes(target_kind: TargetKind) -> Select[tuple[str, int]]:
    """Votes that count toward a score: non-NONE and cast by a live account."""
    return (
        select(Vote.target_id, _SCORE_EXPR.label("score"))
        .join(User, User.id == Vote.voter_user_id)
        .where(
            Vote.target_kind == target_kind.value,
            Vote.state != VoteState.NONE.value,
            User.deleted_at.is_(None),
        )
    )


def score_of(db: Session, target_id: str, target_kind: TargetKind | str = TargetKind.POST) -> int:
    """Return upvotes minus downvotes for one target."""
    kind = TargetKind(target_kind)
    stmt = _active_votes(kind).where(Vote.target_id == target_id).group_by(Vote.target_id)
    row = db.execute(stmt).first()
    return int(row.score) if row is not None else 0


def scores_for(
    db: Session,
    target_ids: Iterable[str],
    target_kind: TargetKind | str = TargetKind.POST,
) -> dict[str, int]:
    """Return the score of every id in ``target_ids``; unvoted targets map to 0."""
    ids = list(dict.fromkeys(target_ids))
    if not ids:
        return {}
    kind = TargetKind(target_kind)
    stmt = _active_votes(kind).where(Vote.target_id.in_(ids)).group_by(Vote.target_id)
    scores = {target_id: 0 for target_id in ids}
    for row in db.execute(stmt):
        scores[row.target_id] = int(row.score)
    return scores


def my_vote(
    db: Session,
    voter_id: str | None,
    target_id: str,
    target_kind: TargetKind | str = TargetKind.POST,
) -> VoteState:
    """Return the caller's vote state; anonymous callers and absent rows read as NONE."""
    if voter_id is None:
        return VoteState.NONE
    vote = _find_vote(db, voter_id, TargetKind(target_kind), target_id)
    return VoteState(vote.state) if vote is not None else VoteState.NONE


def _find_vote(
    db: Session,
    voter_id: str,
    target_kind: TargetKind,
    target_id: str,
    *,
    for_update: bool = False,
) -> Vote | None:
    stmt = select(Vote).where(
        Vote.voter_user_id == voter_id,
        Vote.target_kind == target_kind.value,
        Vote.target_id == target_id,
    )
    if for_update:
        stmt = stmt.with_for_update()
    return db.scalars(stmt).first()


def _target_author(db: Session, target_kind: TargetKind, target_id: str) -> str | None:
    """Return the author of a visible target or raise ``NotFoundError``."""
    if target_kind is TargetKind.POST:
        return get_visible_post(db, target_id).author_user_id
    return get_visible_comment(db, target_id).author_user_id


def set_vote(
    db: Session,
    voter_id: str | None,
    target_id: str,
    target_kind: TargetKind | str,
    new_state: VoteState | str,
) -> VoteOutcome:
    """Set the caller's vote on a post or comment.

    Args:
        db: Session used as the unit of work.
        voter_id: Authenticated caller, or None for anonymous requests.
        target_id: Post or comment identifier.
        target_kind: Which table ``target_id`` refers to.
        new_state: Desired state; NONE clears the vote.

    Returns:
        The target's live score and the caller's resulting state.

    Raises:
        AuthRequiredError: If the caller is anonymous.
        NotFoundError: If the target is missing or not visible.
        SelfActionForbiddenError: If the caller authored the target.

    Notes:
        Re-applying the current state leaves the row untouched, so retries are
        safe. The score is recomputed from the ledger inside the same
        transaction rather than adjusted incrementally.
    """
    if voter_id is None:
        raise AuthRequiredError()
    kind = TargetKind(target_kind)
    state = VoteState(new_state)

    with unit_of_work(db):
        author_id = _target_author(db, kind, target_id)
        if author_id is not None and author_id == voter_id:
            raise SelfActionForbiddenError()

        vote = _find_vote(db, voter_id, kind, target_id, for_update=True)
        previous = VoteState(vote.state) if vote is not None else VoteState.NONE
        if vote is None:
            if state is not VoteState.NONE:
                db.add(
                    Vote(
                        voter_user_id=voter_id,
                        target_kind=kind.value,
                        target_id=target_id,
                        state=state.value,
                    )
                )
        elif previous is not state:
            vote.state = state.value
            vote.updated_at = utcnow()
        db.flush()
        score = score_of(db, target_id, kind)

    if previous is not state:
        logger.debug(
            "Vote on %s %s by %s: %s -> %s (score %d)",
            kind.value, target_id, voter_id, previous.value, state.value, score,
        )
    return VoteOutcome(target_id=target_id, target_kind=kind, score=score, my_vote=state)


def clear_vote(
    db: Session,
    voter_id: str | None,
    target_id: str,
    target_kind: TargetKind | str = TargetKind.POST,
) -> VoteOutcome:
    """Reset the caller's vote to NONE; clearing an absent vote is a no-op."""
    if voter_id is None:
        raise AuthRequiredError()
    kind = TargetKind(target_kind)

    with unit_of_work(db):
        _target_author(db, kind, target_id)
        vote = _find_vote(db, voter_id, kind, target_id, for_update=True)
        if vote is not None and vote.state != VoteState.NONE.value:
            vote.state = VoteState.NONE.value
            vote.updated_at = utcnow()
            db.flush()
            logger.debug("Cleared vote on %s %s by %s", kind.value, target_id, voter_id)
        score = score_of(db, target_id, kind)

    return VoteOutcome(target_id=target_id, target_kind=kind, score=score, my_vote=VoteState.NONE)
