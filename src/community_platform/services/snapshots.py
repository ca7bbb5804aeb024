"""Immutable edit history for posts and comments."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from community_platform.core.errors import NotFoundError
from community_platform.db.time import utcnow
from community_platform.models import Comment, CommentSnapshot, Post, PostSnapshot, TargetKind
from community_platform.services.pagination import Page, PageSpec, page_info
from community_platform.services.visibility import get_visible_comment, get_visible_post

logger = logging.getLogger(__name__)

Snapshot = Union[PostSnapshot, CommentSnapshot]


def record_post_snapshot(
    db: Session,
    post: Post,
    editor_id: str | None,
    now: datetime | None = None,
) -> PostSnapshot:
    """Copy the current state of ``post`` before it is overwritten.

    Must run inside the edit's transaction; nothing is committed here.
    """
    snapshot = PostSnapshot(
        post_id=post.id,
        editor_user_id=editor_id,
        title=post.title,
        body=post.body,
        author_display_name=post.author_display_name,
        created_at=now or utcnow(),
    )
    db.add(snapshot)
    db.flush()
    logger.debug("Recorded snapshot %s of post %s", snapshot.id, post.id)
    return snapshot


def record_comment_snapshot(
    db: Session,
    comment: Comment,
    editor_id: str | None,
    now: datetime | None = None,
) -> CommentSnapshot:
    """Copy the current state of ``comment`` before it is overwritten."""
    snapshot = CommentSnapshot(
        comment_id=comment.id,
        editor_user_id=editor_id,
        content=comment.content,
        created_at=now or utcnow(),
    )
    db.add(snapshot)
    db.flush()
    logger.debug("Recorded snapshot %s of comment %s", snapshot.id, comment.id)
    return snapshot


def record_snapshot(
    db: Session,
    target_kind: TargetKind | str,
    item: Post | Comment,
    editor_id: str | None,
    now: datetime | None = None,
) -> Snapshot:
    """Dispatch to the recorder for ``target_kind``."""
    if TargetKind(target_kind) is TargetKind.POST:
        return record_post_snapshot(db, item, editor_id, now)  # type: ignore[arg-type]
    return record_comment_snapshot(db, item, editor_id, now)  # type: ignore[arg-type]


def _snapshot_model(kind: TargetKind) -> tuple[type[Snapshot], object]:
    if kind is TargetKind.POST:
        return PostSnapshot, PostSnapshot.post_id
    return CommentSnapshot, CommentSnapshot.comment_id


def _require_parent(db: Session, kind: TargetKind, parent_id: str) -> None:
    if kind is TargetKind.POST:
        get_visible_post(db, parent_id)
    else:
        get_visible_comment(db, parent_id)


def list_snapshots(
    db: Session,
    target_kind: TargetKind | str,
    parent_id: str,
    spec: PageSpec,
) -> Page[Snapshot]:
    """Page through the history of one post or comment, newest edit first.

    Raises:
        NotFoundError: If the parent is missing or not visible.
    """
    kind = TargetKind(target_kind)
    _require_parent(db, kind, parent_id)
    model, parent_column = _snapshot_model(kind)

    scoped = select(model).where(parent_column == parent_id)
    records = db.scalar(select(func.count()).select_from(scoped.subquery())) or 0
    items = db.scalars(
        scoped.order_by(model.created_at.desc(), model.id.desc())
        .offset(spec.offset)
        .limit(spec.limit)
    ).all()
    return Page(items=list(items), info=page_info(spec, records))


def get_snapshot(
    db: Session,
    target_kind: TargetKind | str,
    parent_id: str,
    snapshot_id: str,
) -> Snapshot:
    """Return one snapshot, provided it belongs to ``parent_id``."""
    kind = TargetKind(target_kind)
    _require_parent(db, kind, parent_id)
    model, parent_column = _snapshot_model(kind)
    snapshot = db.scalars(
        select(model).where(model.id == snapshot_id, parent_column == parent_id)
    ).first()
    if snapshot is None:
        raise NotFoundError("Snapshot not found")
    return snapshot
