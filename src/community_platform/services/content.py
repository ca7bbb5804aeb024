"""Create, edit and delete posts, comments and communities.

Edits always pass through the snapshot recorder inside the same transaction,
so the pre-edit state is captured exactly once per successful edit.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from community_platform.core.errors import (
    AuthRequiredError,
    ConflictError,
    ForbiddenError,
    ValidationError,
)
from community_platform.db.session import unit_of_work
from community_platform.db.time import utcnow
from community_platform.models import Comment, Community, CommunityMember, Post
from community_platform.services.recency import record_activity
from community_platform.services.snapshots import record_comment_snapshot, record_post_snapshot
from community_platform.services.visibility import (
    get_visible_comment,
    get_visible_community,
    get_visible_post,
)

logger = logging.getLogger(__name__)

COMMUNITY_NAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9_-]{1,28}[A-Za-z0-9])?$")

NAME_MIN, NAME_MAX = 3, 30
TITLE_MIN, TITLE_MAX = 5, 120
BODY_MIN, BODY_MAX = 10, 10_000
DISPLAY_NAME_MAX = 32
COMMENT_MIN, COMMENT_MAX = 2, 2_000
URI_MAX = 255

_UNSET = object()


def _require_user(user_id: str | None) -> str:
    if user_id is None:
        raise AuthRequiredError()
    return user_id


def _check_length(value: str, label: str, minimum: int, maximum: int) -> str:
    text = value.strip()
    if not minimum <= len(text) <= maximum:
        raise ValidationError(f"{label} must be between {minimum} and {maximum} characters.")
    return text


def validate_title(title: str) -> str:
    return _check_length(title, "Title", TITLE_MIN, TITLE_MAX)


def validate_body(body: str) -> str:
    """Bodies are plain text; markup characters are rejected."""
    text = _check_length(body, "Body", BODY_MIN, BODY_MAX)
    if "<" in text or ">" in text:
        raise ValidationError("Body must be plain text.")
    return text


def validate_display_name(name: str | None) -> str | None:
    if name is None:
        return None
    text = name.strip()
    if len(text) > DISPLAY_NAME_MAX:
        raise ValidationError(f"Display name must be at most {DISPLAY_NAME_MAX} characters.")
    return text or None


def validate_comment(content: str) -> str:
    return _check_length(content, "Comment", COMMENT_MIN, COMMENT_MAX)


def validate_community_name(name: str) -> str:
    text = name.strip()
    if not NAME_MIN <= len(text) <= NAME_MAX or not COMMUNITY_NAME_PATTERN.match(text):
        raise ValidationError("This name isn't available. Please choose something simpler.")
    return text


def create_post(
    db: Session,
    author_id: str | None,
    community_id: str,
    *,
    title: str,
    body: str,
    author_display_name: str | None = None,
    now: datetime | None = None,
) -> Post:
    """Publish a post and record the author's activity in the community."""
    author_id = _require_user(author_id)
    now = now or utcnow()
    post = Post(
        community_id=community_id,
        author_user_id=author_id,
        title=validate_title(title),
        body=validate_body(body),
        author_display_name=validate_display_name(author_display_name),
        created_at=now,
        updated_at=now,
    )
    with unit_of_work(db):
        community = get_visible_community(db, community_id, include_disabled=False)
        db.add(post)
        db.flush()
        record_activity(db, author_id, community, now)
    logger.info("Post %s created in community %s by %s", post.id, community_id, author_id)
    return post


def create_comment(
    db: Session,
    author_id: str | None,
    post_id: str,
    *,
    content: str,
    parent_comment_id: str | None = None,
    now: datetime | None = None,
) -> Comment:
    """Comment on a visible post, optionally replying to one of its comments."""
    author_id = _require_user(author_id)
    now = now or utcnow()
    text = validate_comment(content)
    with unit_of_work(db):
        post = get_visible_post(db, post_id)
        if parent_comment_id is not None:
            parent = get_visible_comment(db, parent_comment_id)
            if parent.post_id != post.id:
                raise ValidationError("Parent comment belongs to a different post.")
        comment = Comment(
            post_id=post.id,
            parent_comment_id=parent_comment_id,
            author_user_id=author_id,
            content=text,
            created_at=now,
            updated_at=now,
        )
        db.add(comment)
        db.flush()
    logger.info("Comment %s created on post %s by %s", comment.id, post_id, author_id)
    return comment


def _require_author(actor_id: str, author_id: str | None) -> None:
    if author_id is None or author_id != actor_id:
        raise ForbiddenError()


def edit_post(
    db: Session,
    actor_id: str | None,
    post_id: str,
    *,
    title: str | None = None,
    body: str | None = None,
    author_display_name: object = _UNSET,
    now: datetime | None = None,
) -> Post:
    """Apply an author's edit to a post.

    Fields left as None (or unset, for the display name) keep their current
    value. The previous state is stored as a snapshot before the row changes.

    Raises:
        AuthRequiredError: If the caller is anonymous.
        ValidationError: If no field is supplied or a field is out of bounds.
        NotFoundError: If the post is missing or not visible.
        ForbiddenError: If the caller is not the author.
    """
    actor_id = _require_user(actor_id)
    if title is None and body is None and author_display_name is _UNSET:
        raise ValidationError("Provide at least one field to update.")
    new_title = validate_title(title) if title is not None else None
    new_body = validate_body(body) if body is not None else None
    new_display = (
        validate_display_name(author_display_name)  # type: ignore[arg-type]
        if author_display_name is not _UNSET
        else _UNSET
    )
    now = now or utcnow()

    with unit_of_work(db):
        post = get_visible_post(db, post_id, for_update=True)
        _require_author(actor_id, post.author_user_id)
        record_post_snapshot(db, post, actor_id, now)
        if new_title is not None:
            post.title = new_title
        if new_body is not None:
            post.body = new_body
        if new_display is not _UNSET:
            post.author_display_name = new_display  # type: ignore[assignment]
        post.updated_at = now
    logger.info("Post %s edited by %s", post_id, actor_id)
    return post


def edit_comment(
    db: Session,
    actor_id: str | None,
    comment_id: str,
    *,
    content: str,
    now: datetime | None = None,
) -> Comment:
    """Apply an author's edit to a comment, snapshotting the previous content."""
    actor_id = _require_user(actor_id)
    text = validate_comment(content)
    now = now or utcnow()

    with unit_of_work(db):
        comment = get_visible_comment(db, comment_id, for_update=True)
        _require_author(actor_id, comment.author_user_id)
        record_comment_snapshot(db, comment, actor_id, now)
        comment.content = text
        comment.updated_at = now
    logger.info("Comment %s edited by %s", comment_id, actor_id)
    return comment


def delete_post(db: Session, actor_id: str | None, post_id: str) -> None:
    """Soft-delete a post; a repeated delete reports NOT_FOUND."""
    actor_id = _require_user(actor_id)
    now = utcnow()
    with unit_of_work(db):
        post = get_visible_post(db, post_id, include_disabled=True, for_update=True)
        _require_author(actor_id, post.author_user_id)
        post.deleted_at = now
        post.updated_at = now
    logger.info("Post %s deleted by %s", post_id, actor_id)


def delete_comment(db: Session, actor_id: str | None, comment_id: str) -> None:
    """Soft-delete a comment; a repeated delete reports NOT_FOUND."""
    actor_id = _require_user(actor_id)
    now = utcnow()
    with unit_of_work(db):
        comment = get_visible_comment(db, comment_id, include_disabled=True, for_update=True)
        _require_author(actor_id, comment.author_user_id)
        comment.deleted_at = now
        comment.updated_at = now
    logger.info("Comment %s deleted by %s", comment_id, actor_id)


def create_community(
    db: Session,
    owner_id: str | None,
    name: str,
    description: str | None = None,
    now: datetime | None = None,
) -> Community:
    """Create a community owned by the caller, who joins it immediately.

    Names are unique case-insensitively; a taken name raises ``ConflictError``.
    """
    owner_id = _require_user(owner_id)
    clean_name = validate_community_name(name)
    name_key = clean_name.lower()
    now = now or utcnow()

    with unit_of_work(db):
        taken = db.scalar(select(Community.id).where(Community.name_key == name_key))
        if taken is not None:
            raise ConflictError("A community with this name already exists.")
        community = Community(
            name=clean_name,
            name_key=name_key,
            description=description,
            owner_user_id=owner_id,
            member_count=1,
            created_at=now,
            updated_at=now,
            last_active_at=now,
        )
        db.add(community)
        db.flush()
        db.add(
            CommunityMember(
                community_id=community.id,
                user_id=owner_id,
                joined=True,
                joined_at=now,
                created_at=now,
                updated_at=now,
            )
        )
        record_activity(db, owner_id, community, now)
    logger.info("Community %s (%s) created by %s", community.id, clean_name, owner_id)
    return community


def get_community(
    db: Session,
    community_id: str,
    viewer_id: str | None = None,
    now: datetime | None = None,
) -> Community:
    """Read a community; authenticated visits are recorded as recent activity."""
    if viewer_id is None:
        return get_visible_community(db, community_id)
    with unit_of_work(db):
        community = get_visible_community(db, community_id)
        record_activity(db, viewer_id, community, now)
    return community


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _validate_uri(value: str | None, label: str) -> str | None:
    text = _clean_optional(value)
    if text is not None and len(text) > URI_MAX:
        raise ValidationError(f"{label} must be at most {URI_MAX} characters.")
    return text


def _require_owner(actor_id: str, community: Community) -> None:
    if community.owner_user_id is None or community.owner_user_id != actor_id:
        raise ForbiddenError()


def update_community(
    db: Session,
    actor_id: str | None,
    community_id: str,
    *,
    description: object = _UNSET,
    logo_uri: object = _UNSET,
    banner_uri: object = _UNSET,
    now: datetime | None = None,
) -> Community:
    """Change a community's description or artwork; only the owner may.

    The name is immutable. Unset fields keep their value and an explicit
    None clears it.

    Raises:
        AuthRequiredError: If the caller is anonymous.
        ValidationError: If no field is supplied or a URI is too long.
        NotFoundError: If the community is missing or deleted.
        ForbiddenError: If the caller does not own the community.
    """
    actor_id = _require_user(actor_id)
    changes: dict[str, str | None] = {}
    if description is not _UNSET:
        changes["description"] = _clean_optional(description)  # type: ignore[arg-type]
    if logo_uri is not _UNSET:
        changes["logo_uri"] = _validate_uri(logo_uri, "Logo URI")  # type: ignore[arg-type]
    if banner_uri is not _UNSET:
        changes["banner_uri"] = _validate_uri(banner_uri, "Banner URI")  # type: ignore[arg-type]
    if not changes:
        raise ValidationError("Provide at least one field to update.")
    now = now or utcnow()

    with unit_of_work(db):
        community = get_visible_community(db, community_id, for_update=True)
        _require_owner(actor_id, community)
        for field, value in changes.items():
            setattr(community, field, value)
        community.updated_at = now
    logger.info("Community %s updated by %s (%s)", community_id, actor_id, ", ".join(changes))
    return community


def delete_community(db: Session, actor_id: str | None, community_id: str) -> None:
    """Soft-delete a community owned by the caller.

    Its posts, comments and recent-community entries drop out of every
    listing through the visibility filter. A repeated delete reports NOT_FOUND.
    """
    actor_id = _require_user(actor_id)
    now = utcnow()
    with unit_of_work(db):
        community = get_visible_community(db, community_id, for_update=True)
        _require_owner(actor_id, community)
        community.deleted_at = now
        community.updated_at = now
    logger.info("Community %s deleted by %s", community_id, actor_id)
