"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from community_platform.core.security import decode_subject
from community_platform.db.session import get_db
from community_platform.models import User
from community_platform.services.pagination import PageSpec

# Anonymous reads are allowed, so a missing header is not an error here.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_optional_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> str | None:
    """Resolve the caller's user id from a bearer token.

    Args:
        credentials: HTTP Bearer token credentials, if any
        db: Database session

    Returns:
        The authenticated user id, or None for anonymous callers

    Raises:
        HTTPException: If a token is supplied but invalid or names an unknown account
    """
    if credentials is None:
        return None
    subject = decode_subject(credentials.credentials)
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    user = db.get(User, subject)
    if user is None or user.deleted_at is not None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user.id


def get_page_spec(
    page: Annotated[int, Query(description="1-indexed page number")] = 1,
    limit: Annotated[int | None, Query(description="Page size, clamped to 1..100")] = None,
) -> PageSpec:
    """Build an offset page request from query parameters."""
    return PageSpec.build(page, limit)


# Services raise AUTH_REQUIRED themselves when an operation needs a user
UserIdDep = Annotated[str | None, Depends(get_optional_user_id)]
PageSpecDep = Annotated[PageSpec, Depends(get_page_spec)]
