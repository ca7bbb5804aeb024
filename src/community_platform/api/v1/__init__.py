"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    communities_router,
    me_router,
    posts_router,
)

__all__ = [
    "comments_router",
    "communities_router",
    "me_router",
    "posts_router",
]
