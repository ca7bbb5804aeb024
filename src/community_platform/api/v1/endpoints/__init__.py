"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .communities import router as communities_router
from .me import router as me_router
from .posts import router as posts_router

__all__ = [
    "comments_router",
    "communities_router",
    "me_router",
    "posts_router",
]
