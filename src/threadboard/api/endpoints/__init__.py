# src/threadboard/api/endpoints/__init__.py
"""HTTP endpoint modules."""

from .auth import router as auth_router
from .comments import router as comments_router
from .feed import router as feed_router
from .posts import router as posts_router
from .votes import router as votes_router

__all__ = [
    "auth_router",
    "comments_router",
    "feed_router",
    "posts_router",
    "votes_router",
]
