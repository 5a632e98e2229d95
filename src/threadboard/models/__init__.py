# src/threadboard/models/__init__.py
"""SQLAlchemy models for the Threadboard forum."""

from .category import SEED_CATEGORIES, Category, PostCategory
from .comment import Comment
from .post import Post
from .user import User, UserSession
from .vote import Vote

__all__ = [
    "Category", "PostCategory", "SEED_CATEGORIES",
    "Comment",
    "Post",
    "User", "UserSession",
    "Vote",
]
