# src/threadboard/schemas/__init__.py
"""
Pydantic schemas for request payloads and page view models.
"""

from .feed import CategoryOut, FeedComment, FeedPage, FeedPost, VoteState
from .forms import (
    DeleteCommentRequest,
    DeletePostRequest,
    LoginForm,
    PostForm,
    RegisterForm,
)

__all__ = [
    "CategoryOut", "FeedComment", "FeedPage", "FeedPost", "VoteState",
    "DeleteCommentRequest", "DeletePostRequest",
    "LoginForm", "PostForm", "RegisterForm",
]
