# src/threadboard/services/__init__.py
"""Business logic services for the Threadboard forum."""

from . import catalog, comments, feed, identity, posts, uploads, voting

__all__ = [
    "catalog",
    "comments",
    "feed",
    "identity",
    "posts",
    "uploads",
    "voting",
]
