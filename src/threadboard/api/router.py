"""Router wiring for the forum pages.

This module composes the HTTP surface by including the sub-routers that
define their own endpoints. It contains no endpoint definitions.
"""
from __future__ import annotations

from typing import Final

from fastapi import APIRouter

from .endpoints import (
    auth_router,
    comments_router,
    feed_router,
    posts_router,
    votes_router,
)

api_router: Final[APIRouter] = APIRouter()
api_router.include_router(feed_router)
api_router.include_router(auth_router)
api_router.include_router(posts_router)
api_router.include_router(comments_router)
api_router.include_router(votes_router)

__all__ = ["api_router"]
