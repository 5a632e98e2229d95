# src/threadboard/api/endpoints/feed.py
"""Feed pages."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from threadboard.api.deps import OptionalUserDep, SessionDep
from threadboard.api.rendering import render, see_other
from threadboard.services import feed

router = APIRouter(tags=["feed"])


@router.get("/")
async def root() -> Response:
    """The feed is the home page."""
    return see_other("/posts")


@router.get("/posts")
async def list_posts(
    request: Request,
    db: SessionDep,
    user: OptionalUserDep,
    feed_filter: Annotated[str, Query(alias="filter")] = "",
    category: str = "",
    error: str = "",
) -> Response:
    """Render the post listing for the current viewer and filters."""
    page = feed.build_feed_page(
        db,
        viewer=user,
        feed_filter=feed_filter,
        category=category or None,
        error_code=error or None,
    )
    return render(request, "posts.html", {"page": page})
