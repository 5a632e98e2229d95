# src/threadboard/api/endpoints/comments.py
"""Comment endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import Response

from threadboard.api.deps import CurrentUserDep, SessionDep, parse_int, read_json_body
from threadboard.api.rendering import feed_url, see_other
from threadboard.core.errors import InvalidInputError, NotFoundError
from threadboard.schemas.forms import DeleteCommentRequest
from threadboard.services import comments

router = APIRouter(tags=["comments"])


@router.post("/comment")
async def create_comment(
    db: SessionDep,
    current_user: CurrentUserDep,
    post_id: Annotated[str, Form()] = "",
    content: Annotated[str, Form()] = "",
    redirect_category: Annotated[str, Form()] = "",
) -> Response:
    """Add a comment; content problems come back to the feed as ``?error=``."""
    target_id = parse_int(post_id, "post ID")
    try:
        comments.create_comment(db, author=current_user, post_id=target_id, content=content)
    except NotFoundError as exc:
        raise InvalidInputError(exc.message, field="post_id") from exc
    except InvalidInputError as exc:
        return see_other(feed_url(redirect_category, error=exc.code))
    return see_other(feed_url(redirect_category))


@router.delete("/comment/delete")
async def delete_comment(
    request: Request,
    db: SessionDep,
    current_user: CurrentUserDep,
    redirect_category: str = "",
) -> Response:
    """Delete an owned comment and the votes cast on it."""
    payload = await read_json_body(request, DeleteCommentRequest)
    comments.delete_comment(db, deleter=current_user, comment_id=payload.comment_id)
    return see_other(feed_url(redirect_category))
