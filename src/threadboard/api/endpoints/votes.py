# src/threadboard/api/endpoints/votes.py
"""Vote endpoint for posts and comments."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Form
from fastapi.responses import Response

from threadboard.api.deps import CurrentUserDep, SessionDep, parse_int
from threadboard.api.rendering import feed_url, see_other
from threadboard.core.errors import InvalidInputError, NotFoundError
from threadboard.services import voting
from threadboard.services.voting import VoteTarget

router = APIRouter(tags=["votes"])


def _target_from_form(post_id: str, comment_id: str) -> VoteTarget:
    return VoteTarget(
        post_id=parse_int(post_id, "post ID") if post_id.strip() else None,
        comment_id=parse_int(comment_id, "comment ID") if comment_id.strip() else None,
    )


@router.post("/like")
async def cast_vote(
    db: SessionDep,
    current_user: CurrentUserDep,
    is_like: Annotated[str, Form()] = "",
    post_id: Annotated[str, Form()] = "",
    comment_id: Annotated[str, Form()] = "",
    redirect_category: Annotated[str, Form()] = "",
) -> Response:
    """Toggle the caller's like or dislike on one post or comment."""
    target = _target_from_form(post_id, comment_id)
    try:
        voting.cast_vote(db, voter=current_user, target=target, is_like=is_like == "true")
    except NotFoundError as exc:
        raise InvalidInputError(exc.message) from exc
    return see_other(feed_url(redirect_category))
