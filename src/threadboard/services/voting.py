"""Like/dislike toggle on posts and comments.

Per (voter, target) the state is NONE, LIKE or DISLIKE. Casting the polarity
already held cancels the vote, casting the opposite polarity switches it, and
casting on NONE creates it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import ColumnElement, and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from threadboard.core.errors import InvalidInputError, NotFoundError
from threadboard.db.store import transaction
from threadboard.models import Comment, Post, User, Vote

logger = logging.getLogger(__name__)

__all__ = ["VoteTarget", "VoteOutcome", "cast_vote", "get_user_vote"]

# A concurrent first vote by the same user can win the insert race once.
_MAX_ATTEMPTS = 2


class VoteOutcome(str, Enum):
    """Transition applied by :func:`cast_vote`."""

    CREATED = "created"
    CANCELLED = "cancelled"
    SWITCHED = "switched"


@dataclass(frozen=True)
class VoteTarget:
    """Exactly one of a post or a comment."""

    post_id: int | None = None
    comment_id: int | None = None

    def __post_init__(self) -> None:
        if (self.post_id is None) == (self.comment_id is None):
            raise InvalidInputError(
                "Must provide either post_id or comment_id", code="invalid_vote_target"
            )

    @classmethod
    def post(cls, post_id: int) -> VoteTarget:
        return cls(post_id=post_id)

    @classmethod
    def comment(cls, comment_id: int) -> VoteTarget:
        return cls(comment_id=comment_id)

    @property
    def is_post(self) -> bool:
        return self.post_id is not None

    def condition(self) -> ColumnElement[bool]:
        """Filter matching votes on this target and nothing else."""
        if self.is_post:
            return and_(Vote.post_id == self.post_id, Vote.comment_id.is_(None))
        return and_(Vote.comment_id == self.comment_id, Vote.post_id.is_(None))


def _ensure_target_exists(db: Session, target: VoteTarget) -> None:
    if target.is_post:
        if db.get(Post, target.post_id) is None:
            raise NotFoundError("Post not found")
    elif db.get(Comment, target.comment_id) is None:
        raise NotFoundError("Comment not found")


def get_user_vote(db: Session, user_id: int, target: VoteTarget) -> Vote | None:
    """Return the vote ``user_id`` holds on ``target``, if any."""
    stmt = select(Vote).where(Vote.user_id == user_id, target.condition())
    return db.scalars(stmt).first()


def _apply(db: Session, voter: User, target: VoteTarget, is_like: bool) -> VoteOutcome:
    existing = get_user_vote(db, voter.id, target)
    if existing is None:
        db.add(
            Vote(
                user_id=voter.id,
                post_id=target.post_id,
                comment_id=target.comment_id,
                is_like=is_like,
            )
        )
        return VoteOutcome.CREATED
    if existing.is_like == is_like:
        db.delete(existing)
        return VoteOutcome.CANCELLED
    existing.is_like = is_like
    return VoteOutcome.SWITCHED


def cast_vote(db: Session, *, voter: User, target: VoteTarget, is_like: bool) -> VoteOutcome:
    """Toggle ``voter``'s vote on ``target`` inside one transaction.

    Raises:
        NotFoundError: if the post or comment does not exist
    """
    _ensure_target_exists(db, target)
    for attempt in range(1, _MAX_ATTEMPTS + 1):
        try:
            with transaction(db):
                outcome = _apply(db, voter, target, is_like)
        except IntegrityError:
            if attempt == _MAX_ATTEMPTS:
                raise
            logger.debug("Vote insert raced for user %d, retrying", voter.id)
            continue
        logger.debug(
            "User %d vote on %s: %s (is_like=%s)",
            voter.id,
            f"post {target.post_id}" if target.is_post else f"comment {target.comment_id}",
            outcome.value,
            is_like,
        )
        return outcome
    raise AssertionError("unreachable")  # pragma: no cover
