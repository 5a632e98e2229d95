"""Comment creation and deletion."""

from __future__ import annotations

import logging

from sqlalchemy import delete
from sqlalchemy.orm import Session

from threadboard.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from threadboard.core.text import char_count, is_blank
from threadboard.db.store import execute, transaction
from threadboard.models import Comment, Post, User, Vote

logger = logging.getLogger(__name__)

__all__ = ["COMMENT_MAX", "create_comment", "delete_comment"]

COMMENT_MAX = 120


def create_comment(db: Session, *, author: User, post_id: int, content: str) -> Comment:
    """Attach a comment to an existing post.

    Raises:
        NotFoundError: if the post does not exist
        InvalidInputError: with code ``empty_comment`` or ``comment_too_long``
    """
    if db.get(Post, post_id) is None:
        raise NotFoundError("Post not found")
    if is_blank(content):
        raise InvalidInputError("Comment cannot be empty.", field="content", code="empty_comment")
    if char_count(content) > COMMENT_MAX:
        raise InvalidInputError(
            f"Comment cannot exceed {COMMENT_MAX} characters.",
            field="content",
            code="comment_too_long",
        )

    comment = Comment(user_id=author.id, post_id=post_id, content=content)
    with transaction(db):
        db.add(comment)
    logger.info("User %d commented on post %d", author.id, post_id)
    return comment


def delete_comment(db: Session, *, deleter: User, comment_id: int) -> None:
    """Delete a comment and the votes cast on it. Only its author may do so."""
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.user_id != deleter.id:
        logger.warning("User %d denied deleting comment %d", deleter.id, comment_id)
        raise ForbiddenError("You can only delete your own comments")

    with transaction(db):
        execute(db, delete(Vote).where(Vote.comment_id == comment_id))
        result = execute(
            db, delete(Comment).where(Comment.id == comment_id, Comment.user_id == deleter.id)
        )
        if result.rows_affected == 0:
            raise ForbiddenError("You can only delete your own comments")

    logger.info("User %d deleted comment %d", deleter.id, comment_id)
