"""Read side: the post listing with counts, viewer votes, comments and tags."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from threadboard.core.text import (
    CONTENT_WRAP_WORDS,
    TITLE_WRAP_WORDS,
    format_timestamp,
    wrap_words,
)
from threadboard.models import Category, Comment, Post, PostCategory, User, Vote
from threadboard.schemas.feed import CategoryOut, FeedComment, FeedPage, FeedPost
from threadboard.services import catalog

logger = logging.getLogger(__name__)

__all__ = ["FEED_FILTERS", "ERROR_MESSAGES", "error_message", "list_posts", "build_feed_page"]

FEED_FILTERS = frozenset({"created", "liked"})

ERROR_MESSAGES = {
    "empty_comment": "Comment cannot be empty.",
    "comment_too_long": "Comment cannot exceed 120 characters.",
}


def error_message(code: str | None) -> str:
    """Human readable text for an ``?error=`` code."""
    if not code:
        return ""
    return ERROR_MESSAGES.get(code, "An error occurred.")


def _count_votes(target_column, other_column, owner_id_column, is_like: bool):  # noqa: ANN001, ANN202
    return (
        select(func.count(Vote.id))
        .where(
            target_column == owner_id_column,
            other_column.is_(None),
            Vote.is_like.is_(is_like),
        )
        .scalar_subquery()
    )


def _post_listing(viewer: User | None, feed_filter: str, category: str | None) -> Select | None:
    likes = _count_votes(Vote.post_id, Vote.comment_id, Post.id, True)
    dislikes = _count_votes(Vote.post_id, Vote.comment_id, Post.id, False)
    stmt = (
        select(Post, User.username, likes.label("likes"), dislikes.label("dislikes"))
        .join(User, Post.user_id == User.id)
    )

    if feed_filter in FEED_FILTERS and viewer is None:
        return None
    if feed_filter == "created":
        stmt = stmt.where(Post.user_id == viewer.id)
    elif feed_filter == "liked":
        liked = select(Vote.post_id).where(
            Vote.user_id == viewer.id,
            Vote.is_like.is_(True),
            Vote.comment_id.is_(None),
        )
        stmt = stmt.where(Post.id.in_(liked))

    if category:
        tagged = (
            select(PostCategory.post_id)
            .join(Category, PostCategory.category_id == Category.id)
            .where(Category.name == category)
        )
        stmt = stmt.where(Post.id.in_(tagged))

    return stmt.order_by(Post.created_at.desc(), Post.id.desc())


def _viewer_votes(db: Session, viewer: User | None, column, ids: list[int]) -> dict[int, bool]:  # noqa: ANN001
    if viewer is None or not ids:
        return {}
    other = Vote.comment_id if column is Vote.post_id else Vote.post_id
    stmt = select(column, Vote.is_like).where(
        Vote.user_id == viewer.id,
        column.in_(ids),
        other.is_(None),
    )
    return {target_id: is_like for target_id, is_like in db.execute(stmt).all()}


def _comments_by_post(
    db: Session, viewer: User | None, post_ids: list[int]
) -> dict[int, list[FeedComment]]:
    if not post_ids:
        return {}
    likes = _count_votes(Vote.comment_id, Vote.post_id, Comment.id, True)
    dislikes = _count_votes(Vote.comment_id, Vote.post_id, Comment.id, False)
    stmt = (
        select(Comment, User.username, likes, dislikes)
        .join(User, Comment.user_id == User.id)
        .where(Comment.post_id.in_(post_ids))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    rows = db.execute(stmt).all()
    votes = _viewer_votes(db, viewer, Vote.comment_id, [row[0].id for row in rows])

    grouped: dict[int, list[FeedComment]] = defaultdict(list)
    for comment, username, like_count, dislike_count in rows:
        vote = votes.get(comment.id)
        grouped[comment.post_id].append(
            FeedComment(
                id=comment.id,
                author=username,
                author_id=comment.user_id,
                content=comment.content,
                created_at=format_timestamp(comment.created_at),
                likes=like_count,
                dislikes=dislike_count,
                user_liked=vote is True,
                user_disliked=vote is False,
            )
        )
    return grouped


def _categories_by_post(db: Session, post_ids: Iterable[int]) -> dict[int, list[CategoryOut]]:
    ids = list(post_ids)
    if not ids:
        return {}
    stmt = (
        select(PostCategory.post_id, Category)
        .join(Category, PostCategory.category_id == Category.id)
        .where(PostCategory.post_id.in_(ids))
        .order_by(Category.name.asc())
    )
    grouped: dict[int, list[CategoryOut]] = defaultdict(list)
    for post_id, category in db.execute(stmt).all():
        grouped[post_id].append(CategoryOut.model_validate(category))
    return grouped


def list_posts(
    db: Session,
    viewer: User | None = None,
    feed_filter: str = "",
    category: str | None = None,
) -> list[FeedPost]:
    """Return the posts matching the filters, newest first.

    ``created`` and ``liked`` are relative to ``viewer`` and yield nothing for
    anonymous visitors. ``category`` narrows by category name.
    """
    stmt = _post_listing(viewer, feed_filter, category)
    if stmt is None:
        return []
    rows = db.execute(stmt).all()
    post_ids = [row[0].id for row in rows]
    logger.debug(
        "Feed filter=%r category=%r matched %d posts", feed_filter, category, len(post_ids)
    )

    votes = _viewer_votes(db, viewer, Vote.post_id, post_ids)
    comments = _comments_by_post(db, viewer, post_ids)
    categories = _categories_by_post(db, post_ids)

    posts: list[FeedPost] = []
    for post, username, like_count, dislike_count in rows:
        vote = votes.get(post.id)
        posts.append(
            FeedPost(
                id=post.id,
                title=wrap_words(post.title, TITLE_WRAP_WORDS),
                content=wrap_words(post.content, CONTENT_WRAP_WORDS),
                author=username,
                author_id=post.user_id,
                created_at=format_timestamp(post.created_at),
                image_path=post.image_path,
                likes=like_count,
                dislikes=dislike_count,
                user_liked=vote is True,
                user_disliked=vote is False,
                comments=comments.get(post.id, []),
                categories=categories.get(post.id, []),
            )
        )
    return posts


def build_feed_page(
    db: Session,
    viewer: User | None = None,
    feed_filter: str = "",
    category: str | None = None,
    error_code: str | None = None,
) -> FeedPage:
    """Assemble everything the feed page renders."""
    return FeedPage(
        is_logged_in=viewer is not None,
        current_user=viewer.username if viewer else "",
        current_user_id=viewer.id if viewer else None,
        posts=list_posts(db, viewer, feed_filter, category),
        categories=[CategoryOut.model_validate(c) for c in catalog.list_categories(db)],
        filter=feed_filter,
        category_filter=category or "",
        error=error_message(error_code),
    )
