"""Post authoring: create, edit and delete with category links and images."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from threadboard.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from threadboard.core.text import (
    CONTENT_WRAP_WORDS,
    TITLE_WRAP_WORDS,
    char_count,
    is_blank,
    wrap_words,
)
from threadboard.db.store import execute, transaction
from threadboard.models import Comment, Post, PostCategory, User, Vote
from threadboard.schemas.forms import PostForm
from threadboard.services import catalog, uploads
from threadboard.services.uploads import ImageUpload, StoredImage

logger = logging.getLogger(__name__)

__all__ = [
    "TITLE_MAX",
    "CONTENT_MAX",
    "PostFields",
    "normalize_post_fields",
    "parse_category_ids",
    "get_post",
    "get_owned_post",
    "post_category_ids",
    "create_post",
    "edit_post",
    "delete_post",
]

TITLE_MAX = 120
CONTENT_MAX = 500


@dataclass(frozen=True)
class PostFields:
    """Validated, word-wrapped post input."""

    title: str
    content: str
    category_ids: list[int]


def normalize_post_fields(title: str, content: str) -> tuple[str, str]:
    """Word-wrap title and content, then apply the emptiness and length rules."""
    title = wrap_words(title, TITLE_WRAP_WORDS)
    content = wrap_words(content, CONTENT_WRAP_WORDS)
    if is_blank(title) or is_blank(content):
        raise InvalidInputError("Title and content cannot be empty or only spaces.")
    if char_count(title) > TITLE_MAX:
        raise InvalidInputError(
            f"Title cannot exceed {TITLE_MAX} characters.", field="title"
        )
    if char_count(content) > CONTENT_MAX:
        raise InvalidInputError(
            f"Content cannot exceed {CONTENT_MAX} characters.", field="content"
        )
    return title, content


def parse_category_ids(db: Session, raw_ids: list[str]) -> list[int]:
    """Turn submitted category values into known category ids.

    Empty values (the "no category" choice) are skipped.

    Raises:
        InvalidInputError: on duplicates, non-numeric values or unknown ids
    """
    seen: set[str] = set()
    category_ids: list[int] = []
    for raw in raw_ids:
        value = raw.strip()
        if not value:
            continue
        if value in seen:
            raise InvalidInputError("Duplicate categories are not allowed.", field="categories")
        seen.add(value)
        try:
            category_id = int(value)
        except ValueError as exc:
            raise InvalidInputError("Invalid category selected.", field="categories") from exc
        if not catalog.category_exists(db, category_id):
            raise InvalidInputError("Invalid category selected.", field="categories")
        category_ids.append(category_id)
    if len(set(category_ids)) != len(category_ids):
        # "1" and "01" name the same category.
        raise InvalidInputError("Duplicate categories are not allowed.", field="categories")
    return category_ids


def _prepare(db: Session, form: PostForm) -> PostFields:
    title, content = normalize_post_fields(form.title, form.content)
    category_ids = parse_category_ids(db, form.category_ids)
    return PostFields(title=title, content=content, category_ids=category_ids)


def _accept_image(image: ImageUpload | None, user_id: int) -> StoredImage | None:
    if image is None:
        return None
    try:
        extension = uploads.validate_image(image)
    except InvalidInputError as exc:
        logger.info("Rejected upload from user %d: %s", user_id, exc.code)
        raise
    return uploads.store_image(image, user_id, extension)


def get_post(db: Session, post_id: int) -> Post:
    """Return the post or raise :class:`NotFoundError`."""
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def get_owned_post(db: Session, user: User, post_id: int) -> Post:
    """Return the post if ``user`` is its author.

    Raises:
        NotFoundError: if the post does not exist
        ForbiddenError: if ``user`` is not the author
    """
    post = get_post(db, post_id)
    if post.user_id != user.id:
        logger.warning("User %d denied access to post %d", user.id, post_id)
        raise ForbiddenError("You can only modify your own posts")
    return post


def post_category_ids(db: Session, post_id: int) -> list[int]:
    """Ids of the categories currently linked to a post."""
    stmt = select(PostCategory.category_id).where(PostCategory.post_id == post_id)
    return list(db.scalars(stmt).all())


def create_post(
    db: Session,
    *,
    author: User,
    form: PostForm,
    image: ImageUpload | None = None,
) -> Post:
    """Validate input, store the optional image and insert the post with its categories.

    Nothing is written when validation fails. If the database transaction
    fails after the image was stored, the file is removed again.
    """
    fields = _prepare(db, form)
    stored = _accept_image(image, author.id)

    post = Post(
        user_id=author.id,
        title=fields.title,
        content=fields.content,
        image_path=stored.public_path if stored else None,
    )
    try:
        with transaction(db):
            db.add(post)
            db.flush()
            for category_id in fields.category_ids:
                db.add(PostCategory(post_id=post.id, category_id=category_id))
    except Exception:
        uploads.discard_image(stored)
        raise

    logger.info("User %d created post %d", author.id, post.id)
    return post


def edit_post(
    db: Session,
    *,
    editor: User,
    post_id: int,
    form: PostForm,
    image: ImageUpload | None = None,
) -> Post:
    """Replace title, content, categories and optionally the image of a post.

    Ownership is checked before any validation so a non-author never causes a
    file write. A replaced image stays on disk.
    """
    post = get_owned_post(db, editor, post_id)
    fields = _prepare(db, form)
    stored = _accept_image(image, editor.id)

    try:
        with transaction(db):
            post.title = fields.title
            post.content = fields.content
            if stored is not None:
                post.image_path = stored.public_path
            execute(db, delete(PostCategory).where(PostCategory.post_id == post.id))
            for category_id in fields.category_ids:
                db.add(PostCategory(post_id=post.id, category_id=category_id))
    except Exception:
        uploads.discard_image(stored)
        raise

    logger.info("User %d edited post %d", editor.id, post_id)
    return post


def delete_post(db: Session, *, deleter: User, post_id: int) -> None:
    """Delete a post together with its votes, comments and category links."""
    post = get_owned_post(db, deleter, post_id)

    comment_ids = select(Comment.id).where(Comment.post_id == post.id)
    with transaction(db):
        execute(
            db,
            delete(Vote).where(or_(Vote.post_id == post.id, Vote.comment_id.in_(comment_ids))),
        )
        execute(db, delete(Comment).where(Comment.post_id == post.id))
        execute(db, delete(PostCategory).where(PostCategory.post_id == post.id))
        result = execute(
            db, delete(Post).where(Post.id == post.id, Post.user_id == deleter.id)
        )
        if result.rows_affected == 0:
            raise ForbiddenError("You can only modify your own posts")

    logger.info("User %d deleted post %d", deleter.id, post_id)
