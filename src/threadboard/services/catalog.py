"""Read-only access to the seeded category catalog."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from threadboard.db.store import transaction
from threadboard.models import SEED_CATEGORIES, Category

logger = logging.getLogger(__name__)

__all__ = ["seed_categories", "list_categories", "category_exists", "get_by_name"]


def seed_categories(db: Session, names: Sequence[str] = SEED_CATEGORIES) -> int:
    """Insert any missing seed category and return how many were added."""
    existing = set(db.scalars(select(Category.name)).all())
    added = 0
    with transaction(db):
        for name in names:
            if name not in existing:
                db.add(Category(name=name))
                added += 1
    if added:
        logger.info("Seeded %d categories", added)
    return added


def list_categories(db: Session) -> list[Category]:
    """Return every category ordered by name."""
    return list(db.scalars(select(Category).order_by(Category.name.asc())).all())


def category_exists(db: Session, category_id: int) -> bool:
    """Return True when a category with this id exists."""
    return db.get(Category, category_id) is not None


def get_by_name(db: Session, name: str) -> Category | None:
    """Return the category with this exact name."""
    return db.scalars(select(Category).where(Category.name == name)).first()
