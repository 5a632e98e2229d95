"""SQLAlchemy models for the fixed category catalog."""

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from threadboard.db.session import Base

SEED_CATEGORIES: tuple[str, ...] = (
    "General",
    "Announcements",
    "Discussions",
    "Questions",
    "Suggestions",
    "Off-topic",
)


class Category(Base):
    """Label used to tag posts. Seeded at startup, never created by users."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)


class PostCategory(Base):
    """Join table linking posts to categories."""

    __tablename__ = "post_categories"
    __table_args__ = (Index("ix_post_categories_category", "category_id"),)

    # Composite primary key keeps each (post, category) pair unique.
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    )
