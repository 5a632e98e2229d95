"""Models capturing like/dislike votes on posts and comments."""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from threadboard.db.session import Base


class Vote(Base):
    """Per-user like or dislike on exactly one post or one comment.

    The target is a tagged pair of nullable foreign keys. The check constraint
    keeps exactly one of them set, and the two partial unique indexes allow at
    most one vote per (user, target). A plain UNIQUE(user_id, post_id,
    comment_id) would not do, because NULLs never compare equal.
    """

    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)",
            name="ck_votes_single_target",
        ),
        Index(
            "uq_votes_user_post",
            "user_id",
            "post_id",
            unique=True,
            sqlite_where=text("post_id IS NOT NULL"),
            postgresql_where=text("post_id IS NOT NULL"),
        ),
        Index(
            "uq_votes_user_comment",
            "user_id",
            "comment_id",
            unique=True,
            sqlite_where=text("comment_id IS NOT NULL"),
            postgresql_where=text("comment_id IS NOT NULL"),
        ),
        Index("ix_votes_post_id", "post_id"),
        Index("ix_votes_comment_id", "comment_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
    )
    comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    is_like: Mapped[bool] = mapped_column(Boolean, nullable=False)
