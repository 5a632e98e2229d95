import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from threadboard.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from threadboard.models import Comment, User, Vote
from threadboard.services import comments, voting
from threadboard.services.voting import VoteTarget


def test_create_comment(db: Session, alice: User, bob: User, make_post) -> None:
    post = make_post(alice)
    comment = comments.create_comment(db, author=bob, post_id=post.id, content="Hi")
    assert comment.id is not None
    assert comment.post_id == post.id
    assert comment.user_id == bob.id


def test_comment_on_missing_post(db: Session, alice: User) -> None:
    with pytest.raises(NotFoundError):
        comments.create_comment(db, author=alice, post_id=12345, content="Hi")


@pytest.mark.parametrize(
    ("content", "code"),
    [("", "empty_comment"), ("   \n", "empty_comment"), ("c" * 121, "comment_too_long")],
)
def test_comment_content_rules(db: Session, alice: User, make_post, content: str, code: str) -> None:
    post = make_post(alice)
    with pytest.raises(InvalidInputError) as excinfo:
        comments.create_comment(db, author=alice, post_id=post.id, content=content)
    assert excinfo.value.code == code
    assert db.scalar(select(func.count(Comment.id))) == 0


def test_comment_limit_counts_code_points(db: Session, alice: User, make_post) -> None:
    post = make_post(alice)
    comments.create_comment(db, author=alice, post_id=post.id, content="é" * 120)


def test_delete_comment_removes_its_votes(db: Session, alice: User, bob: User, make_post) -> None:
    post = make_post(alice)
    comment = comments.create_comment(db, author=bob, post_id=post.id, content="Hi")
    voting.cast_vote(db, voter=alice, target=VoteTarget.comment(comment.id), is_like=True)
    voting.cast_vote(db, voter=alice, target=VoteTarget.post(post.id), is_like=True)
    comment_id = comment.id

    comments.delete_comment(db, deleter=bob, comment_id=comment_id)

    assert db.get(Comment, comment_id) is None
    assert db.scalar(select(func.count(Vote.id)).where(Vote.comment_id == comment_id)) == 0
    assert db.scalar(select(func.count(Vote.id)).where(Vote.post_id == post.id)) == 1


def test_only_author_deletes_comment(db: Session, alice: User, bob: User, make_post) -> None:
    post = make_post(alice)
    comment = comments.create_comment(db, author=bob, post_id=post.id, content="Hi")
    with pytest.raises(ForbiddenError):
        comments.delete_comment(db, deleter=alice, comment_id=comment.id)
    assert db.get(Comment, comment.id) is not None
    with pytest.raises(NotFoundError):
        comments.delete_comment(db, deleter=alice, comment_id=999)
