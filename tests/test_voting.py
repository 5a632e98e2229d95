import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from threadboard.core.errors import InvalidInputError, NotFoundError
from threadboard.models import User, Vote
from threadboard.services import comments, voting
from threadboard.services.voting import VoteOutcome, VoteTarget


def _tally(db: Session, target: VoteTarget) -> tuple[int, int]:
    likes = db.scalar(
        select(func.count(Vote.id)).where(target.condition(), Vote.is_like.is_(True))
    )
    dislikes = db.scalar(
        select(func.count(Vote.id)).where(target.condition(), Vote.is_like.is_(False))
    )
    return likes, dislikes


@pytest.mark.parametrize(
    "kwargs",
    [{}, {"post_id": 1, "comment_id": 1}],
)
def test_target_needs_exactly_one_id(kwargs: dict) -> None:
    with pytest.raises(InvalidInputError):
        VoteTarget(**kwargs)


def test_like_twice_cancels(db: Session, alice: User, make_post) -> None:
    post = make_post(alice)
    target = VoteTarget.post(post.id)
    before = _tally(db, target)

    assert voting.cast_vote(db, voter=alice, target=target, is_like=True) is VoteOutcome.CREATED
    assert _tally(db, target) == (before[0] + 1, before[1])
    assert voting.cast_vote(db, voter=alice, target=target, is_like=True) is VoteOutcome.CANCELLED
    assert _tally(db, target) == before
    assert voting.get_user_vote(db, alice.id, target) is None


def test_like_then_dislike_switches(db: Session, alice: User, make_post) -> None:
    post = make_post(alice)
    target = VoteTarget.post(post.id)
    voting.cast_vote(db, voter=alice, target=target, is_like=True)
    assert _tally(db, target) == (1, 0)

    assert voting.cast_vote(db, voter=alice, target=target, is_like=False) is VoteOutcome.SWITCHED
    assert _tally(db, target) == (0, 1)
    votes = db.scalars(select(Vote).where(Vote.user_id == alice.id)).all()
    assert len(votes) == 1
    assert votes[0].is_like is False


def test_vote_toggle_sequence(db: Session, alice: User, make_post) -> None:
    post = make_post(alice)
    target = VoteTarget.post(post.id)
    expected = [(True, (1, 0)), (True, (0, 0)), (False, (0, 1)), (True, (1, 0))]
    for is_like, tally in expected:
        voting.cast_vote(db, voter=alice, target=target, is_like=is_like)
        assert _tally(db, target) == tally


def test_post_and_comment_votes_are_independent(
    db: Session, alice: User, bob: User, make_post
) -> None:
    post = make_post(alice)
    comment = comments.create_comment(db, author=bob, post_id=post.id, content="Hi")
    voting.cast_vote(db, voter=bob, target=VoteTarget.post(post.id), is_like=True)
    voting.cast_vote(db, voter=bob, target=VoteTarget.comment(comment.id), is_like=False)

    assert _tally(db, VoteTarget.post(post.id)) == (1, 0)
    assert _tally(db, VoteTarget.comment(comment.id)) == (0, 1)


def test_votes_by_different_users_accumulate(db: Session, alice: User, bob: User, make_post) -> None:
    post = make_post(alice)
    target = VoteTarget.post(post.id)
    voting.cast_vote(db, voter=alice, target=target, is_like=True)
    voting.cast_vote(db, voter=bob, target=target, is_like=True)
    assert _tally(db, target) == (2, 0)


def test_vote_on_missing_target(db: Session, alice: User) -> None:
    with pytest.raises(NotFoundError):
        voting.cast_vote(db, voter=alice, target=VoteTarget.post(77), is_like=True)
    with pytest.raises(NotFoundError):
        voting.cast_vote(db, voter=alice, target=VoteTarget.comment(77), is_like=True)


def test_schema_rejects_duplicate_vote_rows(db: Session, alice: User, make_post) -> None:
    post = make_post(alice)
    db.add(Vote(user_id=alice.id, post_id=post.id, is_like=True))
    db.commit()
    db.add(Vote(user_id=alice.id, post_id=post.id, is_like=False))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_schema_rejects_vote_without_single_target(
    db: Session, alice: User, bob: User, make_post
) -> None:
    post = make_post(alice)
    comment = comments.create_comment(db, author=bob, post_id=post.id, content="Hi")
    db.add(Vote(user_id=alice.id, post_id=post.id, comment_id=comment.id, is_like=True))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_concurrent_first_vote_is_retried(
    db: Session, alice: User, make_post, monkeypatch: pytest.MonkeyPatch
) -> None:
    post = make_post(alice)
    target = VoteTarget.post(post.id)
    real_get = voting.get_user_vote
    calls = {"n": 0}

    def racing_get(session: Session, user_id: int, vote_target: VoteTarget):  # noqa: ANN202
        calls["n"] += 1
        if calls["n"] == 1:
            # Another request commits the same first vote in between.
            session.add(Vote(user_id=user_id, post_id=vote_target.post_id, is_like=True))
            session.commit()
            return None
        return real_get(session, user_id, vote_target)

    monkeypatch.setattr(voting, "get_user_vote", racing_get)

    outcome = voting.cast_vote(db, voter=alice, target=target, is_like=True)

    assert outcome is VoteOutcome.CANCELLED
    assert calls["n"] == 2
    assert _tally(db, target) == (0, 0)
