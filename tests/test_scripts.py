from datetime import timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect, select
from sqlalchemy.orm import Session

from threadboard.db.session import Base
from threadboard.db.time import utcnow
from threadboard.main import init_storage
from threadboard.models import Category, User, UserSession
from threadboard.scripts import migrate, purge_sessions


def test_purge_sessions_command(
    db: Session, alice: User, capsys: pytest.CaptureFixture[str]
) -> None:
    db.add(UserSession(id="expired", user_id=alice.id, expiry=utcnow() - timedelta(hours=2)))
    db.add(UserSession(id="live", user_id=alice.id, expiry=utcnow() + timedelta(hours=2)))
    db.commit()

    assert purge_sessions.main([]) == 0

    assert "Removed 1 expired session(s)" in capsys.readouterr().out
    assert set(db.scalars(select(UserSession.id)).all()) == {"live"}


def test_init_storage_is_idempotent(db: Session, alice: User, upload_dir: Path) -> None:
    db.add(UserSession(id="expired", user_id=alice.id, expiry=utcnow() - timedelta(hours=2)))
    db.commit()

    init_storage()
    init_storage()
    db.expire_all()

    assert upload_dir.is_dir()
    assert len(db.scalars(select(Category)).all()) == 6
    assert db.scalars(select(UserSession.id)).all() == []


def test_migrations_match_models(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    migrate.run_upgrade_head(url)

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names()) - {"alembic_version"}
        assert tables == set(Base.metadata.tables)
        for table in Base.metadata.sorted_tables:
            migrated = {column["name"] for column in inspector.get_columns(table.name)}
            assert migrated == {column.name for column in table.columns}, table.name
        vote_indexes = {index["name"] for index in inspector.get_indexes("votes")}
        assert {"uq_votes_user_post", "uq_votes_user_comment"} <= vote_indexes
        with Session(engine) as session:
            assert len(session.scalars(select(Category)).all()) == 6
    finally:
        engine.dispose()
