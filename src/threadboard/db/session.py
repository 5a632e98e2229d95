"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from threadboard.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ANN001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs) -> Engine:  # noqa: ANN003
    """Create an engine; SQLite connections get foreign key enforcement."""
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args
        new_engine = create_engine(url, **kwargs)
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
        return new_engine
    return create_engine(url, pool_pre_ping=True, **kwargs)


# Ensure model modules are imported so that metadata is populated when create_all runs.
import threadboard.models  # noqa: E402,F401

engine = build_engine(settings.effective_database_url, echo=settings.sql_debug)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine | None = None) -> None:
    """Create all database tables that do not exist yet."""
    Base.metadata.create_all(bind=bind or engine, checkfirst=True)


def drop_tables(bind: Engine | None = None) -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=bind or engine)
