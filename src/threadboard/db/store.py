"""Transactional helpers layered over a SQLAlchemy session.

Every multi-row mutation in the forum runs inside :func:`transaction` so a
post never exists without its categories and a deleted post never leaves
orphaned comments or votes behind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Executable, Row, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from threadboard.core.errors import ForumError, InternalError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a write statement."""

    rows_affected: int
    last_insert_id: int | None


def _as_statement(statement: str | Executable) -> Executable:
    return text(statement) if isinstance(statement, str) else statement


def execute(
    db: Session,
    statement: str | Executable,
    params: Mapping[str, Any] | None = None,
) -> ExecResult:
    """Run a write statement and report affected rows and the last inserted id."""
    stmt = _as_statement(statement)
    result = db.execute(stmt, params) if params else db.execute(stmt)
    last_id = getattr(result, "lastrowid", None)
    return ExecResult(rows_affected=result.rowcount, last_insert_id=last_id)


def fetch_all(
    db: Session,
    statement: str | Executable,
    params: Mapping[str, Any] | None = None,
) -> Sequence[Row[Any]]:
    """Run a read statement and return every row."""
    stmt = _as_statement(statement)
    return (db.execute(stmt, params) if params else db.execute(stmt)).all()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit the work done inside the block, roll back on any exception.

    Domain errors and integrity violations propagate unchanged after the
    rollback so callers can interpret them. Any other database failure is
    logged and re-raised as :class:`InternalError`.
    """
    try:
        yield db
        db.commit()
    except (ForumError, IntegrityError):
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Transaction rolled back: %s", exc, exc_info=True)
        raise InternalError() from exc
    except BaseException:
        db.rollback()
        raise
