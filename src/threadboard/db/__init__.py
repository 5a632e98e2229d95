"""Database configuration and utilities."""

from .session import SessionLocal, get_db
from .store import execute, fetch_all, transaction

__all__ = ["get_db", "SessionLocal", "execute", "fetch_all", "transaction"]
