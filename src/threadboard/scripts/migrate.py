# src/threadboard/scripts/migrate.py
"""Bring the configured database up to the latest Alembic revision."""
from __future__ import annotations

import argparse
import os

from alembic import command
from alembic.config import Config

from threadboard.core.settings import settings

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def build_config(database_url: str | None = None) -> Config:
    """Alembic config pointing at the project's migrations folder."""
    cfg = Config(os.path.join(MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", database_url or settings.effective_database_url)
    return cfg


def run_upgrade_head(database_url: str | None = None) -> None:
    command.upgrade(build_config(database_url), "head")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Apply pending database migrations.")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override DATABASE_URL for this run",
    )
    args = parser.parse_args(argv)
    run_upgrade_head(args.database_url)


if __name__ == "__main__":
    main()
