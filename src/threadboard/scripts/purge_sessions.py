# src/threadboard/scripts/purge_sessions.py
"""Delete expired login sessions from the configured database."""
from __future__ import annotations

import argparse
import sys

from threadboard.core.logging import configure_logging
from threadboard.db import session as db_session
from threadboard.services import identity


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete expired login sessions.")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print the number of removed sessions",
    )
    args = parser.parse_args(argv)

    configure_logging()
    with db_session.SessionLocal() as db:
        removed = identity.purge_expired_sessions(db)
    if not args.quiet:
        print(f"Removed {removed} expired session(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
