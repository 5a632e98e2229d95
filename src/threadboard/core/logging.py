"""Logging setup for the forum process."""

from __future__ import annotations

import logging

from threadboard.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the package logger.

    Calling this more than once replaces the level but never stacks handlers.
    """
    logger = logging.getLogger("threadboard")
    logger.setLevel((level or settings.log_level).upper())
    if not any(getattr(h, "_threadboard", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._threadboard = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
