"""Text helpers shared by the write paths and the feed."""

from __future__ import annotations

from datetime import datetime

TITLE_WRAP_WORDS = 20
CONTENT_WRAP_WORDS = 30

DISPLAY_DATE_FORMAT = "%b %d, %Y at %H:%M"


def wrap_words(text: str, word_limit: int) -> str:
    """Insert a newline after every ``word_limit``-th whitespace separated token.

    Text with ``word_limit`` tokens or fewer is returned untouched. Longer text
    is rebuilt from its tokens, so runs of whitespace collapse to one space.
    """
    words = text.split()
    if len(words) <= word_limit:
        return text
    parts: list[str] = []
    for index, word in enumerate(words, start=1):
        parts.append(word)
        parts.append("\n" if index % word_limit == 0 else " ")
    return "".join(parts).strip()


def char_count(text: str) -> int:
    """Length in code points."""
    return len(text)


def is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


def format_timestamp(value: datetime) -> str:
    """Format a stored timestamp the way the feed shows it, e.g. ``Oct 17, 2026 at 09:30``."""
    return value.strftime(DISPLAY_DATE_FORMAT)
