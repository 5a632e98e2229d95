"""Password hashing and session token helpers."""

from __future__ import annotations

import secrets

from passlib.context import CryptContext

from threadboard.core.settings import settings

pwd_context = CryptContext(schemes=settings.password_schemes, deprecated="auto")

# 16 random bytes, i.e. a 128-bit session identifier.
SESSION_TOKEN_BYTES = 16


def hash_password(plain: str) -> str:
    """Hash a password with a per-password salt for storage."""
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain password against its stored hash.

    Malformed hashes count as a mismatch.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def new_session_token() -> str:
    """Return a fresh URL-safe session token."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)
