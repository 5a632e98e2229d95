"""Registration, credential checks and session lifecycle."""

from __future__ import annotations

import logging
import re
from datetime import timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from threadboard.core import security
from threadboard.core.errors import ConflictError, InvalidInputError, UnauthorizedError
from threadboard.core.settings import settings
from threadboard.core.text import char_count, is_blank
from threadboard.db.store import execute, transaction
from threadboard.db.time import utcnow
from threadboard.models import User, UserSession

logger = logging.getLogger(__name__)

__all__ = [
    "validate_registration",
    "register",
    "login",
    "logout",
    "authenticate",
    "purge_expired_sessions",
    "INVALID_CREDENTIALS",
]

USERNAME_MIN, USERNAME_MAX = 3, 20
EMAIL_MIN, EMAIL_MAX = 5, 40
PASSWORD_MIN, PASSWORD_MAX = 8, 20

_USERNAME_RE = re.compile(r"[A-Za-z0-9_-]+")

# One message for unknown email and wrong password alike.
INVALID_CREDENTIALS = "Invalid email or password"


def _has_whitespace(value: str) -> bool:
    return any(ch.isspace() for ch in value)


def validate_registration(email: str, username: str, password: str) -> None:
    """Apply the registration field rules.

    Raises:
        InvalidInputError: naming the first violated rule
    """
    if is_blank(email) or is_blank(username) or is_blank(password):
        raise InvalidInputError(
            "All fields must be filled in and cannot consist only of whitespace"
        )
    if _has_whitespace(username):
        raise InvalidInputError("Username cannot contain spaces or line breaks", field="username")
    if _has_whitespace(email):
        raise InvalidInputError("Email cannot contain spaces or line breaks", field="email")
    if not PASSWORD_MIN <= char_count(password) <= PASSWORD_MAX:
        raise InvalidInputError(
            f"Password must be between {PASSWORD_MIN} and {PASSWORD_MAX} characters",
            field="password",
        )
    if not USERNAME_MIN <= char_count(username) <= USERNAME_MAX:
        raise InvalidInputError(
            f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters",
            field="username",
        )
    if not EMAIL_MIN <= char_count(email) <= EMAIL_MAX:
        raise InvalidInputError(
            f"Email must be between {EMAIL_MIN} and {EMAIL_MAX} characters",
            field="email",
        )
    if "@" not in email or "." not in email:
        raise InvalidInputError("Enter a valid email address", field="email")
    if not _USERNAME_RE.fullmatch(username):
        raise InvalidInputError(
            "Username can only contain letters, digits, underscore, and hyphen.",
            field="username",
        )


def _conflict_from_integrity_error(exc: IntegrityError) -> ConflictError:
    message = str(exc.orig).lower()
    if "username" in message:
        return ConflictError("Username is already taken", code="username_taken")
    return ConflictError("Email is already registered", code="email_taken")


def register(db: Session, *, email: str, username: str, password: str) -> User:
    """Create a new account.

    Raises:
        InvalidInputError: if a field rule is violated
        ConflictError: if the email or username is already registered
    """
    validate_registration(email, username, password)

    if db.scalars(select(User.id).where(User.username == username)).first() is not None:
        raise ConflictError("Username is already taken", code="username_taken")
    if db.scalars(select(User.id).where(User.email == email)).first() is not None:
        raise ConflictError("Email is already registered", code="email_taken")

    user = User(email=email, username=username, password_hash=security.hash_password(password))
    try:
        with transaction(db):
            db.add(user)
    except IntegrityError as exc:
        # Lost a race against a concurrent registration.
        raise _conflict_from_integrity_error(exc) from exc

    logger.info("Registered user %d", user.id)
    return user


def login(db: Session, *, email: str, password: str) -> UserSession:
    """Check credentials and open a new session.

    Returns:
        The persisted session; its ``id`` is the cookie value

    Raises:
        InvalidInputError: on empty fields or an over-long password
        UnauthorizedError: on unknown email or wrong password
    """
    if is_blank(email) or is_blank(password):
        raise InvalidInputError("Email and password cannot be empty or only whitespace")
    if char_count(password) > PASSWORD_MAX:
        raise InvalidInputError(
            f"Password must be between {PASSWORD_MIN} and {PASSWORD_MAX} characters",
            field="password",
        )

    user = db.scalars(select(User).where(User.email == email)).first()
    if user is None:
        # Spend the same hashing time as a real check.
        security.pwd_context.dummy_verify()
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not security.verify_password(password, user.password_hash):
        raise UnauthorizedError(INVALID_CREDENTIALS)

    now = utcnow()
    session = UserSession(
        id=security.new_session_token(),
        user_id=user.id,
        expiry=now + timedelta(hours=settings.session_ttl_hours),
    )
    with transaction(db):
        db.execute(
            delete(UserSession).where(UserSession.user_id == user.id, UserSession.expiry <= now)
        )
        db.add(session)

    logger.info("User %d logged in", user.id)
    return session


def logout(db: Session, token: str | None) -> None:
    """Delete the session row for ``token``. Unknown or missing tokens are ignored."""
    if not token:
        return
    with transaction(db):
        result = execute(db, delete(UserSession).where(UserSession.id == token))
    if result.rows_affected:
        logger.info("Session closed")


def authenticate(db: Session, token: str | None) -> User | None:
    """Return the user owning a live session for ``token``, if any."""
    if not token:
        return None
    stmt = (
        select(User)
        .join(UserSession, UserSession.user_id == User.id)
        .where(UserSession.id == token, UserSession.expiry > utcnow())
    )
    return db.scalars(stmt).first()


def purge_expired_sessions(db: Session) -> int:
    """Delete every expired session and return how many rows went away."""
    with transaction(db):
        result = execute(db, delete(UserSession).where(UserSession.expiry <= utcnow()))
    if result.rows_affected:
        logger.info("Purged %d expired sessions", result.rows_affected)
    return result.rows_affected
