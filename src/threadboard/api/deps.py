"""Shared API dependencies for authentication and request parsing."""

from __future__ import annotations

from typing import Annotated, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from threadboard.core.errors import InvalidInputError, LoginRequired
from threadboard.core.settings import settings
from threadboard.db.session import get_db
from threadboard.models import User
from threadboard.services import identity

ModelT = TypeVar("ModelT", bound=BaseModel)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_session_token(request: Request) -> str | None:
    """Return the session token carried by the request cookie, if any."""
    return request.cookies.get(settings.session_cookie_name) or None


SessionTokenDep = Annotated[str | None, Depends(get_session_token)]


def get_optional_user(db: SessionDep, token: SessionTokenDep) -> User | None:
    """Resolve the caller from its session cookie; anonymous callers yield None."""
    return identity.authenticate(db, token)


OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_current_user(user: OptionalUserDep) -> User:
    """Require a live session.

    Raises:
        LoginRequired: if the caller has no live session
    """
    if user is None:
        raise LoginRequired("Login required")
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def parse_int(raw: str | None, what: str) -> int:
    """Parse a numeric id from a form or query value.

    Raises:
        InvalidInputError: if ``raw`` is missing or not an integer
    """
    try:
        return int((raw or "").strip())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid {what}") from exc


async def read_json_body(request: Request, model: type[ModelT]) -> ModelT:
    """Decode and validate a JSON request body.

    Raises:
        InvalidInputError: on malformed JSON or a body that does not fit ``model``
    """
    try:
        return model.model_validate_json(await request.body())
    except ValidationError as exc:
        raise InvalidInputError("Invalid request body") from exc
