"""Domain errors raised by the forum services.

Services raise these and never build HTTP responses themselves; the API
layer maps each kind onto a status code (see ``status_code``).
"""

from __future__ import annotations

from typing import Any


class ForumError(RuntimeError):
    """Base exception for all forum domain failures.

    Attributes:
        message: Human readable reason, safe to show to the client
        code: Machine readable error code
        status_code: HTTP status the API layer answers with
        details: Extra context, e.g. the offending field
    """

    status_code = 500
    default_code = "internal"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}


class InvalidInputError(ForumError):
    """A field-level rule was violated (length, charset, duplicate category, image)."""

    status_code = 400
    default_code = "invalid_input"

    def __init__(self, message: str, field: str | None = None, code: str | None = None) -> None:
        super().__init__(message, code=code, details={"field": field})
        self.field = field


class UnauthorizedError(ForumError):
    """Credentials were rejected."""

    status_code = 401
    default_code = "unauthorized"


class LoginRequired(UnauthorizedError):
    """No live session was presented to an endpoint that needs one."""

    default_code = "login_required"


class ForbiddenError(ForumError):
    """The caller is authenticated but is not the author of record."""

    status_code = 403
    default_code = "forbidden"


class NotFoundError(ForumError):
    """The referenced post or comment does not exist."""

    status_code = 404
    default_code = "not_found"


class ConflictError(ForumError):
    """A uniqueness constraint (email, username) was violated."""

    status_code = 409
    default_code = "conflict"


class InternalError(ForumError):
    """Unexpected store or filesystem failure. The message is always generic."""

    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(message)
