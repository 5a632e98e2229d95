# src/threadboard/api/endpoints/auth.py
"""Registration, login and logout pages."""

from __future__ import annotations

from datetime import UTC
from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import Response

from threadboard.api.deps import OptionalUserDep, SessionDep, SessionTokenDep
from threadboard.api.rendering import render, see_other
from threadboard.core.errors import ConflictError, InvalidInputError, UnauthorizedError
from threadboard.core.settings import settings
from threadboard.models import UserSession
from threadboard.schemas.forms import LoginForm, RegisterForm
from threadboard.services import identity

router = APIRouter(tags=["authentication"])


def _set_session_cookie(response: Response, session: UserSession) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.id,
        expires=session.expiry.replace(tzinfo=UTC),
        path="/",
        samesite="lax",
        httponly=settings.session_cookie_httponly,
        secure=settings.session_cookie_secure,
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        samesite="lax",
        httponly=settings.session_cookie_httponly,
        secure=settings.session_cookie_secure,
    )


@router.get("/register")
async def register_page(request: Request, user: OptionalUserDep) -> Response:
    """Show the registration form; logged in visitors go to the feed."""
    if user is not None:
        return see_other("/posts")
    return render(request, "register.html", {"form": RegisterForm(), "error": ""})


@router.post("/register")
async def register(
    request: Request,
    db: SessionDep,
    username: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    """Create an account and send the visitor to the login page."""
    form = RegisterForm(username=username, email=email, password=password)
    try:
        identity.register(db, email=form.email, username=form.username, password=form.password)
    except (InvalidInputError, ConflictError) as exc:
        return render(
            request,
            "register.html",
            {"form": form.model_copy(update={"password": ""}), "error": exc.message},
            status_code=exc.status_code,
        )
    return see_other("/login")


@router.get("/login")
async def login_page(request: Request, user: OptionalUserDep) -> Response:
    """Show the login form; logged in visitors go to the feed."""
    if user is not None:
        return see_other("/posts")
    return render(request, "login.html", {"form": LoginForm(), "error": ""})


@router.post("/login")
async def login(
    request: Request,
    db: SessionDep,
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    """Check credentials, open a session and set the session cookie."""
    form = LoginForm(email=email, password=password)
    try:
        session = identity.login(db, email=form.email, password=form.password)
    except (InvalidInputError, UnauthorizedError) as exc:
        return render(
            request,
            "login.html",
            {"form": form.model_copy(update={"password": ""}), "error": exc.message},
            status_code=exc.status_code,
        )
    response = see_other("/posts")
    _set_session_cookie(response, session)
    return response


@router.api_route("/logout", methods=["GET", "POST"])
async def logout(db: SessionDep, token: SessionTokenDep) -> Response:
    """Close the current session, if any, and expire the cookie."""
    identity.logout(db, token)
    response = see_other("/login")
    _clear_session_cookie(response)
    return response
