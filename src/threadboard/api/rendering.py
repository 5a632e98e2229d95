"""Jinja2 page rendering and redirect helpers shared by the endpoints."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from markupsafe import Markup, escape

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def nl2br(value: Any) -> Markup:
    """Escape ``value`` and turn its newlines into ``<br>`` tags."""
    if value is None:
        return Markup("")
    lines = str(escape(value)).split("\n")
    return Markup("<br>\n".join(lines))


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["nl2br"] = nl2br


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    """Render a template into an HTML response."""
    return templates.TemplateResponse(request, name, context or {}, status_code=status_code)


def see_other(url: str) -> RedirectResponse:
    """303 redirect so the browser follows up with a GET."""
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def feed_url(category: str | None = None, error: str | None = None) -> str:
    """Build ``/posts`` with the optional category filter and error code."""
    params = {key: value for key, value in (("category", category), ("error", error)) if value}
    if not params:
        return "/posts"
    return f"/posts?{urlencode(params)}"
