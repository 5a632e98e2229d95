# src/threadboard/main.py
"""Main entry point for the Threadboard forum."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from threadboard.api import api_router
from threadboard.api.rendering import render, see_other
from threadboard.core.errors import ForumError, InternalError, LoginRequired
from threadboard.core.logging import configure_logging
from threadboard.core.settings import settings
from threadboard.db import session as db_session
from threadboard.services import catalog, identity

logger = logging.getLogger(__name__)


def init_storage() -> None:
    """Create tables, seed categories, purge stale sessions and prepare upload dirs."""
    db_session.create_tables()
    with db_session.SessionLocal() as db:
        catalog.seed_categories(db)
        identity.purge_expired_sessions(db)
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Storage ready (static dir %s)", settings.static_dir)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_storage()
    yield


def _error_page(request: Request, status_code: int, message: str) -> Response:
    return render(
        request,
        "error.html",
        {"status_code": status_code, "message": message},
        status_code=status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors and framework errors onto HTML responses."""

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired) -> Response:
        return see_other("/login")

    @app.exception_handler(ForumError)
    async def forum_error_handler(request: Request, exc: ForumError) -> Response:
        return _error_page(request, exc.status_code, exc.message)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> Response:
        logger.error("Unhandled database error on %s", request.url.path, exc_info=exc)
        return _error_page(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError().message
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        return _error_page(request, status.HTTP_400_BAD_REQUEST, "Bad Request")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _error_page(request, exc.status_code, "Page not found")
        return _error_page(request, exc.status_code, str(exc.detail))


def create_app() -> FastAPI:
    """Build the forum application."""
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.include_router(api_router)
    app.mount(
        "/static",
        StaticFiles(directory=settings.static_dir, check_dir=False),
        name="static",
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
