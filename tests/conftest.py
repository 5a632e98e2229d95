# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from contextlib import ExitStack
from pathlib import Path

os.environ.setdefault("USE_TEST_DATABASE", "true")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite://")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from threadboard.core.settings import settings
from threadboard.db import session as db_session
from threadboard.db.session import build_engine, create_tables, drop_tables, get_db
from threadboard.main import create_app
from threadboard.models import User
from threadboard.schemas.forms import PostForm
from threadboard.services import catalog, identity, posts

DEFAULT_PASSWORD = "passw0rd"

# Smallest valid images of each accepted type.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64
GIF_BYTES = b"GIF89a" + b"\x00" * 64


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine, monkeypatch: pytest.MonkeyPatch) -> sessionmaker[Session]:
    """Point the application's engine and session factory at the test database."""
    factory = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", factory)
    return factory


@pytest.fixture()
def db(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    catalog.seed_categories(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def static_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    directory = tmp_path / "static"
    monkeypatch.setattr(settings, "static_dir", directory)
    return directory


@pytest.fixture()
def upload_dir(static_dir: Path) -> Path:
    return static_dir / settings.upload_subdir


@pytest.fixture()
def app(db: Session, static_dir: Path) -> Iterator[FastAPI]:
    application = create_app()

    def _get_session_override() -> Generator[Session, None, None]:
        yield db

    application.dependency_overrides[get_db] = _get_session_override
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest.fixture()
def client_factory(app: FastAPI) -> Iterator[Callable[[], TestClient]]:
    """Build independent clients, each with its own cookie jar."""
    with ExitStack() as stack:

        def _make() -> TestClient:
            return stack.enter_context(TestClient(app, follow_redirects=False))

        yield _make


@pytest.fixture()
def client(client_factory: Callable[[], TestClient]) -> TestClient:
    return client_factory()


@pytest.fixture()
def make_user(db: Session) -> Callable[..., User]:
    def _make(username: str, email: str | None = None, password: str = DEFAULT_PASSWORD) -> User:
        return identity.register(
            db,
            email=email or f"{username}@x.io",
            username=username,
            password=password,
        )

    return _make


@pytest.fixture()
def alice(make_user: Callable[..., User]) -> User:
    return make_user("alice")


@pytest.fixture()
def bob(make_user: Callable[..., User]) -> User:
    return make_user("bob")


def login(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> None:
    response = client.post("/login", data={"email": email, "password": password})
    assert response.status_code == 303, response.text
    assert response.headers["location"] == "/posts"


@pytest.fixture()
def login_as(client_factory: Callable[[], TestClient]) -> Callable[[User], TestClient]:
    def _login(user: User) -> TestClient:
        logged_in = client_factory()
        login(logged_in, user.email)
        return logged_in

    return _login


@pytest.fixture()
def alice_client(login_as: Callable[[User], TestClient], alice: User) -> TestClient:
    return login_as(alice)


@pytest.fixture()
def bob_client(login_as: Callable[[User], TestClient], bob: User) -> TestClient:
    return login_as(bob)


@pytest.fixture()
def category_ids(db: Session) -> dict[str, int]:
    return {category.name: category.id for category in catalog.list_categories(db)}


@pytest.fixture()
def make_post(db: Session) -> Callable[..., object]:
    def _make(author: User, title: str = "Hello", content: str = "World", categories=()):  # noqa: ANN001, ANN202
        form = PostForm(title=title, content=content, category_ids=[str(c) for c in categories])
        return posts.create_post(db, author=author, form=form)

    return _make
