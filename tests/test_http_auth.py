from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from threadboard.core.settings import settings
from threadboard.models import User, UserSession


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_redirects_to_feed(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 303
    assert response.headers["location"] == "/posts"


def test_unknown_path_renders_404_page(client: TestClient) -> None:
    response = client.get("/no/such/page")
    assert response.status_code == 404
    assert "text/html" in response.headers["content-type"]
    assert "Page not found" in response.text


def test_register_then_login(client: TestClient, db: Session) -> None:
    response = client.post(
        "/register",
        data={"username": "alice", "email": "alice@x.io", "password": "passw0rd"},
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert db.scalars(select(User).where(User.username == "alice")).one()

    response = client.post("/login", data={"email": "alice@x.io", "password": "passw0rd"})
    assert response.status_code == 303
    cookie = response.headers["set-cookie"]
    assert cookie.startswith(f"{settings.session_cookie_name}=")
    assert "Path=/" in cookie
    assert "SameSite=lax" in cookie or "SameSite=Lax" in cookie
    assert "HttpOnly" in cookie
    assert "expires=" in cookie.lower()

    feed = client.get("/posts")
    assert feed.status_code == 200
    assert "Signed in as" in feed.text


def test_register_rejects_invalid_input(client: TestClient, db: Session) -> None:
    response = client.post(
        "/register",
        data={"username": "a b", "email": "alice@x.io", "password": "passw0rd"},
    )
    assert response.status_code == 400
    assert "Username cannot contain spaces" in response.text
    # Entered values are kept, the password is not echoed.
    assert 'value="alice@x.io"' in response.text
    assert "passw0rd" not in response.text
    assert db.scalars(select(User)).first() is None


def test_register_duplicate_is_409(client: TestClient, alice: User) -> None:
    response = client.post(
        "/register",
        data={"username": "alice2", "email": "alice@x.io", "password": "passw0rd"},
    )
    assert response.status_code == 409
    assert "Email is already registered" in response.text


def test_login_failures(client: TestClient, alice: User) -> None:
    wrong = client.post("/login", data={"email": "alice@x.io", "password": "badpass1"})
    unknown = client.post("/login", data={"email": "who@x.io", "password": "badpass1"})
    empty = client.post("/login", data={"email": "", "password": ""})

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert "Invalid email or password" in wrong.text
    assert "Invalid email or password" in unknown.text
    assert empty.status_code == 400
    assert "set-cookie" not in wrong.headers


def test_logged_in_user_skips_auth_pages(alice_client: TestClient) -> None:
    for path in ("/login", "/register"):
        response = alice_client.get(path)
        assert response.status_code == 303
        assert response.headers["location"] == "/posts"


def test_auth_pages_render_for_visitors(client: TestClient) -> None:
    assert client.get("/login").status_code == 200
    assert client.get("/register").status_code == 200


def test_logout_clears_session(alice_client: TestClient, db: Session, alice: User) -> None:
    token = alice_client.cookies.get(settings.session_cookie_name)
    assert token

    response = alice_client.get("/logout")
    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert db.get(UserSession, token) is None
    assert alice_client.cookies.get(settings.session_cookie_name) is None

    # A second logout without a session is still fine.
    again = alice_client.post("/logout")
    assert again.status_code == 303


def test_protected_pages_redirect_to_login(client: TestClient) -> None:
    for method, path in [
        ("GET", "/post/create"),
        ("POST", "/post/create"),
        ("GET", "/edit-post?id=1"),
        ("POST", "/comment"),
        ("POST", "/like"),
    ]:
        response = client.request(method, path)
        assert response.status_code == 303, path
        assert response.headers["location"] == "/login"


def test_unknown_cookie_counts_as_anonymous(client: TestClient, alice: User) -> None:
    client.cookies.set(settings.session_cookie_name, "forged-token")
    response = client.get("/post/create")
    assert response.status_code == 303
    assert response.headers["location"] == "/login"
