import pytest

from devconnect import create_app, db
from devconnect.auth import create_token

POST_TITLE = "A title long enough"
POST_CONTENT = "Some post content that is at least thirty characters long."


@pytest.fixture()
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "DATABASE": str(tmp_path / "test.db"),
        "SECRET_KEY": "test-secret",
    })
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def register(app, client):
    """Registers a user through the API and returns its id and auth headers."""

    def _register(username, password="secret123", **extra):
        email = extra.pop("email", f"{username}@example.com")
        resp = client.post(
            "/Auth/register",
            json={"username": username, "email": email, "password": password, **extra},
        )
        assert resp.status_code == 201, resp.get_json()
        with app.app_context():
            user = db.users.find_one("username = ?", (username,))
            token = create_token(user)
        return {
            "id": user["id"],
            "username": username,
            "email": email,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _register


@pytest.fixture()
def make_post(client):
    def _make_post(user, title=POST_TITLE, content=POST_CONTENT):
        resp = client.post(
            "/Post/create",
            json={"title": title, "content": content},
            headers=user["headers"],
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["post"]

    return _make_post
