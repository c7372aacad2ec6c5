from devconnect import create_app, db
from devconnect.auth import create_token


def test_register_returns_public_fields(client):
    resp = client.post(
        "/Auth/register",
        json={"username": "alice", "email": "Alice@Example.com", "password": "secret123"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "User created successfully"
    assert body["user"] == {"username": "alice", "email": "alice@example.com"}


def test_register_validation_errors(client):
    resp = client.post("/Auth/register", json={"username": "al", "email": "nope", "password": "1"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["message"] == "Validation failed"
    paths = {tuple(e["path"]) for e in body["errors"]}
    assert {("username",), ("email",), ("password",)} <= paths


def test_register_duplicates(client, register):
    register("alice")
    resp = client.post(
        "/Auth/register",
        json={"username": "other", "email": "alice@example.com", "password": "secret123"},
    )
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Email already in use"

    resp = client.post(
        "/Auth/register",
        json={"username": "alice", "email": "new@example.com", "password": "secret123"},
    )
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Username already taken"


def test_login_sets_cookie_and_check(app, register):
    register("alice")
    client = app.test_client()
    resp = client.post("/Auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Successfully logged in"
    assert body["user"]["username"] == "alice"
    assert "password_hash" not in body["user"]
    assert "auth-token=" in resp.headers["Set-Cookie"]
    assert "HttpOnly" in resp.headers["Set-Cookie"]

    check = client.get("/Auth/check")
    assert check.status_code == 200
    assert check.get_json()["loggedIn"] is True
    assert check.get_json()["user"]["username"] == "alice"

    out = client.post("/Auth/logout")
    assert out.get_json()["message"] == "Logged out successfully"
    assert client.get("/Auth/check").status_code == 401


def test_logout_without_session(client):
    body = client.post("/Auth/logout").get_json()
    assert body["message"] == "No active session found"
    assert body["clientSideCleanup"] is True


def test_login_failures(client, register):
    register("alice")
    resp = client.post("/Auth/login", json={"email": "bob@example.com", "password": "secret123"})
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Account doesn't exist"

    resp = client.post("/Auth/login", json={"email": "alice@example.com", "password": "wrongpass"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_check_without_token(client):
    resp = client.get("/Auth/check")
    assert resp.status_code == 401
    assert resp.get_json() == {"loggedIn": False}


def test_protected_route_requires_identity(client):
    resp = client.post("/Post/like/whatever")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "User not authenticated"


def test_invalid_token_rejected(client):
    resp = client.get("/Profile/", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid token"


def test_expired_token_rejected(tmp_path):
    app = create_app({
        "TESTING": True,
        "DATABASE": str(tmp_path / "expired.db"),
        "SECRET_KEY": "test-secret",
        "JWT_EXP_SECONDS": -60,
    })
    client = app.test_client()
    client.post(
        "/Auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": "secret123"},
    )
    with app.app_context():
        token = create_token(db.users.find_one("username = ?", ("alice",)))
    resp = client.get("/Profile/", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Token expired"


def test_get_user(client, register):
    alice = register("alice", bio="hello")
    resp = client.get(f"/Auth/user/{alice['id']}")
    assert resp.status_code == 200
    user = resp.get_json()["user"]
    assert user["_id"] == alice["id"]
    assert user["bio"] == "hello"
    assert user["avatar"] == "./assets/avatar.png"
    assert "password_hash" not in user

    assert client.get("/Auth/user/missing").status_code == 404


def test_delete_user_cascades_posts_and_comments(app, client, register, make_post):
    alice = register("alice")
    bob = register("bob")
    post = make_post(alice)
    client.post(
        "/Comment/create",
        json={"post": post["_id"], "content": "nice post"},
        headers=bob["headers"],
    )

    resp = client.delete(f"/Auth/user/{alice['id']}", headers=bob["headers"])
    assert resp.status_code == 403

    resp = client.delete(f"/Auth/user/{alice['id']}", headers=alice["headers"])
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "User deleted successfully"}

    with app.app_context():
        assert db.users.find_by_id(alice["id"]) is None
        assert db.posts.find("author_id = ?", (alice["id"],)) == []
        assert db.comments.find("post_id = ?", (post["_id"],)) == []


def test_following_list(client, register):
    alice = register("alice")
    bob = register("bob")
    client.post(f"/Profile/follow/{bob['id']}", headers=alice["headers"])

    resp = client.get(f"/Auth/following/{alice['id']}", headers=alice["headers"])
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Following users fetched successfully"
    assert [u["_id"] for u in body["following"]] == [bob["id"]]
