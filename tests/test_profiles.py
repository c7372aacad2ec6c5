from devconnect import db


def get_user(client, user):
    return client.get(f"/Auth/user/{user['id']}").get_json()["user"]


def test_follow_then_unfollow(client, register):
    alice = register("alice")
    bob = register("bob")

    resp = client.post(f"/Profile/follow/{bob['id']}", headers=alice["headers"])
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "User followed successfully"
    assert body["user"]["followers"] == [alice["id"]]
    assert get_user(client, alice)["following"] == [bob["id"]]

    resp = client.post(f"/Profile/follow/{bob['id']}", headers=alice["headers"])
    body = resp.get_json()
    assert body["message"] == "User unfollowed successfully"
    assert body["user"]["followers"] == []
    assert get_user(client, alice)["following"] == []


def test_follow_is_symmetric_with_several_users(client, register):
    alice = register("alice")
    bob = register("bob")
    carol = register("carol")

    client.post(f"/Profile/follow/{carol['id']}", headers=alice["headers"])
    client.post(f"/Profile/follow/{carol['id']}", headers=bob["headers"])
    client.post(f"/Profile/follow/{bob['id']}", headers=alice["headers"])

    assert sorted(get_user(client, carol)["followers"]) == sorted([alice["id"], bob["id"]])
    assert sorted(get_user(client, alice)["following"]) == sorted([carol["id"], bob["id"]])
    assert get_user(client, bob)["followers"] == [alice["id"]]
    assert get_user(client, bob)["following"] == [carol["id"]]


def test_follow_errors(client, register):
    alice = register("alice")
    bob = register("bob")

    resp = client.post(f"/Profile/follow/{alice['id']}", headers=alice["headers"])
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Cannot follow yourself"

    resp = client.post("/Profile/follow/missing", headers=alice["headers"])
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "User not found"

    client.delete(f"/Auth/user/{alice['id']}", headers=alice["headers"])
    resp = client.post(f"/Profile/follow/{bob['id']}", headers=alice["headers"])
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Authenticated user not found"
    assert get_user(client, bob)["followers"] == []


def test_own_profile_populates_posts(client, register, make_post):
    alice = register("alice")
    post = make_post(alice)

    resp = client.get("/Profile/", headers=alice["headers"])
    assert resp.status_code == 200
    profile = resp.get_json()
    assert profile["username"] == "alice"
    assert [p["_id"] for p in profile["posts"]] == [post["_id"]]
    assert profile["posts"][0]["author_id"]["username"] == "alice"


def test_profile_by_id(client, register):
    alice = register("alice")
    bob = register("bob")
    resp = client.get(f"/Profile/{bob['id']}", headers=alice["headers"])
    assert resp.status_code == 200
    assert resp.get_json()["username"] == "bob"
    assert client.get("/Profile/missing", headers=alice["headers"]).status_code == 404


def test_update_profile(client, register):
    alice = register("alice")
    bob = register("bob")

    resp = client.patch(f"/Profile/update/{bob['id']}", json={"bio": "hacked"}, headers=alice["headers"])
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Forbidden: You cannot edit another user's profile"

    resp = client.patch(f"/Profile/update/{alice['id']}", json={"bio": "x" * 501}, headers=alice["headers"])
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid input"

    resp = client.patch(f"/Profile/update/{alice['id']}", json={"username": "bob"}, headers=alice["headers"])
    assert resp.status_code == 409

    resp = client.patch(
        f"/Profile/update/{alice['id']}",
        json={"bio": "new bio", "username": "alice2"},
        headers=alice["headers"],
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Profile updated successfully"
    assert body["user"]["bio"] == "new bio"
    assert body["user"]["username"] == "alice2"


def test_follow_rolls_back_when_reciprocal_write_fails(app, client, register, monkeypatch):
    alice = register("alice")
    bob = register("bob")

    real_save = db.users.save
    calls = []

    def save_then_fail(doc):
        calls.append(doc["id"])
        if len(calls) == 2:
            raise RuntimeError("connection lost")
        return real_save(doc)

    monkeypatch.setattr(db.users, "save", save_then_fail)
    resp = client.post(f"/Profile/follow/{bob['id']}", headers=alice["headers"])
    assert resp.status_code == 500
    assert calls == [bob["id"], alice["id"]]
    monkeypatch.undo()

    assert get_user(client, bob)["followers"] == []
    assert get_user(client, alice)["following"] == []
