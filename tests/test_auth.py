import datetime

import jwt

from conftest import auth


def test_register_returns_token_and_private_profile(client, register):
    user, token = register("alice")
    assert user["username"] == "alice"
    assert user["email"] == "alice@example.com"
    assert "ui-avatars.com" in user["avatar"]
    assert "password" not in user and "passwordHash" not in user
    assert token


def test_register_rejects_duplicates(client, register):
    register("alice")
    res = client.post("/api/auth/register", json={
        "username": "other", "email": "alice@example.com", "password": "secret123",
    })
    assert res.status_code == 409
    assert res.get_json() == {"success": False, "message": "Email already registered"}

    res = client.post("/api/auth/register", json={
        "username": "alice", "email": "new@example.com", "password": "secret123",
    })
    assert res.status_code == 409
    assert res.get_json()["message"] == "Username already taken"


def test_register_validates_fields(client):
    res = client.post("/api/auth/register", json={"username": "al", "email": "nope", "password": "1"})
    assert res.status_code == 400
    body = res.get_json()
    assert body["success"] is False
    assert "username" in body["message"]


def test_login(client, register):
    register("alice")
    res = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert res.status_code == 200
    assert res.get_json()["data"]["token"]

    res = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})
    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid email or password"


def test_profile_requires_bearer_token(client, register):
    _, token = register("alice")
    assert client.get("/api/auth/profile").status_code == 401
    assert client.get("/api/auth/profile", headers={"Authorization": token}).status_code == 401

    res = client.get("/api/auth/profile", headers=auth(token))
    assert res.status_code == 200
    assert res.get_json()["data"]["username"] == "alice"


def test_expired_token_is_rejected(app, client, register):
    user, _ = register("alice")
    expired = jwt.encode(
        {"id": user["id"], "exp": datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(minutes=1)},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    res = client.get("/api/auth/profile", headers=auth(expired))
    assert res.status_code == 401
    assert res.get_json()["message"] == "Token expired. Please login again."


def test_update_profile(client, register):
    register("bob")
    _, token = register("alice")

    res = client.put("/api/auth/profile", json={"username": "bob"}, headers=auth(token))
    assert res.status_code == 409

    res = client.put("/api/auth/profile", json={"username": "alicia", "avatar": "http://a/b.png"}, headers=auth(token))
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["username"] == "alicia"
    assert data["avatar"] == "http://a/b.png"


def test_get_user_is_public_view(client, register):
    bob, _ = register("bob")
    _, token = register("alice")
    res = client.get(f"/api/auth/users/{bob['id']}", headers=auth(token))
    assert res.status_code == 200
    assert "email" not in res.get_json()["data"]
    assert client.get("/api/auth/users/999", headers=auth(token)).status_code == 404


def test_health_and_unknown_route(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json()["message"] == "API is running"

    res = client.get("/api/nowhere")
    assert res.status_code == 404
    assert res.get_json()["success"] is False
