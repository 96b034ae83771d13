import pytest

from conftest import auth, received


@pytest.fixture
def tokens(register):
    return {name: register(name)[1] for name in ("host", "pl1", "pl2")}


def _create(client, token, **body):
    res = client.post("/api/rooms", json=body, headers=auth(token))
    assert res.status_code == 201, res.get_json()
    return res.get_json()["data"]


def test_room_routes_require_auth(client):
    assert client.get("/api/rooms").status_code == 401
    assert client.post("/api/rooms", json={}).status_code == 401


def test_create_and_fetch_room(client, tokens, make_quiz):
    quiz_id = make_quiz(2)
    room = _create(client, tokens["host"], quizId=quiz_id, maxPlayers=4)
    assert len(room["code"]) == 6
    assert room["maxPlayers"] == 4
    assert room["quiz"]["id"] == quiz_id
    assert room["host"]["username"] == "host"

    res = client.get(f"/api/rooms/{room['id']}", headers=auth(tokens["pl1"]))
    data = res.get_json()["data"]
    assert [row["user"]["username"] for row in data["leaderboard"]] == ["host"]

    assert client.get("/api/rooms/999", headers=auth(tokens["pl1"])).status_code == 404


def test_join_and_list(client, tokens):
    room = _create(client, tokens["host"], maxPlayers=2)

    res = client.post("/api/rooms/join", json={"code": room["code"].lower()}, headers=auth(tokens["pl1"]))
    assert res.status_code == 200
    assert len(res.get_json()["data"]["players"]) == 2

    res = client.post("/api/rooms/join", json={"code": room["code"]}, headers=auth(tokens["pl2"]))
    assert res.status_code == 409
    assert res.get_json()["message"] == "Room is full"

    res = client.post("/api/rooms/join", json={"code": "ZZZZZZ"}, headers=auth(tokens["pl2"]))
    assert res.status_code == 404

    listed = client.get(f"/api/rooms?code={room['code']}", headers=auth(tokens["pl2"])).get_json()["data"]
    assert [r["id"] for r in listed] == [room["id"]]
    assert client.get("/api/rooms?status=playing", headers=auth(tokens["pl2"])).get_json()["data"] == []


def test_assign_quiz_is_host_only_and_broadcast(client, tokens, make_quiz, socket_client):
    quiz_id = make_quiz(1)
    room = _create(client, tokens["host"])
    watcher = socket_client(tokens["host"])
    watcher.emit("join-room", {"roomCode": room["code"]}, callback=True)
    watcher.get_received()

    res = client.put(f"/api/rooms/{room['id']}/assign-quiz", json={"quizId": quiz_id}, headers=auth(tokens["pl1"]))
    assert res.status_code == 403

    res = client.put(f"/api/rooms/{room['id']}/assign-quiz", json={"quizId": quiz_id}, headers=auth(tokens["host"]))
    assert res.status_code == 200
    assert res.get_json()["data"]["quizId"] == quiz_id
    assigned = received(watcher, "quiz-assigned")
    assert assigned and assigned[0]["room"]["quizId"] == quiz_id


def test_leave_passes_host_and_deletes_empty_room(client, tokens):
    room = _create(client, tokens["host"])
    client.post("/api/rooms/join", json={"code": room["code"]}, headers=auth(tokens["pl1"]))

    res = client.delete(f"/api/rooms/{room['id']}/leave", headers=auth(tokens["host"]))
    assert res.status_code == 200
    data = client.get(f"/api/rooms/{room['id']}", headers=auth(tokens["pl1"])).get_json()["data"]
    assert data["host"]["username"] == "pl1"

    res = client.delete(f"/api/rooms/{room['id']}/leave", headers=auth(tokens["host"]))
    assert res.status_code == 409

    res = client.delete(f"/api/rooms/{room['id']}/leave", headers=auth(tokens["pl1"]))
    assert "Room deleted" in res.get_json()["message"]
    assert client.get(f"/api/rooms/{room['id']}", headers=auth(tokens["pl1"])).status_code == 404


def test_delete_room_host_only(client, tokens):
    room = _create(client, tokens["host"])
    assert client.delete(f"/api/rooms/{room['id']}", headers=auth(tokens["pl1"])).status_code == 403
    assert client.delete(f"/api/rooms/{room['id']}", headers=auth(tokens["host"])).status_code == 200
    assert client.get(f"/api/rooms/{room['id']}/leaderboard", headers=auth(tokens["host"])).get_json()["data"] == []


def test_validation_errors(client, tokens):
    res = client.post("/api/rooms", json={"maxPlayers": 0}, headers=auth(tokens["host"]))
    assert res.status_code == 400
    res = client.post("/api/rooms/join", json={}, headers=auth(tokens["host"]))
    assert res.status_code == 400
