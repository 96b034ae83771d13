import re

import pytest
from werkzeug.security import generate_password_hash

from extensions import db
from livequiz.errors import AuthorizationError, ConflictError, NotFoundError
from livequiz.models import Leaderboard, Room, User
from livequiz.services import room_service


def _user(name):
    user = User(username=name, email=f"{name}@example.com", password_hash=generate_password_hash("x" * 8))
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def users(ctx):
    return [_user(name) for name in ("host", "p1", "p2")]


def test_generate_room_code_format():
    for _ in range(50):
        assert re.fullmatch(r"[A-Z0-9]{6}", room_service.generate_room_code())


def test_create_room_adds_host_with_zero_score(users):
    host = users[0]
    room = room_service.create_room(host)
    assert room.players == [host.id]
    assert room.status == "waiting"
    assert room.current_question == 0
    assert room.max_players == 10
    rows = room_service.get_leaderboard(room.id)
    assert [(r.user_id, r.score) for r in rows] == [(host.id, 0)]


def test_create_room_with_unknown_quiz(users):
    with pytest.raises(NotFoundError):
        room_service.create_room(users[0], quiz_id=999)


def test_create_room_retries_code_collisions(users, monkeypatch):
    first = room_service.create_room(users[0])
    codes = iter([first.code, first.code, "ZZZ999"])
    monkeypatch.setattr(room_service, "generate_room_code", lambda: next(codes))
    second = room_service.create_room(users[1])
    assert second.code == "ZZZ999"


def test_create_room_retries_when_unique_index_rejects_code(users, monkeypatch):
    host, p1, _ = users
    first = room_service.create_room(host)
    first_code = first.code
    codes = iter([first_code, "NEW001"])
    monkeypatch.setattr(room_service, "generate_room_code", lambda: next(codes))
    # a concurrent creator grabbed the code between the check and the insert
    monkeypatch.setattr(room_service, "code_in_use", lambda code: False)

    second = room_service.create_room(p1)
    assert second.code == "NEW001"
    assert Room.query.count() == 2
    rows = Leaderboard.query.order_by(Leaderboard.id).all()
    assert sorted((r.room_id, r.user_id) for r in rows) == sorted([(first.id, host.id), (second.id, p1.id)])


def test_create_room_gives_up_after_max_attempts(app, users, monkeypatch):
    first = room_service.create_room(users[0])
    app.config["ROOM_CODE_MAX_ATTEMPTS"] = 3
    monkeypatch.setattr(room_service, "generate_room_code", lambda: first.code)
    with pytest.raises(ConflictError):
        room_service.create_room(users[1])


def test_join_room_rules(users):
    host, p1, p2 = users
    room = room_service.create_room(host, max_players=2)

    joined = room_service.join_room(p1.id, room.code.lower())
    assert joined.players == [host.id, p1.id]
    assert Leaderboard.query.filter_by(room_id=room.id, user_id=p1.id).count() == 1

    with pytest.raises(ConflictError, match="already joined"):
        room_service.join_room(p1.id, room.code)
    with pytest.raises(ConflictError, match="Room is full"):
        room_service.join_room(p2.id, room.code)
    with pytest.raises(NotFoundError, match="Please check the room code"):
        room_service.join_room(p2.id, "NOPE00")


def test_join_rejected_once_game_started(users, make_quiz):
    host, p1, _ = users
    room = room_service.create_room(host, quiz_id=make_quiz(2))
    room_service.start_game(room.code, host.id)
    with pytest.raises(ConflictError, match="Game is already playing"):
        room_service.join_room(p1.id, room.code)


def test_leave_reassigns_host_then_deletes_empty_room(users):
    host, p1, _ = users
    room = room_service.create_room(host)
    room_service.join_room(p1.id, room.code)

    result = room_service.leave_room(room, host.id)
    assert not result.deleted
    assert result.host_id == p1.id
    assert result.players == [p1.id]
    assert room.host_id == p1.id

    room_id = room.id
    result = room_service.leave_room(room, p1.id)
    assert result.deleted
    assert db.session.get(Room, room_id) is None
    assert Leaderboard.query.filter_by(room_id=room_id).count() == 0


def test_leave_room_not_a_member(users):
    host, p1, _ = users
    room = room_service.create_room(host)
    with pytest.raises(ConflictError):
        room_service.leave_room(room, p1.id)


def test_host_only_operations(users, make_quiz):
    host, p1, _ = users
    quiz_id = make_quiz(1)
    room = room_service.create_room(host)
    room_service.join_room(p1.id, room.code)

    with pytest.raises(AuthorizationError):
        room_service.assign_quiz(room, p1.id, quiz_id)
    room_service.assign_quiz(room, host.id, quiz_id)
    assert room.quiz_id == quiz_id

    with pytest.raises(AuthorizationError):
        room_service.start_game(room.code, p1.id)
    with pytest.raises(AuthorizationError):
        room_service.delete_room(room, p1.id)
    assert room_service.delete_room(room, host.id) == room.code
    assert Room.query.count() == 0


def test_start_requires_quiz_with_questions(users, make_quiz):
    host = users[0]
    room = room_service.create_room(host)
    with pytest.raises(ConflictError, match="No quiz assigned"):
        room_service.start_game(room.code, host.id)

    room_service.assign_quiz(room, host.id, make_quiz(0))
    with pytest.raises(ConflictError, match="No quiz assigned"):
        room_service.start_game(room.code, host.id)


def test_game_walks_through_questions_then_finishes(users, make_quiz):
    host = users[0]
    room = room_service.create_room(host, quiz_id=make_quiz(3))

    step = room_service.start_game(room.code, host.id)
    assert (step.number, step.total, step.question.question) == (1, 3, "Question 1?")
    assert room.status == "playing" and room.current_question == 1

    with pytest.raises(ConflictError):
        room_service.start_game(room.code, host.id)

    step = room_service.advance_question(room.code)
    assert (step.finished, step.number, step.question.question) == (False, 2, "Question 2?")
    step = room_service.advance_question(room.code)
    assert (step.finished, step.number) == (False, 3)
    step = room_service.advance_question(room.code)
    assert step.finished
    assert room.status == "finished"

    with pytest.raises(ConflictError):
        room_service.advance_question(room.code)


def test_list_rooms_filters(users):
    host, p1, _ = users
    a = room_service.create_room(host)
    room_service.create_room(p1)
    assert len(room_service.list_rooms()) == 2
    assert [r.id for r in room_service.list_rooms(code=a.code.lower())] == [a.id]
    assert room_service.list_rooms(status="finished") == []
