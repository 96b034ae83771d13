import logging
import secrets
from dataclasses import dataclass, field
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from extensions import db
from livequiz.errors import AuthorizationError, ConflictError, NotFoundError
from livequiz.models import Leaderboard, Question, Room, User
from livequiz.models.room import STATUS_FINISHED, STATUS_PLAYING, STATUS_WAITING
from livequiz.services.quiz_service import get_ordered_questions, get_quiz

logger = logging.getLogger(__name__)

CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
CODE_LENGTH = 6


@dataclass
class LeaveResult:
    code: str
    user_id: int
    players: List[int] = field(default_factory=list)
    host_id: Optional[int] = None
    deleted: bool = False


@dataclass
class GameStep:
    room: Room
    finished: bool
    question: Optional[Question] = None
    number: int = 0
    total: int = 0


def generate_room_code():
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def code_in_use(code):
    return Room.query.filter_by(code=code).first() is not None


# ---------------------------
# LOOKUPS
# ---------------------------
def get_room(room_id) -> Room:
    room = db.session.get(Room, room_id)
    if not room:
        raise NotFoundError("Room not found")
    return room


def get_room_by_code(code) -> Room:
    room = Room.query.filter_by(code=(code or "").strip().upper()).first()
    if not room:
        raise NotFoundError("Room not found. Please check the room code.")
    return room


def list_rooms(status=None, code=None):
    query = Room.query
    if status:
        query = query.filter(Room.status == status)
    if code:
        query = query.filter(Room.code == code.strip().upper())
    return query.order_by(Room.created_at.desc(), Room.id.desc()).all()


def get_leaderboard(room_id):
    return (
        Leaderboard.query.filter_by(room_id=room_id)
        .order_by(Leaderboard.score.desc(), Leaderboard.id.asc())
        .all()
    )


def require_host(room: Room, user_id, action="perform this action"):
    if room.host_id != user_id:
        raise AuthorizationError(f"Access denied. Only room host can {action}.")


def ensure_leaderboard_row(room_id, user_id):
    row = Leaderboard.query.filter_by(room_id=room_id, user_id=user_id).first()
    if row is None:
        row = Leaderboard(room_id=room_id, user_id=user_id, score=0, correct_answers=0, time_bonus=0)
        db.session.add(row)
    return row


# ---------------------------
# LIFECYCLE
# ---------------------------
def create_room(host: User, quiz_id=None, max_players=None) -> Room:
    if quiz_id is not None:
        get_quiz(quiz_id)
    if max_players is None:
        max_players = current_app.config["DEFAULT_MAX_PLAYERS"]

    attempts = current_app.config["ROOM_CODE_MAX_ATTEMPTS"]
    for _ in range(attempts):
        code = generate_room_code()
        if code_in_use(code):
            continue

        # Room and the host's leaderboard row are committed together.
        room = Room(
            code=code,
            host_id=host.id,
            quiz_id=quiz_id,
            max_players=max_players,
            status=STATUS_WAITING,
            current_question=0,
            players=[host.id],
        )
        room.leaderboard.append(Leaderboard(user_id=host.id, score=0, correct_answers=0, time_bonus=0))
        db.session.add(room)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.warning("Room code %s collided on insert, retrying", code)
            continue

        logger.info("Room %s created by user %s", room.code, host.id)
        return room

    raise ConflictError("Could not allocate a unique room code, please try again")


def join_room(user_id, code) -> Room:
    room = get_room_by_code(code)

    if room.status != STATUS_WAITING:
        raise ConflictError(f"Cannot join room. Game is already {room.status}.")

    players = list(room.players or [])
    if user_id in players:
        raise ConflictError("You have already joined this room")
    if len(players) >= room.max_players:
        raise ConflictError("Room is full")

    room.players = players + [user_id]
    ensure_leaderboard_row(room.id, user_id)
    db.session.commit()
    logger.info("User %s joined room %s (%s/%s)", user_id, room.code, len(room.players), room.max_players)
    return room


def leave_room(room: Room, user_id) -> LeaveResult:
    players = list(room.players or [])
    if user_id not in players:
        raise ConflictError("You are not a member of this room")

    remaining = [p for p in players if p != user_id]
    code = room.code

    if not remaining:
        db.session.delete(room)
        db.session.commit()
        logger.info("User %s left room %s; room deleted as it was empty", user_id, code)
        return LeaveResult(code=code, user_id=user_id, deleted=True)

    if room.host_id == user_id:
        room.host_id = remaining[0]
        logger.info("Host of room %s passed from %s to %s", code, user_id, room.host_id)
    room.players = remaining
    db.session.commit()
    logger.info("User %s left room %s (%s remaining)", user_id, code, len(remaining))
    return LeaveResult(code=code, user_id=user_id, players=remaining, host_id=room.host_id)


def delete_room(room: Room, user_id):
    require_host(room, user_id, "delete the room")
    code = room.code
    db.session.delete(room)
    db.session.commit()
    logger.info("Room %s deleted by host %s", code, user_id)
    return code


def assign_quiz(room: Room, user_id, quiz_id) -> Room:
    require_host(room, user_id, "assign quiz")
    quiz = get_quiz(quiz_id)
    room.quiz_id = quiz.id
    db.session.commit()
    logger.info("Quiz %s assigned to room %s", quiz.id, room.code)
    return room


# ---------------------------
# GAME FLOW
# ---------------------------
def _room_questions(room: Room):
    if room.quiz is None:
        raise ConflictError("No quiz assigned to this room")
    questions = get_ordered_questions(room.quiz)
    if not questions:
        raise ConflictError("No quiz assigned to this room")
    return questions


def start_game(code, user_id) -> GameStep:
    room = get_room_by_code(code)
    require_host(room, user_id, "start the game")
    if room.status != STATUS_WAITING:
        raise ConflictError(f"Cannot start game. Room is already {room.status}.")
    questions = _room_questions(room)

    room.status = STATUS_PLAYING
    room.current_question = 1
    db.session.commit()
    logger.info("Game started in room %s with %s questions", room.code, len(questions))
    return GameStep(room=room, finished=False, question=questions[0], number=1, total=len(questions))


def advance_question(code) -> GameStep:
    room = get_room_by_code(code)
    if room.status != STATUS_PLAYING:
        raise ConflictError(f"Game is not in progress (room is {room.status})")
    questions = _room_questions(room)

    # current_question is the 1-based number of the question on screen,
    # which is also the 0-based index of the one after it.
    next_index = room.current_question
    if next_index >= len(questions):
        room.status = STATUS_FINISHED
        db.session.commit()
        logger.info("Game finished in room %s", room.code)
        return GameStep(room=room, finished=True, total=len(questions))

    room.current_question = next_index + 1
    db.session.commit()
    return GameStep(
        room=room,
        finished=False,
        question=questions[next_index],
        number=next_index + 1,
        total=len(questions),
    )
