from flask import Blueprint, g, request

from livequiz.routes.utils import json_body, load_current_user, success
from livequiz.schemas.events import PlayerLeft, QuizAssigned
from livequiz.schemas.room import AssignQuizRequest, CreateRoomRequest, JoinRoomRequest
from livequiz.services import room_service
from livequiz.services.broadcast import broadcast, evict, evict_all
from livequiz.services.room_registry import get_registry
from livequiz.services.serializers import serialize_leaderboard_entry, serialize_room

room_bp = Blueprint("rooms", __name__)


@room_bp.before_request
def _authenticate():
    # Every room route needs a user; CORS preflights carry no token.
    if request.method != "OPTIONS":
        load_current_user()


@room_bp.route("", methods=["POST"])
def create_room():
    data = CreateRoomRequest.model_validate(json_body())
    room = room_service.create_room(g.current_user, quiz_id=data.quiz_id, max_players=data.max_players)
    return success(serialize_room(room), message="Room created successfully", status=201)


@room_bp.route("/join", methods=["POST"])
def join_room():
    data = JoinRoomRequest.model_validate(json_body())
    room = room_service.join_room(g.current_user.id, data.code)
    return success(serialize_room(room), message="Joined room successfully")


@room_bp.route("", methods=["GET"])
def list_rooms():
    rooms = room_service.list_rooms(status=request.args.get("status"), code=request.args.get("code"))
    return success([serialize_room(r) for r in rooms])


@room_bp.route("/<int:room_id>", methods=["GET"])
def get_room(room_id):
    room = room_service.get_room(room_id)
    return success(serialize_room(room, leaderboard=room_service.get_leaderboard(room.id)))


@room_bp.route("/<int:room_id>/assign-quiz", methods=["PUT"])
def assign_quiz(room_id):
    data = AssignQuizRequest.model_validate(json_body())
    room = room_service.get_room(room_id)
    room = room_service.assign_quiz(room, g.current_user.id, data.quiz_id)
    payload = serialize_room(room)
    broadcast(QuizAssigned(room=payload), room.code)
    return success(payload, message="Quiz assigned successfully")


@room_bp.route("/<int:room_id>/leave", methods=["DELETE"])
def leave_room(room_id):
    room = room_service.get_room(room_id)
    result = room_service.leave_room(room, g.current_user.id)

    registry = get_registry()
    presence = registry.detach(result.code, result.user_id)
    if presence is not None:
        evict(presence.sid, result.code)
    discarded = registry.discard(result.code) if result.deleted else []
    broadcast(PlayerLeft(
        user_id=result.user_id,
        players=result.players,
        total_players=len(result.players),
        host_id=result.host_id,
        room_deleted=result.deleted,
    ), result.code)
    evict_all(discarded, result.code)

    if result.deleted:
        return success(message="Left room successfully. Room deleted as it was empty.")
    return success(message="Left room successfully")


@room_bp.route("/<int:room_id>", methods=["DELETE"])
def delete_room(room_id):
    room = room_service.get_room(room_id)
    code = room_service.delete_room(room, g.current_user.id)
    evict_all(get_registry().discard(code), code)
    return success(message="Room deleted successfully")


@room_bp.route("/<int:room_id>/leaderboard", methods=["GET"])
def room_leaderboard(room_id):
    rows = room_service.get_leaderboard(room_id)
    return success([serialize_leaderboard_entry(r) for r in rows])


@room_bp.route("/<int:room_id>/presence", methods=["GET"])
def room_presence(room_id):
    room = room_service.get_room(room_id)
    snapshot = get_registry().snapshot(room.code)
    if snapshot is None:
        # Nobody connected; fall back to the persisted state.
        snapshot = {
            "roomId": room.id,
            "status": room.status,
            "currentQuestion": room.current_question,
            "online": [],
            "totalOnline": 0,
        }
    return success(snapshot)
