import logging

from flask import request
from flask_socketio import emit, join_room, leave_room

from extensions import db
from livequiz.errors import ConflictError, QuizRoomError
from livequiz.models.room import STATUS_WAITING
from livequiz.schemas.events import (
    Authenticated,
    AuthenticateError,
    JoinRoomError,
    JoinRoomEvent,
    LeaveRoomError,
    LeaveRoomEvent,
    PlayerDisconnected,
    PlayerJoined,
    PlayerLeft,
)
from livequiz.services import auth_service, room_service
from livequiz.services.broadcast import broadcast, evict, evict_all, room_channel
from livequiz.services.room_registry import get_registry
from livequiz.services.serializers import serialize_user
from livequiz.sockets.handlers import acting_user_id, socket_action

logger = logging.getLogger(__name__)


def register_room_events(socketio):

    # ---------------------------
    # CONNECT / AUTHENTICATE
    # ---------------------------
    @socketio.on("connect")
    def handle_connect(auth=None):
        logger.info("Socket connected: %s", request.sid)
        token = (auth or {}).get("token") if isinstance(auth, dict) else None
        if not token:
            return
        try:
            user = auth_service.user_from_token(token)
        except QuizRoomError as e:
            # Anonymous sockets are allowed; a bad token only means no identity.
            logger.info("Socket %s sent an unusable token: %s", request.sid, e.message)
            return
        get_registry().bind_identity(request.sid, user.id)

    @socketio.on("authenticate")
    @socket_action(AuthenticateError)
    def handle_authenticate(token):
        if isinstance(token, dict):
            token = token.get("token")
        try:
            user = auth_service.user_from_token(token or "")
        except QuizRoomError as e:
            emit(Authenticated.event, Authenticated(success=False, message=e.message).payload())
            return {"success": False, "message": e.message}
        get_registry().bind_identity(request.sid, user.id)
        emit(Authenticated.event, Authenticated(success=True, user_id=user.id).payload())
        return {"success": True, "userId": user.id}

    # ---------------------------
    # JOIN ROOM
    # ---------------------------
    @socketio.on("join-room")
    @socket_action(JoinRoomError)
    def handle_join_room(data):
        event = JoinRoomEvent.model_validate(data or {})
        user_id = acting_user_id(event.user_id)

        room = room_service.get_room_by_code(event.room_code)
        if room.status != STATUS_WAITING:
            raise ConflictError("Game already started")
        user = auth_service.get_user(user_id)

        if user_id in (room.players or []):
            # Joined over REST already; make sure the score row exists.
            room_service.ensure_leaderboard_row(room.id, user_id)
            db.session.commit()
        else:
            room = room_service.join_room(user_id, room.code)

        join_room(room_channel(room.code))
        replaced = get_registry().attach(room.code, room.id, room.status, user, request.sid)
        if replaced is not None:
            # The user moved to this socket; the old one stops receiving room events.
            evict(replaced.sid, room.code)

        players = list(room.players)
        logger.info("User %s joined room channel %s (%s players)", user_id, room.code, len(players))
        broadcast(PlayerJoined(
            player=serialize_user(user),
            players=players,
            total_players=len(players),
        ), room.code)
        return {"success": True, "roomCode": room.code}

    # ---------------------------
    # LEAVE ROOM
    # ---------------------------
    @socketio.on("leave-room")
    @socket_action(LeaveRoomError)
    def handle_leave_room(data):
        event = LeaveRoomEvent.model_validate(data or {})
        user_id = acting_user_id(event.user_id)
        code = event.room_code

        room = room_service.get_room_by_code(code)
        result = room_service.leave_room(room, user_id)

        leave_room(room_channel(code))
        registry = get_registry()
        presence = registry.detach(code, user_id)
        if presence is not None and presence.sid != request.sid:
            evict(presence.sid, code)
        discarded = registry.discard(code) if result.deleted else []

        broadcast(PlayerLeft(
            user_id=user_id,
            players=result.players,
            total_players=len(result.players),
            host_id=result.host_id,
            room_deleted=result.deleted,
        ), code)
        evict_all(discarded, code)
        return {"success": True, "roomDeleted": result.deleted}

    # ---------------------------
    # DISCONNECT
    # ---------------------------
    @socketio.on("disconnect")
    def handle_disconnect(reason=None):
        logger.info("Socket disconnected: %s", request.sid)
        membership = get_registry().drop_sid(request.sid)
        if membership is None:
            return
        code, user_id = membership
        # Presence only; the persisted roster is left alone.
        online = get_registry().roster(code)
        broadcast(PlayerDisconnected(
            user_id=user_id,
            online=online,
            total_online=len(online),
        ), code)
