"""Process-local view of who is connected to which room.

The registry mirrors room status and tracks live socket ids so presence can be
answered without a database round-trip. Persisted ``Room`` rows stay the
source of truth; nothing here survives a restart or is shared between
processes.
"""
import threading
from dataclasses import dataclass, field

from flask import current_app


@dataclass
class Presence:
    user_id: int
    username: str
    avatar: str
    sid: str

    def as_dict(self):
        return {
            "id": self.user_id,
            "username": self.username,
            "avatar": self.avatar,
            "socketId": self.sid,
        }


@dataclass
class RoomSnapshot:
    room_id: int
    status: str
    current_question: int = 0
    members: dict = field(default_factory=dict)


class RoomRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._rooms = {}
        # sid -> (room code, user id) for disconnect cleanup
        self._memberships = {}
        # sid -> authenticated user id
        self._identities = {}

    # ---------------------------
    # IDENTITY
    # ---------------------------
    def bind_identity(self, sid, user_id):
        with self._lock:
            self._identities[sid] = user_id

    def identity(self, sid):
        with self._lock:
            return self._identities.get(sid)

    # ---------------------------
    # ROOMS
    # ---------------------------
    def snapshot(self, code):
        """Copy of the room's live state as a payload, or None if nobody is connected."""
        with self._lock:
            snapshot = self._rooms.get(code)
            if snapshot is None:
                return None
            online = [p.as_dict() for p in snapshot.members.values()]
            return {
                "roomId": snapshot.room_id,
                "status": snapshot.status,
                "currentQuestion": snapshot.current_question,
                "online": online,
                "totalOnline": len(online),
            }

    def update_status(self, code, status, current_question):
        with self._lock:
            snapshot = self._rooms.get(code)
            if snapshot is not None:
                snapshot.status = status
                snapshot.current_question = current_question

    def discard(self, code):
        """Forget a room. Returns the presences that were attached to it."""
        with self._lock:
            snapshot = self._rooms.pop(code, None)
            if snapshot is None:
                return []
            for presence in snapshot.members.values():
                self._memberships.pop(presence.sid, None)
            return list(snapshot.members.values())

    # ---------------------------
    # MEMBERS
    # ---------------------------
    def attach(self, code, room_id, status, user, sid):
        """Bind ``user`` to ``sid`` in the room.

        Returns the presence it replaced when the user was already attached
        from another socket, else None.
        """
        with self._lock:
            snapshot = self._rooms.get(code)
            if snapshot is None:
                snapshot = RoomSnapshot(room_id=room_id, status=status)
                self._rooms[code] = snapshot
            previous = snapshot.members.get(user.id)
            if previous is not None and previous.sid != sid:
                self._memberships.pop(previous.sid, None)
            else:
                previous = None
            snapshot.members[user.id] = Presence(
                user_id=user.id,
                username=user.username,
                avatar=user.avatar,
                sid=sid,
            )
            self._memberships[sid] = (code, user.id)
            return previous

    def detach(self, code, user_id):
        with self._lock:
            snapshot = self._rooms.get(code)
            if snapshot is None:
                return None
            presence = snapshot.members.pop(user_id, None)
            if presence is not None and self._memberships.get(presence.sid) == (code, user_id):
                self._memberships.pop(presence.sid, None)
            return presence

    def drop_sid(self, sid):
        """Forget a disconnected socket. Returns ``(code, user_id)`` or None."""
        with self._lock:
            self._identities.pop(sid, None)
            membership = self._memberships.pop(sid, None)
            if membership is None:
                return None
            code, user_id = membership
            snapshot = self._rooms.get(code)
            if snapshot is not None:
                presence = snapshot.members.get(user_id)
                if presence is not None and presence.sid == sid:
                    snapshot.members.pop(user_id)
            return membership

    def roster(self, code):
        with self._lock:
            snapshot = self._rooms.get(code)
            if snapshot is None:
                return []
            return [p.as_dict() for p in snapshot.members.values()]


def get_registry() -> RoomRegistry:
    return current_app.extensions["room_registry"]
