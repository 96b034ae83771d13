from extensions import socketio


def room_channel(code):
    return f"room_{code}"


def broadcast(message, code):
    """Send a server message to every socket in the room's channel."""
    socketio.emit(message.event, message.payload(), to=room_channel(code))


def evict(sid, code):
    """Remove one socket from the room's channel; works outside socket handlers."""
    socketio.server.leave_room(sid, room_channel(code), namespace="/")


def evict_all(presences, code):
    for presence in presences:
        evict(presence.sid, code)
