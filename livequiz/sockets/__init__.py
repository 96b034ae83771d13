from .room_events import register_room_events
from .game_events import register_game_events

def register_sockets(socketio):
    register_room_events(socketio)
    register_game_events(socketio)
