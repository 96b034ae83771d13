from typing import Annotated, Optional

from pydantic import BeforeValidator, Field

from .base import CamelModel


def normalize_room_code(value):
    if isinstance(value, str):
        return value.strip().upper()
    return value


RoomCode = Annotated[str, BeforeValidator(normalize_room_code), Field(min_length=1, max_length=6)]


class CreateRoomRequest(CamelModel):
    quiz_id: Optional[int] = None
    max_players: Optional[int] = Field(default=None, ge=1, le=100)


class JoinRoomRequest(CamelModel):
    code: RoomCode


class AssignQuizRequest(CamelModel):
    quiz_id: int
