"""Socket.IO payloads.

Inbound models validate what clients emit. Outbound models are the tagged
messages the server broadcasts; ``event`` is the Socket.IO event name.
"""
from typing import ClassVar, List, Optional

from pydantic import Field

from .base import CamelModel
from .room import RoomCode


# ---------------------------
# CLIENT -> SERVER
# ---------------------------
class RoomEvent(CamelModel):
    room_code: RoomCode
    user_id: Optional[int] = None


class JoinRoomEvent(RoomEvent):
    pass


class LeaveRoomEvent(RoomEvent):
    pass


class StartGameEvent(RoomEvent):
    pass


class NextQuestionEvent(RoomEvent):
    pass


class SubmitAnswerEvent(RoomEvent):
    question_id: int
    # None means the client timer ran out.
    answer: Optional[int] = None
    time_remaining: float = Field(default=0.0, allow_inf_nan=False)


# ---------------------------
# SERVER -> CLIENT
# ---------------------------
class ServerMessage(CamelModel):
    event: ClassVar[str] = ""

    def payload(self):
        return self.model_dump(by_alias=True)


class Authenticated(ServerMessage):
    event: ClassVar[str] = "authenticated"

    success: bool
    user_id: Optional[int] = None
    message: Optional[str] = None


class PlayerJoined(ServerMessage):
    event: ClassVar[str] = "player-joined"

    player: dict
    players: List[int]
    total_players: int


class PlayerLeft(ServerMessage):
    """A member left the room roster for good."""

    event: ClassVar[str] = "player-left"

    user_id: int
    players: List[int]
    total_players: int
    host_id: Optional[int] = None
    room_deleted: bool = False


class PlayerDisconnected(ServerMessage):
    """A member's socket dropped; they stay on the roster."""

    event: ClassVar[str] = "playerLeft"

    user_id: int
    online: List[dict]
    total_online: int


class QuizBrief(CamelModel):
    id: int
    title: str
    total_questions: int


class QuestionMessage(ServerMessage):
    """A question as players see it. The correct answer is never included."""

    event: ClassVar[str] = "nextQuestion"

    id: int
    question: str
    options: List[str]
    time_limit: int
    points: int
    question_number: int
    total_questions: int


class GameStarted(ServerMessage):
    event: ClassVar[str] = "game-started"

    quiz: QuizBrief
    question: QuestionMessage


class AnswerResult(ServerMessage):
    event: ClassVar[str] = "answerResult"

    user_id: int
    is_correct: bool
    points: int
    time_bonus: int
    leaderboard: List[dict]


class GameFinished(ServerMessage):
    event: ClassVar[str] = "gameFinished"

    status: str = "finished"
    leaderboard: List[dict]


class QuizAssigned(ServerMessage):
    event: ClassVar[str] = "quiz-assigned"

    room: dict


class ErrorMessage(ServerMessage):
    message: str


class JoinRoomError(ErrorMessage):
    event: ClassVar[str] = "join-room-error"


class LeaveRoomError(ErrorMessage):
    event: ClassVar[str] = "leave-room-error"


class StartGameError(ErrorMessage):
    event: ClassVar[str] = "start-game-error"


class SubmitAnswerError(ErrorMessage):
    event: ClassVar[str] = "submit-answer-error"


class NextQuestionError(ErrorMessage):
    event: ClassVar[str] = "next-question-error"


class AuthenticateError(ErrorMessage):
    event: ClassVar[str] = "authenticate-error"
