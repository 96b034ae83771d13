from .user import User
from .quiz import Quiz
from .question import Question
from .room import Room
from .leaderboard import Leaderboard

__all__ = [
	"User",
	"Quiz",
	"Question",
	"Room",
	"Leaderboard",
]
