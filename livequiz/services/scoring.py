import logging
import math
from dataclasses import dataclass

from extensions import db
from livequiz.errors import ConflictError, NotFoundError
from livequiz.models import Leaderboard, Question
from livequiz.models.room import STATUS_PLAYING
from livequiz.services.quiz_service import get_ordered_questions
from livequiz.services.room_service import get_leaderboard, get_room_by_code

logger = logging.getLogger(__name__)

MAX_TIME_BONUS = 50


@dataclass
class Award:
    is_correct: bool
    points: int
    time_bonus: int


def compute_award(is_correct, points, time_limit, time_remaining) -> Award:
    """Base points plus up to 50 bonus points for the fraction of time left.

    Remaining time is clamped to ``[0, time_limit]`` so an award is never
    negative and never exceeds ``points + 50``.
    """
    if not is_correct:
        return Award(is_correct=False, points=0, time_bonus=0)
    remaining = min(max(float(time_remaining or 0), 0.0), float(time_limit))
    bonus = math.floor((remaining / time_limit) * MAX_TIME_BONUS) if time_limit > 0 else 0
    return Award(is_correct=True, points=points + bonus, time_bonus=bonus)


def _check_current_question(room, question):
    if room.status != STATUS_PLAYING or room.quiz is None:
        raise ConflictError("Game is not in progress")
    questions = get_ordered_questions(room.quiz)
    index = room.current_question - 1
    if not (0 <= index < len(questions)) or questions[index].id != question.id:
        raise ConflictError("Question is not the current question of this room")


def submit_answer(code, user_id, question_id, answer, time_remaining, strict=False):
    """Score one answer and add it to the user's leaderboard row.

    Returns ``(award, leaderboard)`` with the leaderboard sorted by score.
    """
    question = db.session.get(Question, question_id)
    if not question:
        raise NotFoundError("Question not found")
    room = get_room_by_code(code)
    if strict:
        _check_current_question(room, question)

    is_correct = answer is not None and answer == question.correct_answer
    award = compute_award(is_correct, question.points, question.time_limit, time_remaining)

    # Additive update in place; the database applies the increment.
    updated = (
        Leaderboard.query.filter_by(room_id=room.id, user_id=user_id)
        .update(
            {
                Leaderboard.score: Leaderboard.score + award.points,
                Leaderboard.correct_answers: Leaderboard.correct_answers + (1 if award.is_correct else 0),
                Leaderboard.time_bonus: Leaderboard.time_bonus + award.time_bonus,
            },
            synchronize_session=False,
        )
    )
    if not updated:
        db.session.add(Leaderboard(
            room_id=room.id,
            user_id=user_id,
            score=award.points,
            correct_answers=1 if award.is_correct else 0,
            time_bonus=award.time_bonus,
        ))
    db.session.commit()

    logger.info(
        "Room %s: user %s answered question %s (%s, +%s)",
        room.code, user_id, question.id, "correct" if award.is_correct else "wrong", award.points,
    )
    return award, get_leaderboard(room.id)
