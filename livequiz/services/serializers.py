from livequiz.models import Leaderboard, Question, Quiz, Room, User
from livequiz.schemas.events import QuestionMessage


def _iso(value):
    return value.isoformat() if value else None


def serialize_user(user: User, private=False):
    data = {
        "id": user.id,
        "username": user.username,
        "avatar": user.avatar,
    }
    if private:
        data.update({
            "email": user.email,
            "createdAt": _iso(user.created_at),
            "updatedAt": _iso(user.updated_at),
        })
    return data


def serialize_quiz_brief(quiz: Quiz):
    if quiz is None:
        return None
    return {
        "id": quiz.id,
        "title": quiz.title,
        "category": quiz.category,
        "difficulty": quiz.difficulty,
    }


def serialize_quiz_summary(quiz: Quiz):
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "category": quiz.category,
        "difficulty": quiz.difficulty,
        "isAIGenerated": bool(quiz.is_ai_generated),
        "questionCount": len(quiz.questions),
        "createdAt": _iso(quiz.created_at),
    }


def serialize_public_question(question: Question):
    """Question as clients may see it: the correct answer stays on the server."""
    return {
        "id": question.id,
        "question": question.question,
        "options": list(question.options or []),
        "timeLimit": question.time_limit,
        "points": question.points,
    }


def serialize_quiz_detail(quiz: Quiz):
    data = serialize_quiz_summary(quiz)
    data["questions"] = [serialize_public_question(q) for q in quiz.questions]
    return data


def build_question_message(question: Question, number, total):
    return QuestionMessage(
        id=question.id,
        question=question.question,
        options=list(question.options or []),
        time_limit=question.time_limit,
        points=question.points,
        question_number=number,
        total_questions=total,
    )


def serialize_leaderboard_entry(row: Leaderboard):
    return {
        "id": row.id,
        "roomId": row.room_id,
        "userId": row.user_id,
        "score": row.score,
        "correctAnswers": row.correct_answers,
        "timeBonus": row.time_bonus,
        "user": serialize_user(row.user) if row.user else None,
    }


def serialize_room(room: Room, leaderboard=None):
    data = {
        "id": room.id,
        "code": room.code,
        "hostId": room.host_id,
        "quizId": room.quiz_id,
        "maxPlayers": room.max_players,
        "status": room.status,
        "currentQuestion": room.current_question,
        "players": list(room.players or []),
        "createdAt": _iso(room.created_at),
        "host": serialize_user(room.host) if room.host else None,
        "quiz": serialize_quiz_brief(room.quiz),
    }
    if leaderboard is not None:
        data["leaderboard"] = [serialize_leaderboard_entry(row) for row in leaderboard]
    return data
