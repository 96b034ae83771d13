from flask import current_app

from livequiz.models.room import STATUS_FINISHED, STATUS_PLAYING
from livequiz.schemas.events import (
    AnswerResult,
    GameFinished,
    GameStarted,
    NextQuestionError,
    NextQuestionEvent,
    QuizBrief,
    StartGameError,
    StartGameEvent,
    SubmitAnswerError,
    SubmitAnswerEvent,
)
from livequiz.services import room_service, scoring
from livequiz.services.broadcast import broadcast
from livequiz.services.room_registry import get_registry
from livequiz.services.serializers import build_question_message, serialize_leaderboard_entry
from livequiz.sockets.handlers import acting_user_id, socket_action


def register_game_events(socketio):

    # ---------------------------
    # START GAME (host only)
    # ---------------------------
    @socketio.on("start-game")
    @socket_action(StartGameError)
    def handle_start_game(data):
        event = StartGameEvent.model_validate(data or {})
        user_id = acting_user_id(event.user_id)

        step = room_service.start_game(event.room_code, user_id)
        room = step.room
        get_registry().update_status(room.code, STATUS_PLAYING, room.current_question)

        question = build_question_message(step.question, step.number, step.total)
        broadcast(GameStarted(
            quiz=QuizBrief(id=room.quiz.id, title=room.quiz.title, total_questions=step.total),
            question=question,
        ), room.code)
        return {"success": True, "question": question.payload()}

    # ---------------------------
    # SUBMIT ANSWER
    # ---------------------------
    @socketio.on("submitAnswer")
    @socket_action(SubmitAnswerError)
    def handle_submit_answer(data):
        event = SubmitAnswerEvent.model_validate(data or {})
        user_id = acting_user_id(event.user_id)

        award, leaderboard = scoring.submit_answer(
            event.room_code,
            user_id,
            event.question_id,
            event.answer,
            event.time_remaining,
            strict=current_app.config.get("STRICT_ANSWER_CHECK", False),
        )

        broadcast(AnswerResult(
            user_id=user_id,
            is_correct=award.is_correct,
            points=award.points,
            time_bonus=award.time_bonus,
            leaderboard=[serialize_leaderboard_entry(row) for row in leaderboard],
        ), event.room_code)
        return {
            "success": True,
            "isCorrect": award.is_correct,
            "points": award.points,
            "timeBonus": award.time_bonus,
        }

    # ---------------------------
    # NEXT QUESTION
    # ---------------------------
    @socketio.on("nextQuestion")
    @socket_action(NextQuestionError)
    def handle_next_question(data):
        event = NextQuestionEvent.model_validate(data or {})

        step = room_service.advance_question(event.room_code)
        room = step.room

        if step.finished:
            get_registry().update_status(room.code, STATUS_FINISHED, room.current_question)
            leaderboard = [serialize_leaderboard_entry(row) for row in room_service.get_leaderboard(room.id)]
            broadcast(GameFinished(leaderboard=leaderboard), room.code)
            return {"success": True, "finished": True}

        get_registry().update_status(room.code, STATUS_PLAYING, room.current_question)
        question = build_question_message(step.question, step.number, step.total)
        broadcast(question, room.code)
        return {"success": True, "finished": False, "question": question.payload()}
