from flask import Blueprint, request

from livequiz.errors import RequestValidationError
from livequiz.routes.utils import json_body, success, token_required
from livequiz.schemas.quiz import CreateAIQuizRequest, CreateQuizRequest
from livequiz.services import quiz_service
from livequiz.services.serializers import serialize_quiz_detail, serialize_quiz_summary

quiz_bp = Blueprint("quizzes", __name__)


def _parse_bool(value):
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise RequestValidationError("isAIGenerated must be true or false")


@quiz_bp.route("/categories", methods=["GET"])
def categories():
    return success(quiz_service.list_categories())


@quiz_bp.route("", methods=["GET"])
def list_quizzes():
    quizzes = quiz_service.list_quizzes(
        category=request.args.get("category"),
        difficulty=request.args.get("difficulty"),
        is_ai_generated=_parse_bool(request.args.get("isAIGenerated")),
    )
    return success([serialize_quiz_summary(q) for q in quizzes], message="Quizzes retrieved successfully")


@quiz_bp.route("/<int:quiz_id>", methods=["GET"])
def get_quiz(quiz_id):
    quiz = quiz_service.get_quiz(quiz_id)
    return success(serialize_quiz_detail(quiz), message="Quiz retrieved successfully")


@quiz_bp.route("", methods=["POST"])
@token_required
def create_quiz():
    data = CreateQuizRequest.model_validate(json_body())
    quiz = quiz_service.create_quiz(data)
    return success({"quiz": serialize_quiz_summary(quiz)}, message="Quiz created successfully", status=201)


@quiz_bp.route("/ai-generate", methods=["POST"])
@token_required
def create_quiz_with_ai():
    data = CreateAIQuizRequest.model_validate(json_body())
    quiz = quiz_service.create_ai_quiz(data)
    return success(
        {"quiz": serialize_quiz_summary(quiz), "questions": serialize_quiz_detail(quiz)["questions"]},
        message="Quiz created successfully with AI-generated questions",
        status=201,
    )


@quiz_bp.route("/<int:quiz_id>", methods=["DELETE"])
@token_required
def delete_quiz(quiz_id):
    quiz_service.delete_quiz(quiz_id)
    return success(message="Quiz deleted successfully")


@quiz_bp.route("", methods=["DELETE"])
@token_required
def delete_all_quizzes():
    count = quiz_service.delete_all_quizzes()
    return success({"deleted": count}, message="All quizzes deleted successfully")
