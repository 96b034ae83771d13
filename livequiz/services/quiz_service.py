import logging

from extensions import db
from livequiz.errors import NotFoundError
from livequiz.models import Question, Quiz
from livequiz.models.quiz import CATEGORIES
from livequiz.services import question_generator

logger = logging.getLogger(__name__)


def list_categories():
    return list(CATEGORIES)


def list_quizzes(category=None, difficulty=None, is_ai_generated=None):
    query = Quiz.query
    if category:
        query = query.filter(Quiz.category == category)
    if difficulty:
        query = query.filter(Quiz.difficulty == difficulty)
    if is_ai_generated is not None:
        query = query.filter(Quiz.is_ai_generated == is_ai_generated)
    return query.order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()


def get_quiz(quiz_id) -> Quiz:
    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        raise NotFoundError("Quiz not found")
    return quiz


def get_ordered_questions(quiz: Quiz):
    return Question.query.filter_by(quiz_id=quiz.id).order_by(Question.position, Question.id).all()


def _add_questions(quiz, items):
    for position, item in enumerate(items, start=1):
        db.session.add(Question(
            quiz=quiz,
            position=position,
            question=item["question"],
            options=list(item["options"]),
            correct_answer=item["correctAnswer"],
            time_limit=item["timeLimit"],
            points=item["points"],
        ))


def create_quiz(data) -> Quiz:
    quiz = Quiz(
        title=data.title,
        description=data.description,
        category=data.category,
        difficulty=data.difficulty,
        is_ai_generated=False,
    )
    db.session.add(quiz)
    _add_questions(quiz, [q.model_dump(by_alias=True) for q in data.questions])
    db.session.commit()
    logger.info("Created quiz %s with %s questions", quiz.id, len(data.questions))
    return quiz


def create_ai_quiz(data) -> Quiz:
    title = data.title or f"{data.category} Quiz - {data.difficulty.capitalize()}"
    description = data.description or f"AI Generated {data.category} Quiz - {data.difficulty} level"

    logger.info("Generating %s questions for %s (%s)", data.number_of_questions, data.category, data.difficulty)
    items = question_generator.generate_questions(
        data.category, data.difficulty, data.number_of_questions
    )

    quiz = Quiz(
        title=title,
        description=description,
        category=data.category,
        difficulty=data.difficulty,
        is_ai_generated=True,
    )
    db.session.add(quiz)
    _add_questions(quiz, items)
    db.session.commit()
    logger.info("Created AI quiz %s with %s questions", quiz.id, len(items))
    return quiz


def delete_quiz(quiz_id):
    quiz = get_quiz(quiz_id)
    db.session.delete(quiz)
    db.session.commit()
    logger.info("Deleted quiz %s", quiz_id)


def delete_all_quizzes():
    quizzes = Quiz.query.all()
    for quiz in quizzes:
        db.session.delete(quiz)
    db.session.commit()
    logger.info("Deleted all quizzes (%s)", len(quizzes))
    return len(quizzes)
