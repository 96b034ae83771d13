from extensions import db
from .user import _utcnow

CATEGORIES = [
    "Science",
    "History",
    "Geography",
    "Pop Culture",
    "Sports",
    "Technology",
    "General Knowledge",
    "Other",
]

DIFFICULTIES = ["easy", "medium", "hard"]


class Quiz(db.Model):
    __tablename__ = "quizzes"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.String(50), nullable=False)
    difficulty = db.Column(db.String(10), nullable=False)
    is_ai_generated = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    questions = db.relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="Question.position",
    )
    # Rooms outlive their quiz; the ORM nulls room.quiz_id on delete.
    rooms = db.relationship("Room", back_populates="quiz")
