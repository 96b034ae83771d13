from extensions import db


class Question(db.Model):
    __tablename__ = "questions"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False)
    position = db.Column(db.Integer, default=0, nullable=False)
    question = db.Column(db.Text, nullable=False)
    options = db.Column(db.JSON, nullable=False)
    correct_answer = db.Column(db.Integer, nullable=False)
    time_limit = db.Column(db.Integer, default=30, nullable=False)
    points = db.Column(db.Integer, default=100, nullable=False)

    quiz = db.relationship("Quiz", back_populates="questions")

    __table_args__ = (
        db.CheckConstraint("correct_answer >= 0", name="ck_question_correct_answer"),
        db.Index("ix_question_quiz", "quiz_id"),
    )
