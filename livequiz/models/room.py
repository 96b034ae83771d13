from extensions import db
from .user import _utcnow

STATUS_WAITING = "waiting"
STATUS_PLAYING = "playing"
STATUS_FINISHED = "finished"


class Room(db.Model):
    __tablename__ = "rooms"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(6), unique=True, nullable=False)
    host_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id", ondelete="SET NULL"), nullable=True)
    max_players = db.Column(db.Integer, default=10, nullable=False)
    status = db.Column(db.String(10), default=STATUS_WAITING, nullable=False)
    current_question = db.Column(db.Integer, default=0, nullable=False)
    # Ordered user ids, host included. Always reassign, never mutate in place.
    players = db.Column(db.JSON, default=list, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    host = db.relationship("User")
    quiz = db.relationship("Quiz", back_populates="rooms")
    leaderboard = db.relationship(
        "Leaderboard",
        back_populates="room",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.Index("ix_room_status", "status"),
    )
