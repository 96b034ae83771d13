from extensions import db


class Leaderboard(db.Model):
    __tablename__ = "leaderboards"

    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    score = db.Column(db.Integer, default=0, nullable=False)
    correct_answers = db.Column(db.Integer, default=0, nullable=False)
    time_bonus = db.Column(db.Integer, default=0, nullable=False)

    room = db.relationship("Room", back_populates="leaderboard")
    user = db.relationship("User")

    __table_args__ = (
        db.UniqueConstraint("room_id", "user_id", name="uq_leaderboard_room_user"),
        db.Index("ix_leaderboard_room", "room_id"),
    )
