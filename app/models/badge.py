# backend/app/models/badge.py
from datetime import datetime
from .. import db, BigId


class UserBadge(db.Model):
    """
    A badge earned on a specific workout. The unique constraint is what makes
    re-issuing a badge a no-op.
    """
    __tablename__ = "user_badges"
    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "workout_id", "badge_name", name="uq_user_workout_badge"
        ),
    )

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), nullable=False)
    workout_id = db.Column(db.BigInteger, db.ForeignKey("workouts.id"), nullable=False)
    badge_name = db.Column(db.String(50), nullable=False)
    awarded_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship("User", backref="badges")

    def to_dict(self):
        return {
            "id": self.id,
            "workout_id": self.workout_id,
            "badge_name": self.badge_name,
            "awarded_at": self.awarded_at.isoformat() if self.awarded_at else None,
        }
