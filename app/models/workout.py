# backend/app/models/workout.py
from datetime import datetime
from .. import db, BigId

class Workout(db.Model):
    __tablename__ = "workouts"

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), nullable=False, index=True)
    template_id = db.Column(db.BigInteger, db.ForeignKey("workout_templates.id"))
    name = db.Column(db.String(100))
    started_at = db.Column(db.DateTime, default=datetime.utcnow)
    # null while the workout is in progress, set once on completion
    ended_at = db.Column(db.DateTime)
    calories_burned = db.Column(db.Integer)

    user = db.relationship("User", backref="workouts")
    sets = db.relationship(
        "WorkoutSet", back_populates="workout", cascade="all, delete-orphan"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "template_id": self.template_id,
            "name": self.name,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "calories_burned": self.calories_burned,
        }


class WorkoutSet(db.Model):
    """
    One logged set. Rows are never updated; delete is the only undo.
    """
    __tablename__ = "sets"

    id = db.Column(BigId, primary_key=True)
    workout_id = db.Column(db.BigInteger, db.ForeignKey("workouts.id"), nullable=False, index=True)
    exercise_id = db.Column(db.Integer, db.ForeignKey("exercises.id"), nullable=False)
    weight_kg = db.Column(db.Float, nullable=False, default=0.0)
    reps = db.Column(db.Integer, nullable=False)
    rpe = db.Column(db.Float)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    workout = db.relationship("Workout", back_populates="sets")
    exercise = db.relationship("Exercise")

    def to_dict(self):
        return {
            "id": self.id,
            "workout_id": self.workout_id,
            "exercise_id": self.exercise_id,
            "weight_kg": float(self.weight_kg) if self.weight_kg is not None else 0.0,
            "reps": self.reps,
            "rpe": self.rpe,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
