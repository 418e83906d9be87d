# backend/app/models/template.py
from datetime import datetime
from .. import db, BigId


class WorkoutTemplate(db.Model):
    __tablename__ = "workout_templates"

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    exercises = db.relationship(
        "TemplateExercise",
        back_populates="template",
        order_by="TemplateExercise.order_index",
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class TemplateExercise(db.Model):
    __tablename__ = "template_exercises"

    id = db.Column(BigId, primary_key=True)
    template_id = db.Column(
        db.BigInteger, db.ForeignKey("workout_templates.id"), nullable=False, index=True
    )
    exercise_id = db.Column(db.Integer, db.ForeignKey("exercises.id"), nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)
    target_sets = db.Column(db.Integer, nullable=False)
    target_reps = db.Column(db.Integer, nullable=False)
    target_weight_kg = db.Column(db.Float)

    template = db.relationship("WorkoutTemplate", back_populates="exercises")
    exercise = db.relationship("Exercise")

    def to_dict(self):
        return {
            "id": self.id,
            "template_id": self.template_id,
            "exercise_id": self.exercise_id,
            "exercise_name": self.exercise.name if self.exercise else None,
            "order_index": self.order_index,
            "target_sets": self.target_sets,
            "target_reps": self.target_reps,
            "target_weight_kg": self.target_weight_kg,
        }
