# backend/app/models/user.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from .. import db, BigId

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(BigId, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    username = db.Column(db.String(50), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    # physical stats (feed the calorie estimate)
    gender = db.Column(db.Enum("male", "female", "other", name="gender_enum"))
    height_cm = db.Column(db.Numeric(5, 2))
    current_weight_kg = db.Column(db.Numeric(5, 2))
    activity_level = db.Column(
        db.Enum(
            "sedentary", "light", "moderate", "active", "very_active",
            name="activity_level_enum",
        )
    )

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "gender": self.gender,
            "height_cm": float(self.height_cm) if self.height_cm is not None else None,
            "current_weight_kg": float(self.current_weight_kg)
            if self.current_weight_kg is not None
            else None,
            "activity_level": self.activity_level,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
