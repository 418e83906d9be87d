# backend/app/routes/profile_routes.py
from datetime import datetime, timedelta
from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from sqlalchemy import func
from .. import db
from ..analytics import service
from ..analytics.store import SqlAlchemyStore
from ..models.user import User
from ..models.workout import Workout, WorkoutSet

profile_bp = Blueprint("profile", __name__)

GENDERS = ["male", "female", "other"]
ACTIVITY_LEVELS = ["sedentary", "light", "moderate", "active", "very_active"]


@profile_bp.route("", methods=["GET"])
@jwt_required()
def get_profile():
    """
    Returns:
    {
      "username": "titan",
      "total_workouts": 42,
      "total_volume_kg": 123456.0,
      "join_date": "2025-01-02T09:00:00",
      "activity_log": [{"date": "2025-11-20", "volume_kg": 5400.0}, ...],
      "current_streak": 3,
      "max_streak": 12
    }
    """
    user_id = int(get_jwt_identity())
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404

    volume = func.coalesce(func.sum(WorkoutSet.weight_kg * WorkoutSet.reps), 0)

    workout_count, total_volume = (
        db.session.query(func.count(func.distinct(Workout.id)), volume)
        .select_from(Workout)
        .outerjoin(WorkoutSet, WorkoutSet.workout_id == Workout.id)
        .filter(Workout.user_id == user.id)
        .one()
    )

    today = datetime.utcnow().date()
    lookback_days = current_app.config.get("ANALYTICS_ACTIVITY_LOOKBACK_DAYS", 365)
    since = datetime.combine(today - timedelta(days=lookback_days), datetime.min.time())

    # per-day volume, bucketed in python so the date math is dialect-agnostic
    rows = (
        db.session.query(Workout.started_at, volume)
        .outerjoin(WorkoutSet, WorkoutSet.workout_id == Workout.id)
        .filter(Workout.user_id == user.id, Workout.started_at >= since)
        .group_by(Workout.id, Workout.started_at)
        .all()
    )
    by_day = {}
    for started_at, day_volume in rows:
        if started_at is None:
            continue
        d = started_at.date()
        by_day[d] = by_day.get(d, 0.0) + float(day_volume or 0)

    activity_log = [
        {"date": d.isoformat(), "volume_kg": by_day[d]} for d in sorted(by_day)
    ]

    streak = service.user_streaks(
        SqlAlchemyStore(), user.id, today, lookback_days=lookback_days
    )

    return (
        jsonify(
            {
                "username": user.username,
                "total_workouts": int(workout_count or 0),
                "total_volume_kg": float(total_volume or 0),
                "join_date": user.created_at.isoformat() if user.created_at else None,
                "activity_log": activity_log,
                **streak.to_dict(),
            }
        ),
        200,
    )


@profile_bp.route("/stats", methods=["PUT"])
@jwt_required()
def update_stats():
    user_id = int(get_jwt_identity())
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404

    data = request.get_json(silent=True) or {}

    try:
        if data.get("weight_kg") is not None:
            weight_kg = float(data["weight_kg"])
            if weight_kg <= 0:
                return jsonify({"message": "weight_kg must be positive"}), 400
            user.current_weight_kg = weight_kg
        if data.get("height_cm") is not None:
            user.height_cm = float(data["height_cm"])
    except (TypeError, ValueError):
        return jsonify({"message": "invalid number"}), 400

    if data.get("gender") in GENDERS:
        user.gender = data["gender"]

    if data.get("activity_level") in ACTIVITY_LEVELS:
        user.activity_level = data["activity_level"]

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Profile update error: {e}")
        return jsonify({"message": "Failed to update profile"}), 500

    return jsonify({"user": user.to_dict()}), 200
