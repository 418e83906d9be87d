# backend/app/routes/workout_routes.py

from datetime import datetime, timezone
from typing import Any, Optional

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from sqlalchemy import func

from .. import db
from ..analytics import service
from ..analytics.scoring import ScoringPolicy
from ..analytics.store import SqlAlchemyStore
from ..models.exercise import Exercise
from ..models.template import WorkoutTemplate
from ..models.workout import Workout, WorkoutSet

workouts_bp = Blueprint("workouts", __name__)

HISTORY_LIMIT = 20
SETS_LIMIT = 1000


# ------------------------------
# Helpers
# ------------------------------
def _safe_int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _safe_int_or_none(v: Any) -> Optional[int]:
    if v is None:
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _safe_float_or_none(v: Any) -> Optional[float]:
    if v is None:
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


def _parse_dt(v: Any) -> Optional[datetime]:
    if not v:
        return None
    try:
        dt = datetime.fromisoformat(str(v).replace("Z", "+00:00"))
    except ValueError:
        return None
    # stored as naive UTC
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _own_workout(user_id: int, workout_id: int) -> Optional[Workout]:
    return Workout.query.filter_by(id=workout_id, user_id=user_id).first()


# ------------------------------
# POST /api/workouts
# ------------------------------
@workouts_bp.route("", methods=["POST"])
@jwt_required()
def start_workout():
    """
    Body (all optional):
    {
      "name": "Push day",
      "start_time": "2025-11-21T10:00:00Z",
      "template_id": 3
    }
    """
    user_id = int(get_jwt_identity())
    data = request.get_json(silent=True) or {}

    name = (data.get("name") or "").strip() or None
    template_id = _safe_int_or_none(data.get("template_id"))
    started_at = _parse_dt(data.get("start_time")) or datetime.utcnow()

    if template_id is not None:
        template = WorkoutTemplate.query.filter_by(id=template_id, user_id=user_id).first()
        if not template:
            return jsonify({"message": "template not found"}), 404
        name = name or template.name

    try:
        workout = Workout(
            user_id=user_id,
            name=name or "Workout",
            template_id=template_id,
            started_at=started_at,
        )
        db.session.add(workout)
        db.session.commit()

        return jsonify({"workout": workout.to_dict()}), 201

    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Start workout error: {e}")
        return jsonify({"message": "Failed to start workout"}), 500


# ------------------------------
# GET /api/workouts/active
# ------------------------------
@workouts_bp.route("/active", methods=["GET"])
@jwt_required()
def active_workout():
    user_id = int(get_jwt_identity())

    workout = (
        Workout.query.filter(Workout.user_id == user_id, Workout.ended_at.is_(None))
        .order_by(Workout.started_at.desc())
        .first()
    )
    if not workout:
        return jsonify({"message": "no active workout"}), 404

    return jsonify({"workout": workout.to_dict()}), 200


# ------------------------------
# GET /api/workouts/history
# ------------------------------
@workouts_bp.route("/history", methods=["GET"])
@jwt_required()
def workout_history():
    """
    Last completed workouts, newest first, with volume and the number of
    distinct exercises trained.
    """
    user_id = int(get_jwt_identity())

    volume = func.coalesce(func.sum(WorkoutSet.weight_kg * WorkoutSet.reps), 0)
    rows = (
        db.session.query(
            Workout,
            volume.label("total_volume"),
            func.count(func.distinct(WorkoutSet.exercise_id)).label("exercise_count"),
        )
        .outerjoin(WorkoutSet, WorkoutSet.workout_id == Workout.id)
        .filter(Workout.user_id == user_id, Workout.ended_at.isnot(None))
        .group_by(Workout.id)
        .order_by(Workout.started_at.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )

    history = []
    for workout, total_volume, exercise_count in rows:
        entry = workout.to_dict()
        entry["total_volume_kg"] = float(total_volume or 0)
        entry["exercise_count"] = int(exercise_count or 0)
        history.append(entry)

    return jsonify({"history": history}), 200


# ------------------------------
# POST /api/workouts/sets
# ------------------------------
@workouts_bp.route("/sets", methods=["POST"])
@jwt_required()
def log_set():
    """
    Body:
    {
      "workout_id": 12,
      "exercise_id": 3,
      "weight_kg": 100.0,
      "reps": 5,
      "rpe": 8.5          # optional
    }

    Returns the stored set plus is_new_max_weight / is_new_rep_pr.
    """
    user_id = int(get_jwt_identity())
    data = request.get_json(silent=True) or {}

    workout_id = _safe_int_or_none(data.get("workout_id"))
    exercise_id = _safe_int_or_none(data.get("exercise_id"))
    weight_kg = _safe_float_or_none(data.get("weight_kg"))
    reps = _safe_int_or_none(data.get("reps"))
    rpe = _safe_float_or_none(data.get("rpe"))

    if workout_id is None or exercise_id is None:
        return jsonify({"message": "workout_id and exercise_id are required"}), 400
    if weight_kg is None or weight_kg <= 0:
        return jsonify({"message": "weight_kg must be a positive number"}), 400
    if reps is None or reps <= 0:
        return jsonify({"message": "reps must be a positive integer"}), 400

    if not _own_workout(user_id, workout_id):
        return jsonify({"message": "workout not found"}), 404
    if not db.session.get(Exercise, exercise_id):
        return jsonify({"message": "exercise not found"}), 404

    logged = service.log_set(
        SqlAlchemyStore(),
        workout_id,
        exercise_id,
        weight_kg,
        reps,
        rpe=rpe,
        min_reps=current_app.config.get("ANALYTICS_REP_PR_MIN_REPS", 5),
    )
    return jsonify(logged.to_dict()), 201


# ------------------------------
# GET /api/workouts/sets
# ------------------------------
@workouts_bp.route("/sets", methods=["GET"])
@jwt_required()
def list_sets():
    user_id = int(get_jwt_identity())
    limit = max(1, min(_safe_int(request.args.get("limit"), SETS_LIMIT), SETS_LIMIT))

    rows = (
        WorkoutSet.query.join(Workout, WorkoutSet.workout_id == Workout.id)
        .filter(Workout.user_id == user_id)
        .order_by(WorkoutSet.created_at.desc(), WorkoutSet.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify({"sets": [s.to_dict() for s in rows]}), 200


# ------------------------------
# DELETE /api/workouts/sets/<id>
# ------------------------------
@workouts_bp.route("/sets/<int:set_id>", methods=["DELETE"])
@jwt_required()
def delete_set(set_id: int):
    user_id = int(get_jwt_identity())

    workout_set = (
        WorkoutSet.query.join(Workout, WorkoutSet.workout_id == Workout.id)
        .filter(WorkoutSet.id == set_id, Workout.user_id == user_id)
        .first()
    )
    if not workout_set:
        return jsonify({"message": "set not found"}), 404

    try:
        db.session.delete(workout_set)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Delete set error: {e}")
        return jsonify({"message": "Failed to delete set"}), 500

    return "", 204


# ------------------------------
# POST /api/workouts/<id>/finish
# ------------------------------
@workouts_bp.route("/<int:workout_id>/finish", methods=["POST"])
@jwt_required()
def finish_workout(workout_id: int):
    """
    Returns:
    {
      "id": 12,
      "end_time": "2025-11-21T11:02:00",
      "duration_minutes": 62.0,
      "calories_burned": 310,
      "badges": ["Heavy Lifter"]
    }

    409 when the workout was already finished.
    """
    user_id = int(get_jwt_identity())

    if not _own_workout(user_id, workout_id):
        return jsonify({"message": "workout not found"}), 404

    result = service.complete_workout(
        SqlAlchemyStore(),
        workout_id,
        now=datetime.utcnow(),
        policy=ScoringPolicy.from_config(current_app.config),
    )
    return jsonify(result.to_dict()), 200
