# backend/app/routes/exercise_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.exercise import Exercise

exercises_bp = Blueprint("exercises", __name__)


@exercises_bp.route("", methods=["GET"])
@jwt_required()
def list_exercises():
    rows = Exercise.query.order_by(Exercise.name.asc()).all()
    return jsonify({"exercises": [e.to_dict() for e in rows]}), 200


@exercises_bp.route("", methods=["POST"])
@jwt_required()
def create_exercise():
    data = request.get_json(silent=True) or {}

    name = (data.get("name") or "").strip()
    if not name:
        return jsonify({"message": "name is required"}), 400

    if Exercise.query.filter_by(name=name).first():
        return jsonify({"message": "exercise already exists"}), 400

    exercise = Exercise(
        name=name,
        muscle_group=(data.get("muscle_group") or "").strip() or None,
    )
    try:
        db.session.add(exercise)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Create exercise error: {e}")
        return jsonify({"message": "Failed to create exercise"}), 500

    return jsonify({"exercise": exercise.to_dict()}), 201
