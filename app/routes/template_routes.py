# backend/app/routes/template_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import db
from ..analytics import service
from ..analytics.store import SqlAlchemyStore, TemplateExerciseInput
from ..models.exercise import Exercise
from ..models.template import TemplateExercise, WorkoutTemplate

templates_bp = Blueprint("templates", __name__)


def _parse_exercise(data):
    """TemplateExerciseInput from a request dict, or None if malformed."""
    try:
        exercise = TemplateExerciseInput(
            exercise_id=int(data["exercise_id"]),
            order_index=int(data.get("order_index") or 0),
            target_sets=int(data["target_sets"]),
            target_reps=int(data["target_reps"]),
            target_weight_kg=float(data["target_weight_kg"])
            if data.get("target_weight_kg") is not None
            else None,
        )
    except (KeyError, TypeError, ValueError):
        return None
    if exercise.target_sets <= 0 or exercise.target_reps <= 0:
        return None
    return exercise


def _own_template(user_id: int, template_id: int):
    return WorkoutTemplate.query.filter_by(id=template_id, user_id=user_id).first()


@templates_bp.route("", methods=["POST"])
@jwt_required()
def create_template():
    user_id = int(get_jwt_identity())
    data = request.get_json(silent=True) or {}

    name = (data.get("name") or "").strip()
    if not name:
        return jsonify({"message": "name is required"}), 400

    template = WorkoutTemplate(
        user_id=user_id,
        name=name,
        description=(data.get("description") or "").strip() or None,
    )
    try:
        db.session.add(template)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Create template error: {e}")
        return jsonify({"message": "Failed to create template"}), 500

    return jsonify({"template": template.to_dict()}), 201


@templates_bp.route("", methods=["GET"])
@jwt_required()
def list_templates():
    user_id = int(get_jwt_identity())
    rows = (
        WorkoutTemplate.query.filter_by(user_id=user_id)
        .order_by(WorkoutTemplate.created_at.desc(), WorkoutTemplate.id.desc())
        .all()
    )
    return jsonify({"templates": [t.to_dict() for t in rows]}), 200


@templates_bp.route("/<int:template_id>", methods=["GET"])
@jwt_required()
def get_template(template_id: int):
    user_id = int(get_jwt_identity())
    template = _own_template(user_id, template_id)
    if not template:
        return jsonify({"message": "template not found"}), 404

    return (
        jsonify(
            {
                "template": template.to_dict(),
                "exercises": [ex.to_dict() for ex in template.exercises],
            }
        ),
        200,
    )


@templates_bp.route("/<int:template_id>/exercises", methods=["POST"])
@jwt_required()
def add_template_exercise(template_id: int):
    """
    Body:
    {
      "exercise_id": 3,
      "order_index": 0,
      "target_sets": 5,
      "target_reps": 5,
      "target_weight_kg": 100.0   # optional
    }
    """
    user_id = int(get_jwt_identity())
    if not _own_template(user_id, template_id):
        return jsonify({"message": "template not found"}), 404

    parsed = _parse_exercise(request.get_json(silent=True) or {})
    if parsed is None:
        return jsonify({"message": "exercise_id, target_sets and target_reps are required"}), 400
    if not db.session.get(Exercise, parsed.exercise_id):
        return jsonify({"message": "exercise not found"}), 404

    row = TemplateExercise(
        template_id=template_id,
        exercise_id=parsed.exercise_id,
        order_index=parsed.order_index,
        target_sets=parsed.target_sets,
        target_reps=parsed.target_reps,
        target_weight_kg=parsed.target_weight_kg,
    )
    try:
        db.session.add(row)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Add template exercise error: {e}")
        return jsonify({"message": "Failed to add exercise"}), 500

    return jsonify({"exercise": row.to_dict()}), 201


@templates_bp.route("/<int:template_id>/exercises", methods=["PUT"])
@jwt_required()
def replace_template_exercises(template_id: int):
    """
    Body: {"exercises": [{...}, {...}]}

    Replaces the whole list in one transaction. Nothing changes unless
    every entry is valid and every insert succeeds.
    """
    user_id = int(get_jwt_identity())
    if not _own_template(user_id, template_id):
        return jsonify({"message": "template not found"}), 404

    data = request.get_json(silent=True) or {}
    raw = data.get("exercises")
    if not isinstance(raw, list):
        return jsonify({"message": "exercises must be a list"}), 400

    exercises = []
    for item in raw:
        parsed = _parse_exercise(item if isinstance(item, dict) else {})
        if parsed is None:
            return jsonify({"message": "invalid exercise entry", "entry": item}), 400
        exercises.append(parsed)

    wanted = sorted({ex.exercise_id for ex in exercises})
    known = {
        row.id for row in Exercise.query.filter(Exercise.id.in_(wanted)).all()
    } if wanted else set()
    missing = [exercise_id for exercise_id in wanted if exercise_id not in known]
    if missing:
        return jsonify({"message": "exercise not found", "exercise_ids": missing}), 404

    rows = service.replace_template_exercises(SqlAlchemyStore(), template_id, exercises)
    return jsonify({"exercises": [r.to_dict() for r in rows]}), 200
