# backend/app/routes/rewards_routes.py
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import db
from ..models.badge import UserBadge
from ..models.workout import Workout

rewards_bp = Blueprint("rewards", __name__)


@rewards_bp.route("/badges", methods=["GET"])
@jwt_required()
def list_badges():
    """
    Returns:
    {
      "summary": {"total": 3, "by_name": {"Heavy Lifter": 2, "Marathoner": 1}},
      "badges": [
        {
          "id": 7,
          "workout_id": 12,
          "workout_name": "Leg day",
          "badge_name": "Heavy Lifter",
          "awarded_at": "2025-11-21T10:05:00"
        },
        ...
      ]
    }
    """
    user_id = int(get_jwt_identity())

    rows = (
        db.session.query(UserBadge, Workout)
        .join(Workout, UserBadge.workout_id == Workout.id)
        .filter(UserBadge.user_id == user_id)
        .order_by(UserBadge.awarded_at.desc(), UserBadge.id.desc())
        .all()
    )

    badges = []
    by_name = {}
    for badge, workout in rows:
        item = badge.to_dict()
        item["workout_name"] = workout.name
        badges.append(item)
        by_name[badge.badge_name] = by_name.get(badge.badge_name, 0) + 1

    summary = {
        "total": len(badges),
        "by_name": by_name,
    }

    return jsonify({"summary": summary, "badges": badges}), 200
