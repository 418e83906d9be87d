# backend/app/routes/social_routes.py
from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import jwt_required

from ..analytics import service
from ..analytics.store import SqlAlchemyStore

social_bp = Blueprint("social", __name__)


@social_bp.route("/leaderboard", methods=["GET"])
@jwt_required()
def get_leaderboard():
    """
    Returns:
    {
      "leaderboard": [
        {"username": "alice", "total_volume_kg": 52000.0, "rank": 1},
        {"username": "bob",   "total_volume_kg": 52000.0, "rank": 1},
        {"username": "carol", "total_volume_kg": 31000.0, "rank": 3},
        ...
      ]
    }
    """
    limit = current_app.config.get("ANALYTICS_LEADERBOARD_LIMIT", 10)
    entries = service.leaderboard(SqlAlchemyStore(), limit=limit)
    return jsonify({"leaderboard": [e.to_dict() for e in entries]}), 200
