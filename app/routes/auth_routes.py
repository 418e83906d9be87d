# backend/app/routes/auth_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required
from sqlalchemy import or_

from .. import db
from ..models.user import User

auth_bp = Blueprint("auth", __name__)

MIN_PASSWORD_LENGTH = 6


def _session_payload(user: User):
    return {
        "token": create_access_token(identity=str(user.id)),
        "user": user.to_dict(),
    }


def _find_lifter(identifier: str):
    """Match a login identifier against email (case-insensitive) or username."""
    return User.query.filter(
        or_(User.email == identifier.lower(), User.username == identifier)
    ).first()


@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Body: {"email", "username", "password", "weight_kg"?}

    weight_kg seeds the body weight used for calorie estimates.
    """
    data = request.get_json(silent=True) or {}

    email = (data.get("email") or "").strip().lower()
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""

    if not (email and username and password):
        return jsonify({"message": "email, username and password are required"}), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return (
            jsonify({"message": f"password needs at least {MIN_PASSWORD_LENGTH} characters"}),
            400,
        )

    taken = User.query.filter(or_(User.email == email, User.username == username)).first()
    if taken:
        field = "email" if taken.email == email else "username"
        return jsonify({"message": f"{field} is already registered"}), 400

    body_weight = None
    if data.get("weight_kg") is not None:
        try:
            body_weight = float(data["weight_kg"])
        except (TypeError, ValueError):
            return jsonify({"message": "weight_kg must be a number"}), 400
        if body_weight <= 0:
            return jsonify({"message": "weight_kg must be positive"}), 400

    lifter = User(email=email, username=username, current_weight_kg=body_weight)
    lifter.set_password(password)

    try:
        db.session.add(lifter)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Could not register {username}: {e}")
        return jsonify({"message": "Failed to register"}), 500

    current_app.logger.info(f"Registered lifter {lifter.id} ({username})")
    return jsonify(_session_payload(lifter)), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    """Body: {"identifier" | "email" | "username", "password"}"""
    data = request.get_json(silent=True) or {}

    identifier = (
        data.get("identifier") or data.get("email") or data.get("username") or ""
    ).strip()
    password = data.get("password") or ""
    if not (identifier and password):
        return jsonify({"message": "identifier and password are required"}), 400

    lifter = _find_lifter(identifier)
    if lifter is None or not lifter.check_password(password):
        current_app.logger.info("Rejected login attempt")
        return jsonify({"message": "invalid credentials"}), 401

    return jsonify(_session_payload(lifter)), 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    lifter = db.session.get(User, int(get_jwt_identity()))
    if lifter is None:
        return jsonify({"message": "user not found"}), 404
    return jsonify({"user": lifter.to_dict()}), 200
