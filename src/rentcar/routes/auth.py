from typing import Optional

from flask import Blueprint, request, jsonify, current_app

auth_bp = Blueprint("auth", __name__)


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


def current_session():
    """Session of the caller, or None when not authenticated."""
    return current_app.auth.get_session(bearer_token())


@auth_bp.route("/auth/login", methods=["POST"])
def login():
    """
    Sign in with email and password.
    Returns:
        JSON with the session (user id, email, role, access token).
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    email = data.get("email")
    password = data.get("password")
    if not email or not password:
        return jsonify({"status": "error", "message": "email and password are required"}), 400

    session = current_app.auth.sign_in(email, password)
    if session is None:
        return jsonify({"status": "error", "message": "Login failed"}), 401

    result = session.to_dict()
    result["refresh_token"] = session.refresh_token
    return jsonify({"status": "success", "session": result}), 200


@auth_bp.route("/auth/logout", methods=["POST"])
def logout():
    signed_out = current_app.auth.sign_out(bearer_token())
    return jsonify({"status": "success", "signed_out": signed_out}), 200


@auth_bp.route("/auth/session", methods=["GET"])
def get_session():
    session = current_session()
    if session is None:
        return jsonify({"authenticated": False}), 200
    return jsonify({"authenticated": True, "session": session.to_dict()}), 200
