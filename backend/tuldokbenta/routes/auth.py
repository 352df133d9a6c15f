# backend/tuldokbenta/routes/auth.py
"""Operator login / logout."""

from flask import Blueprint, request, jsonify, current_app

from ..services import auth_service, session_service
from tuldokbenta.time_utils import to_utc_z


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Exchange username/password for a bearer token.

    Body: {"username": str, "password": str}
    """
    try:
        data = request.get_json(silent=True) or {}
        username = (data.get("username") or "").strip()
        password = data.get("password") or ""

        if not all([username, password]):
            return jsonify({"message": "username and password are required"}), 400

        operator = auth_service.authenticate(username, password)
        if not operator:
            return jsonify({"message": "Invalid credentials"}), 401

        session, token = session_service.create_session(operator.id)
        current_app.logger.info("Operator %s logged in", operator.username)

        return jsonify({
            "operator": operator.to_dict(),
            "token": token,
            "expires_at": to_utc_z(session.expires_at),
            "message": "Login successful",
        }), 200

    except Exception:
        current_app.logger.exception("Failed to login operator")
        return jsonify({"message": "Internal server error"}), 500


@auth_bp.post("/logout")
def logout_route():
    """Revoke the presented bearer token."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return jsonify({"message": "Authentication required"}), 401

    try:
        token = auth_header.split(" ", 1)[1]
        if not session_service.revoke_session(token):
            return jsonify({"message": "Invalid or expired token"}), 401
        return jsonify({"message": "Logged out"}), 200
    except Exception:
        current_app.logger.exception("Failed to logout operator")
        return jsonify({"message": "Internal server error"}), 500
