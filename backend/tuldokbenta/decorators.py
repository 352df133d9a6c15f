# Overview: Request decorators for API routes.

from functools import wraps
from flask import current_app, g, jsonify, request

from .services import session_service


def require_auth(f):
    """
    Require a valid operator bearer token.

    Sets g.current_operator for the request. Skipped entirely when
    AUTH_REQUIRED is off (local development and tests).

    Returns 401 if:
    - No Authorization header
    - Invalid, revoked or expired token
    - Operator deactivated
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_app.config.get("AUTH_REQUIRED", True):
            g.current_operator = None
            return f(*args, **kwargs)

        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"message": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1]
        operator = session_service.validate_session(token)
        if not operator:
            return jsonify({"message": "Invalid or expired token"}), 401

        g.current_operator = operator
        return f(*args, **kwargs)

    return decorated_function
