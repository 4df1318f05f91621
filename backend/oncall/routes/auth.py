"""
Authentication routes.

Endpoints:
- POST /api/v1/auth/login - Check username/password, start a session
- POST /api/v1/auth/register - Create an account
- POST /api/v1/auth/logout - End the session
- GET /api/v1/auth/me - Current user

The session is Flask's signed cookie; it only carries the user id.
"""

import logging

from flask import Blueprint, jsonify, request, session

from oncall.api.common import error_response, get_store, json_body, public_user
from oncall.api.users import parse_user


bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
logger = logging.getLogger("api.auth")

SESSION_USER_KEY = "user_id"


def _get_current_user():
    """User for the current session, or None."""
    user_id = session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    return get_store().get_user(user_id)


# =============================================================================
# Login
# =============================================================================

@bp.route("/login", methods=["POST"])
def login():
    """Login with username/password."""
    data = json_body()
    username = data.get("username") or ""
    password = data.get("password") or ""

    if not isinstance(username, str) or not username:
        return error_response("Username is required")
    if not isinstance(password, str) or not password:
        return error_response("Password is required")

    user = get_store().verify_user_credentials(username, password)
    if user is None:
        logger.info(f"Failed login for {username!r}")
        return error_response("Invalid username or password", 401)

    session[SESSION_USER_KEY] = user.id
    return jsonify(public_user(user))


# =============================================================================
# Registration
# =============================================================================

@bp.route("/register", methods=["POST"])
def register():
    """Create an account. Does not log the new user in."""
    store = get_store()
    fields = parse_user(json_body())

    if store.get_user_by_username(fields["username"]) is not None:
        return error_response("Username already exists")

    user = store.create_user(**fields)
    return jsonify(public_user(user)), 201


# =============================================================================
# Logout / current user
# =============================================================================

@bp.route("/logout", methods=["POST"])
def logout():
    session.pop(SESSION_USER_KEY, None)
    return jsonify({"ok": True, "message": "Logout successful"})


@bp.route("/me", methods=["GET"])
def me():
    """Get current user profile."""
    user = _get_current_user()
    if user is None:
        return error_response("Not authenticated", 401)
    return jsonify(public_user(user))
