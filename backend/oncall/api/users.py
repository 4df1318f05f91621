"""
User routes. Passwords are never included in responses.

Endpoints:
- GET/POST /api/v1/users
- GET/PUT/DELETE /api/v1/users/<id>
"""

from flask import Blueprint, jsonify

from oncall.api.common import (
    error_response,
    get_store,
    integer,
    json_body,
    not_found,
    one_of,
    parse_payload,
    public_user,
    text,
)
from oncall.models import UserRole


bp = Blueprint("users", __name__, url_prefix="/api/v1/users")

USER_FIELDS = {
    "username": text,
    "password": text,
    "first_name": text,
    "last_name": text,
    "email": text,
    "role": one_of(UserRole),
    "organization_id": integer,
    "physician_id": integer,
}
REQUIRED = ("username", "password", "first_name", "last_name", "email", "role")
NULLABLE = ("organization_id", "physician_id")


def parse_user(data, partial=False):
    return parse_payload(data, USER_FIELDS, required=REQUIRED, nullable=NULLABLE, partial=partial)


@bp.route("", methods=["GET"])
def list_users():
    return jsonify([public_user(u) for u in get_store().get_users()])


@bp.route("/<int:user_id>", methods=["GET"])
def get_user(user_id: int):
    user = get_store().get_user(user_id)
    if user is None:
        return not_found("User")
    return jsonify(public_user(user))


@bp.route("", methods=["POST"])
def create_user():
    store = get_store()
    fields = parse_user(json_body())
    if store.get_user_by_username(fields["username"]) is not None:
        return error_response("Username already exists")
    user = store.create_user(**fields)
    return jsonify(public_user(user)), 201


@bp.route("/<int:user_id>", methods=["PUT"])
def update_user(user_id: int):
    store = get_store()
    changes = parse_user(json_body(), partial=True)
    if "username" in changes:
        other = store.get_user_by_username(changes["username"])
        if other is not None and other.id != user_id:
            return error_response("Username already exists")

    user = store.update_user(user_id, **changes)
    if user is None:
        return not_found("User")
    return jsonify(public_user(user))


@bp.route("/<int:user_id>", methods=["DELETE"])
def delete_user(user_id: int):
    if not get_store().delete_user(user_id):
        return not_found("User")
    return jsonify({"ok": True, "message": "User deleted successfully"})
