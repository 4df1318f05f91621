"""
Physician routes.

Endpoints:
- GET/POST /api/v1/physicians
- GET/PUT/DELETE /api/v1/physicians/<id>
- GET /api/v1/physicians/<id>/organizations
- GET /api/v1/physicians/<id>/schedules
- GET /api/v1/physicians/<id>/requests
"""

from flask import Blueprint, jsonify

from oncall.api.common import get_store, json_body, not_found, parse_payload, text, text_list


bp = Blueprint("physicians", __name__, url_prefix="/api/v1/physicians")

PHYSICIAN_FIELDS = {
    "first_name": text,
    "last_name": text,
    "specialty": text,
    "phone": text,
    "email": text,
    "credentials": text_list,
}
REQUIRED = tuple(PHYSICIAN_FIELDS)


@bp.route("", methods=["GET"])
def list_physicians():
    return jsonify([p.to_dict() for p in get_store().get_physicians()])


@bp.route("/<int:physician_id>", methods=["GET"])
def get_physician(physician_id: int):
    physician = get_store().get_physician(physician_id)
    if physician is None:
        return not_found("Physician")
    return jsonify(physician.to_dict())


@bp.route("", methods=["POST"])
def create_physician():
    fields = parse_payload(json_body(), PHYSICIAN_FIELDS, required=REQUIRED)
    physician = get_store().create_physician(**fields)
    return jsonify(physician.to_dict()), 201


@bp.route("/<int:physician_id>", methods=["PUT"])
def update_physician(physician_id: int):
    changes = parse_payload(json_body(), PHYSICIAN_FIELDS, required=REQUIRED, partial=True)
    physician = get_store().update_physician(physician_id, **changes)
    if physician is None:
        return not_found("Physician")
    return jsonify(physician.to_dict())


@bp.route("/<int:physician_id>", methods=["DELETE"])
def delete_physician(physician_id: int):
    # Assignments, schedules and requests keep pointing at the deleted id.
    if not get_store().delete_physician(physician_id):
        return not_found("Physician")
    return jsonify({"ok": True, "message": "Physician deleted successfully"})


@bp.route("/<int:physician_id>/organizations", methods=["GET"])
def list_physician_organizations(physician_id: int):
    organizations = get_store().get_organizations_by_physician(physician_id)
    return jsonify([o.to_dict() for o in organizations])


@bp.route("/<int:physician_id>/schedules", methods=["GET"])
def list_physician_schedules(physician_id: int):
    schedules = get_store().get_schedules_by_physician(physician_id)
    return jsonify([s.to_dict() for s in schedules])


@bp.route("/<int:physician_id>/requests", methods=["GET"])
def list_physician_requests(physician_id: int):
    requests = get_store().get_requests_by_physician(physician_id)
    return jsonify([r.to_dict() for r in requests])
