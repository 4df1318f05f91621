"""
Organization routes.

Endpoints:
- GET/POST /api/v1/organizations
- GET/PUT/DELETE /api/v1/organizations/<id>
- GET /api/v1/organizations/<id>/physicians
- DELETE /api/v1/organizations/<id>/physicians/<physician_id>
- GET /api/v1/organizations/<id>/schedules
- GET /api/v1/organizations/<id>/active-schedules?from=&to=
- GET /api/v1/organizations/<id>/requests
- GET /api/v1/organizations/<id>/users
- GET/POST /api/v1/organization-physicians
"""

from flask import Blueprint, jsonify

from oncall.api.common import (
    error_response,
    get_store,
    integer,
    json_body,
    not_found,
    parse_payload,
    parse_query_timestamp,
    public_user,
    text,
    text_list,
)


bp = Blueprint("organizations", __name__, url_prefix="/api/v1/organizations")
assignments_bp = Blueprint("assignments", __name__, url_prefix="/api/v1/organization-physicians")

ORGANIZATION_FIELDS = {
    "name": text,
    "address": text,
    "city": text,
    "state": text,
    "zip_code": text,
    "phone": text,
    "email": text,
    "billing_codes": text_list,
}
REQUIRED = tuple(ORGANIZATION_FIELDS)


# =============================================================================
# CRUD
# =============================================================================

@bp.route("", methods=["GET"])
def list_organizations():
    return jsonify([o.to_dict() for o in get_store().get_organizations()])


@bp.route("/<int:organization_id>", methods=["GET"])
def get_organization(organization_id: int):
    organization = get_store().get_organization(organization_id)
    if organization is None:
        return not_found("Organization")
    return jsonify(organization.to_dict())


@bp.route("", methods=["POST"])
def create_organization():
    fields = parse_payload(json_body(), ORGANIZATION_FIELDS, required=REQUIRED)
    organization = get_store().create_organization(**fields)
    return jsonify(organization.to_dict()), 201


@bp.route("/<int:organization_id>", methods=["PUT"])
def update_organization(organization_id: int):
    changes = parse_payload(json_body(), ORGANIZATION_FIELDS, required=REQUIRED, partial=True)
    organization = get_store().update_organization(organization_id, **changes)
    if organization is None:
        return not_found("Organization")
    return jsonify(organization.to_dict())


@bp.route("/<int:organization_id>", methods=["DELETE"])
def delete_organization(organization_id: int):
    if not get_store().delete_organization(organization_id):
        return not_found("Organization")
    return jsonify({"ok": True, "message": "Organization deleted successfully"})


# =============================================================================
# Related entities
# =============================================================================

@bp.route("/<int:organization_id>/physicians", methods=["GET"])
def list_organization_physicians(organization_id: int):
    physicians = get_store().get_physicians_by_organization(organization_id)
    return jsonify([p.to_dict() for p in physicians])


@bp.route("/<int:organization_id>/physicians/<int:physician_id>", methods=["DELETE"])
def remove_organization_physician(organization_id: int, physician_id: int):
    if not get_store().remove_physician_from_organization(organization_id, physician_id):
        return not_found("Assignment")
    return jsonify({"ok": True, "message": "Physician removed from organization"})


@bp.route("/<int:organization_id>/schedules", methods=["GET"])
def list_organization_schedules(organization_id: int):
    schedules = get_store().get_schedules_by_organization(organization_id)
    return jsonify([s.to_dict() for s in schedules])


@bp.route("/<int:organization_id>/active-schedules", methods=["GET"])
def list_active_schedules(organization_id: int):
    """Active schedules; filtered by overlap only when both from and to are given."""
    start = parse_query_timestamp("from")
    end = parse_query_timestamp("to")
    schedules = get_store().get_active_schedules(organization_id, start, end)
    return jsonify([s.to_dict() for s in schedules])


@bp.route("/<int:organization_id>/requests", methods=["GET"])
def list_organization_requests(organization_id: int):
    requests = get_store().get_requests_by_organization(organization_id)
    return jsonify([r.to_dict() for r in requests])


@bp.route("/<int:organization_id>/users", methods=["GET"])
def list_organization_users(organization_id: int):
    users = get_store().get_users_by_organization(organization_id)
    return jsonify([public_user(u) for u in users])


# =============================================================================
# Assignments
# =============================================================================

@assignments_bp.route("", methods=["GET"])
def list_assignments():
    return jsonify([a.to_dict() for a in get_store().get_assignments()])


@assignments_bp.route("", methods=["POST"])
def assign_physician():
    fields = parse_payload(
        json_body(),
        {"organization_id": integer, "physician_id": integer},
        required=("organization_id", "physician_id"),
    )
    if fields["organization_id"] <= 0 or fields["physician_id"] <= 0:
        return error_response("organization_id and physician_id must be positive")
    assignment = get_store().assign_physician_to_organization(**fields)
    return jsonify(assignment.to_dict()), 201
