"""
Consult request routes.

Endpoints:
- GET/POST /api/v1/requests
- GET /api/v1/requests/status/<status>
- GET/PUT/DELETE /api/v1/requests/<id>
- PUT /api/v1/requests/<id>/status - record a status transition
"""

import logging

from flask import Blueprint, jsonify

from oncall.api.common import (
    get_store,
    integer,
    json_body,
    not_found,
    one_of,
    parse_payload,
    text,
)
from oncall.models import RequestPriority, RequestStatus, is_conventional_transition


bp = Blueprint("requests", __name__, url_prefix="/api/v1/requests")
logger = logging.getLogger("api.requests")

REQUEST_FIELDS = {
    "organization_id": integer,
    "physician_id": integer,
    "patient_name": text,
    "patient_mrn": text,
    "diagnosis": text,
    "location": text,
    "notes": text,
    "status": one_of(RequestStatus),
    "priority": one_of(RequestPriority),
}
REQUIRED = (
    "organization_id",
    "physician_id",
    "patient_name",
    "patient_mrn",
    "diagnosis",
    "location",
)
NULLABLE = ("notes",)

STATUS_CHANGE_FIELDS = {
    "status": one_of(RequestStatus),
    "note": text,
    "user_id": integer,
}


def _warn_if_unconventional(request_id: int, current: str, new: str) -> None:
    if current != new and not is_conventional_transition(current, new):
        logger.warning(f"Request {request_id}: unconventional transition {current} -> {new}")


@bp.route("", methods=["GET"])
def list_requests():
    return jsonify([r.to_dict() for r in get_store().get_requests()])


@bp.route("/status/<status>", methods=["GET"])
def list_requests_by_status(status: str):
    return jsonify([r.to_dict() for r in get_store().get_requests_by_status(status)])


@bp.route("/<int:request_id>", methods=["GET"])
def get_request(request_id: int):
    consult = get_store().get_request(request_id)
    if consult is None:
        return not_found("Request")
    return jsonify(consult.to_dict())


@bp.route("", methods=["POST"])
def create_request():
    fields = parse_payload(json_body(), REQUEST_FIELDS, required=REQUIRED, nullable=NULLABLE)
    consult = get_store().create_request(**fields)
    return jsonify(consult.to_dict()), 201


@bp.route("/<int:request_id>", methods=["PUT"])
def update_request(request_id: int):
    """Partial update; a changed status is recorded without note or author."""
    store = get_store()
    changes = parse_payload(
        json_body(), REQUEST_FIELDS, required=REQUIRED, nullable=NULLABLE, partial=True
    )
    existing = store.get_request(request_id)
    if existing is None:
        return not_found("Request")
    if "status" in changes:
        _warn_if_unconventional(request_id, existing.status, changes["status"])

    consult = store.update_request(request_id, **changes)
    if consult is None:
        return not_found("Request")
    return jsonify(consult.to_dict())


@bp.route("/<int:request_id>/status", methods=["PUT"])
def update_request_status(request_id: int):
    """Record a status transition with an optional note and author."""
    store = get_store()
    fields = parse_payload(
        json_body(),
        STATUS_CHANGE_FIELDS,
        required=("status",),
        nullable=("note", "user_id"),
    )
    existing = store.get_request(request_id)
    if existing is None:
        return not_found("Request")
    _warn_if_unconventional(request_id, existing.status, fields["status"])

    consult = store.update_request_status(
        request_id,
        fields["status"],
        note=fields.get("note"),
        user_id=fields.get("user_id"),
    )
    if consult is None:
        return not_found("Request")
    return jsonify(consult.to_dict())


@bp.route("/<int:request_id>", methods=["DELETE"])
def delete_request(request_id: int):
    if not get_store().delete_request(request_id):
        return not_found("Request")
    return jsonify({"ok": True, "message": "Request deleted successfully"})
