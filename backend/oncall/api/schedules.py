"""
Schedule routes.

Endpoints:
- GET/POST /api/v1/schedules
- GET/PUT/DELETE /api/v1/schedules/<id>
"""

from flask import Blueprint, jsonify

from oncall.api.common import (
    PayloadError,
    boolean,
    get_store,
    integer,
    json_body,
    not_found,
    parse_payload,
    text,
    timestamp,
)


bp = Blueprint("schedules", __name__, url_prefix="/api/v1/schedules")

SCHEDULE_FIELDS = {
    "organization_id": integer,
    "physician_id": integer,
    "start_time": timestamp,
    "end_time": timestamp,
    "title": text,
    "description": text,
    "is_active": boolean,
}
REQUIRED = ("organization_id", "physician_id", "start_time", "end_time", "title")
NULLABLE = ("description",)


def _check_interval(fields, existing=None):
    start = fields.get("start_time", existing.start_time if existing else None)
    end = fields.get("end_time", existing.end_time if existing else None)
    if start is not None and end is not None and end < start:
        raise PayloadError("end_time must not be before start_time")


@bp.route("", methods=["GET"])
def list_schedules():
    return jsonify([s.to_dict() for s in get_store().get_schedules()])


@bp.route("/<int:schedule_id>", methods=["GET"])
def get_schedule(schedule_id: int):
    schedule = get_store().get_schedule(schedule_id)
    if schedule is None:
        return not_found("Schedule")
    return jsonify(schedule.to_dict())


@bp.route("", methods=["POST"])
def create_schedule():
    fields = parse_payload(json_body(), SCHEDULE_FIELDS, required=REQUIRED, nullable=NULLABLE)
    _check_interval(fields)
    schedule = get_store().create_schedule(**fields)
    return jsonify(schedule.to_dict()), 201


@bp.route("/<int:schedule_id>", methods=["PUT"])
def update_schedule(schedule_id: int):
    store = get_store()
    changes = parse_payload(
        json_body(), SCHEDULE_FIELDS, required=REQUIRED, nullable=NULLABLE, partial=True
    )
    existing = store.get_schedule(schedule_id)
    if existing is None:
        return not_found("Schedule")
    _check_interval(changes, existing)

    schedule = store.update_schedule(schedule_id, **changes)
    if schedule is None:
        return not_found("Schedule")
    return jsonify(schedule.to_dict())


@bp.route("/<int:schedule_id>", methods=["DELETE"])
def delete_schedule(schedule_id: int):
    if not get_store().delete_schedule(schedule_id):
        return not_found("Schedule")
    return jsonify({"ok": True, "message": "Schedule deleted successfully"})
