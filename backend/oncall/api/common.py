"""
Helpers shared by the API blueprints: store access, payload parsing and
JSON responses.
"""

import enum
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional, Type

from flask import current_app, jsonify, request

from oncall.models import User
from oncall.store import EntityStore


class PayloadError(ValueError):
    """Request body failed validation; reported to the client as 400."""


def get_store() -> EntityStore:
    """The store the running app was created with."""
    return current_app.extensions["store"]


def error_response(message: str, status: int = 400):
    return jsonify({"error": message}), status


def not_found(kind: str):
    return error_response(f"{kind} not found", 404)


def public_user(user: User) -> Dict[str, Any]:
    """User representation without the password."""
    data = user.to_dict()
    data.pop("password", None)
    return data


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PayloadError("Request body must be a JSON object")
    return data


# =============================================================================
# Field parsers: (field name, raw value) -> parsed value, or PayloadError
# =============================================================================

def text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise PayloadError(f"{name} must be a string")
    return value


def integer(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise PayloadError(f"{name} must be an integer")
    return value


def boolean(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise PayloadError(f"{name} must be a boolean")
    return value


def text_list(name: str, value: Any) -> list:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise PayloadError(f"{name} must be a list of strings")
    return list(value)


def timestamp(name: str, value: Any) -> datetime:
    """ISO-8601 timestamp as a naive local datetime, matching the store's clock."""
    if not isinstance(value, str):
        raise PayloadError(f"{name} must be an ISO-8601 timestamp")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise PayloadError(f"{name} must be an ISO-8601 timestamp")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def one_of(enum_cls: Type[enum.Enum]) -> Callable[[str, Any], str]:
    """Parser accepting the values of a string-valued enum."""
    allowed = [member.value for member in enum_cls]

    def parse(name: str, value: Any) -> str:
        if value not in allowed:
            raise PayloadError(f"{name} must be one of: {', '.join(allowed)}")
        return value

    return parse


def parse_payload(
    data: Dict[str, Any],
    parsers: Dict[str, Callable[[str, Any], Any]],
    required: Iterable[str] = (),
    nullable: Iterable[str] = (),
    partial: bool = False,
) -> Dict[str, Any]:
    """
    Validate a JSON object against field parsers.

    Unknown keys are dropped. Only fields listed in nullable accept null.
    With partial=True (PUT updates) no field is required.
    """
    required = set(required)
    nullable = set(nullable)
    if not partial:
        missing = [name for name in parsers if name in required and data.get(name) is None]
        if missing:
            raise PayloadError(f"Missing required field(s): {', '.join(missing)}")

    parsed = {}
    for name, parser in parsers.items():
        if name not in data:
            continue
        value = data[name]
        if value is None and name in nullable:
            parsed[name] = None
        else:
            parsed[name] = parser(name, value)
    return parsed


def parse_query_timestamp(name: str) -> Optional[datetime]:
    """Optional ISO timestamp from the query string."""
    value = request.args.get(name)
    if not value:
        return None
    return timestamp(name, value)
