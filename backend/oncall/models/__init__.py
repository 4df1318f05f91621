"""
Entity models for the on-call manager.

Plain dataclasses held by the entity store; each exposes to_dict() for
API responses.
"""

from .organization import Organization
from .physician import Physician
from .assignment import OrganizationPhysician
from .schedule import Schedule
from .request import (
    Request,
    RequestPriority,
    RequestStatus,
    StatusHistoryEntry,
    STATUS_TRANSITIONS,
    TERMINAL_STATUSES,
    is_conventional_transition,
)
from .user import User, UserRole

__all__ = [
    "Organization",
    "Physician",
    "OrganizationPhysician",
    "Schedule",
    # Requests
    "Request",
    "RequestPriority",
    "RequestStatus",
    "StatusHistoryEntry",
    "STATUS_TRANSITIONS",
    "TERMINAL_STATUSES",
    "is_conventional_transition",
    # Users
    "User",
    "UserRole",
]
