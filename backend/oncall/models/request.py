"""
Consult request model and its status lifecycle.

A request moves through the statuses below. The transition table is the
convention followed by the UI; the store accepts any status string and
records every change in the request's append-only status history.

    pending -> accepted | declined
    accepted -> in_progress | cancelled
    in_progress -> completed | cancelled
    completed, declined, cancelled: terminal
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional


class RequestStatus(enum.Enum):
    """Status of a consult request."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RequestPriority(enum.Enum):
    """Priority of a consult request."""
    NORMAL = "normal"
    URGENT = "urgent"
    EMERGENCY = "emergency"


STATUS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    RequestStatus.PENDING.value: frozenset({
        RequestStatus.ACCEPTED.value,
        RequestStatus.DECLINED.value,
    }),
    RequestStatus.ACCEPTED.value: frozenset({
        RequestStatus.IN_PROGRESS.value,
        RequestStatus.CANCELLED.value,
    }),
    RequestStatus.IN_PROGRESS.value: frozenset({
        RequestStatus.COMPLETED.value,
        RequestStatus.CANCELLED.value,
    }),
    RequestStatus.COMPLETED.value: frozenset(),
    RequestStatus.DECLINED.value: frozenset(),
    RequestStatus.CANCELLED.value: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in STATUS_TRANSITIONS.items() if not targets
)


def is_conventional_transition(current: str, new: str) -> bool:
    """Whether current -> new is a transition the UI would offer."""
    return new in STATUS_TRANSITIONS.get(current, frozenset())


@dataclass(frozen=True)
class StatusHistoryEntry:
    """One status change. Entries are immutable once recorded."""
    status: str
    timestamp: datetime
    note: Optional[str] = None
    user_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "timestamp": self.timestamp.isoformat(),
            "note": self.note,
            "user_id": self.user_id,
        }


@dataclass
class Request:
    """
    Consult request for a patient, addressed to a physician at an
    organization.

    status_history is never empty once the request exists: its first entry
    is the status the request was created with.
    """

    READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"id", "created_at", "updated_at", "status_history"}
    )

    id: int
    organization_id: int
    physician_id: int
    patient_name: str
    patient_mrn: str
    diagnosis: str
    location: str
    notes: Optional[str] = None
    status: str = RequestStatus.PENDING.value
    priority: str = RequestPriority.NORMAL.value
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    status_history: List[StatusHistoryEntry] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "physician_id": self.physician_id,
            "patient_name": self.patient_name,
            "patient_mrn": self.patient_mrn,
            "diagnosis": self.diagnosis,
            "location": self.location,
            "notes": self.notes,
            "status": self.status,
            "priority": self.priority,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "status_history": [entry.to_dict() for entry in self.status_history],
        }
