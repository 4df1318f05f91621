"""
On-call schedule model.

One schedule is one coverage interval for one physician at one
organization, e.g. "Night Rotation - Monday" from 20:00 to 08:00.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, Optional


@dataclass
class Schedule:
    """On-call coverage interval."""

    READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"id", "created_at"})

    id: int
    organization_id: int
    physician_id: int
    start_time: datetime
    end_time: datetime
    title: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Inclusive overlap test against the window [start, end]."""
        return self.start_time <= end and self.end_time >= start

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "physician_id": self.physician_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "title": self.title,
            "description": self.description,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
        }
