"""
Organization model.

A hospital or clinic that publishes on-call schedules and receives
consult requests.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, List


@dataclass
class Organization:
    """Organization record."""

    READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"id", "created_at"})

    id: int
    name: str
    address: str
    city: str
    state: str
    zip_code: str
    phone: str
    email: str
    billing_codes: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "phone": self.phone,
            "email": self.email,
            "billing_codes": list(self.billing_codes),
            "created_at": self.created_at.isoformat(),
        }
