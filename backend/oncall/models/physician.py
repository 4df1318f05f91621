"""
Physician model.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, List


@dataclass
class Physician:
    """
    Physician who can be put on call for one or more organizations.

    Credentials are free-form strings (MD, PhD, FACC, ...).
    """

    READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"id", "created_at"})

    id: int
    first_name: str
    last_name: str
    specialty: str
    phone: str
    email: str
    credentials: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def display_name(self) -> str:
        return f"Dr. {self.first_name} {self.last_name}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "display_name": self.display_name,
            "specialty": self.specialty,
            "phone": self.phone,
            "email": self.email,
            "credentials": list(self.credentials),
            "created_at": self.created_at.isoformat(),
        }
