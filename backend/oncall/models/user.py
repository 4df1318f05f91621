"""
Application user model.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, Optional


class UserRole(enum.Enum):
    """Role of an application user."""
    ADMIN = "admin"
    PHYSICIAN = "physician"


@dataclass
class User:
    """
    Application user.

    The password is kept as given. to_dict() returns it too; callers that
    send users over the wire must drop it first.
    """

    READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"id", "created_at"})

    id: int
    username: str
    password: str
    first_name: str
    last_name: str
    email: str
    role: str
    organization_id: Optional[int] = None
    physician_id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "role": self.role,
            "organization_id": self.organization_id,
            "physician_id": self.physician_id,
            "created_at": self.created_at.isoformat(),
        }
