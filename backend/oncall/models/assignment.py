"""
Organization <-> physician assignment rows.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class OrganizationPhysician:
    """
    Many-to-many link between an organization and a physician.

    The pair is not unique: assigning twice creates two rows.
    """

    id: int
    organization_id: int
    physician_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "physician_id": self.physician_id,
        }
