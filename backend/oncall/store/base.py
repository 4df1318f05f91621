"""
EntityStore: the data-access interface used by the API layer.

Every lookup that can miss returns None (single entity) or False (delete,
unassign) instead of raising. Lists are returned as new list objects; an
empty list is a successful result, not a miss.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from oncall.models import (
    Organization,
    OrganizationPhysician,
    Physician,
    Request,
    Schedule,
    User,
)


class EntityStore(ABC):
    """CRUD and relationship queries over organizations, physicians,
    assignments, schedules, requests and users."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as used for created_at, updated_at and history entries."""

    # =========================================================================
    # Organizations
    # =========================================================================

    @abstractmethod
    def get_organizations(self) -> List[Organization]: ...

    @abstractmethod
    def get_organization(self, organization_id: int) -> Optional[Organization]: ...

    @abstractmethod
    def create_organization(
        self,
        name: str,
        address: str,
        city: str,
        state: str,
        zip_code: str,
        phone: str,
        email: str,
        billing_codes: Optional[List[str]] = None,
    ) -> Organization: ...

    @abstractmethod
    def update_organization(self, organization_id: int, **changes) -> Optional[Organization]: ...

    @abstractmethod
    def delete_organization(self, organization_id: int) -> bool: ...

    # =========================================================================
    # Physicians
    # =========================================================================

    @abstractmethod
    def get_physicians(self) -> List[Physician]: ...

    @abstractmethod
    def get_physician(self, physician_id: int) -> Optional[Physician]: ...

    @abstractmethod
    def get_physicians_by_organization(self, organization_id: int) -> List[Physician]: ...

    @abstractmethod
    def create_physician(
        self,
        first_name: str,
        last_name: str,
        specialty: str,
        phone: str,
        email: str,
        credentials: Optional[List[str]] = None,
    ) -> Physician: ...

    @abstractmethod
    def update_physician(self, physician_id: int, **changes) -> Optional[Physician]: ...

    @abstractmethod
    def delete_physician(self, physician_id: int) -> bool: ...

    # =========================================================================
    # Organization <-> physician assignments
    # =========================================================================

    @abstractmethod
    def get_assignments(self) -> List[OrganizationPhysician]: ...

    @abstractmethod
    def assign_physician_to_organization(
        self, organization_id: int, physician_id: int
    ) -> OrganizationPhysician: ...

    @abstractmethod
    def remove_physician_from_organization(self, organization_id: int, physician_id: int) -> bool: ...

    @abstractmethod
    def get_organizations_by_physician(self, physician_id: int) -> List[Organization]: ...

    # =========================================================================
    # Schedules
    # =========================================================================

    @abstractmethod
    def get_schedules(self) -> List[Schedule]: ...

    @abstractmethod
    def get_schedule(self, schedule_id: int) -> Optional[Schedule]: ...

    @abstractmethod
    def get_schedules_by_organization(self, organization_id: int) -> List[Schedule]: ...

    @abstractmethod
    def get_schedules_by_physician(self, physician_id: int) -> List[Schedule]: ...

    @abstractmethod
    def get_active_schedules(
        self,
        organization_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Schedule]: ...

    @abstractmethod
    def create_schedule(
        self,
        organization_id: int,
        physician_id: int,
        start_time: datetime,
        end_time: datetime,
        title: str,
        description: Optional[str] = None,
        is_active: bool = True,
    ) -> Schedule: ...

    @abstractmethod
    def update_schedule(self, schedule_id: int, **changes) -> Optional[Schedule]: ...

    @abstractmethod
    def delete_schedule(self, schedule_id: int) -> bool: ...

    # =========================================================================
    # Requests
    # =========================================================================

    @abstractmethod
    def get_requests(self) -> List[Request]: ...

    @abstractmethod
    def get_request(self, request_id: int) -> Optional[Request]: ...

    @abstractmethod
    def get_requests_by_organization(self, organization_id: int) -> List[Request]: ...

    @abstractmethod
    def get_requests_by_physician(self, physician_id: int) -> List[Request]: ...

    @abstractmethod
    def get_requests_by_status(self, status: str) -> List[Request]: ...

    @abstractmethod
    def create_request(
        self,
        organization_id: int,
        physician_id: int,
        patient_name: str,
        patient_mrn: str,
        diagnosis: str,
        location: str,
        notes: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Request: ...

    @abstractmethod
    def update_request(self, request_id: int, **changes) -> Optional[Request]: ...

    @abstractmethod
    def update_request_status(
        self,
        request_id: int,
        status: str,
        note: Optional[str] = None,
        user_id: Optional[int] = None,
        timestamp: Optional[datetime] = None,
    ) -> Optional[Request]: ...

    @abstractmethod
    def delete_request(self, request_id: int) -> bool: ...

    # =========================================================================
    # Users
    # =========================================================================

    @abstractmethod
    def get_users(self) -> List[User]: ...

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def get_users_by_organization(self, organization_id: int) -> List[User]: ...

    @abstractmethod
    def create_user(
        self,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        email: str,
        role: str,
        organization_id: Optional[int] = None,
        physician_id: Optional[int] = None,
    ) -> User: ...

    @abstractmethod
    def update_user(self, user_id: int, **changes) -> Optional[User]: ...

    @abstractmethod
    def delete_user(self, user_id: int) -> bool: ...

    def verify_user_credentials(self, username: str, password: str) -> Optional[User]:
        """
        Return the user when both username and password match exactly.

        A wrong username and a wrong password are indistinguishable.
        """
        user = self.get_user_by_username(username)
        if user is None or user.password != password:
            return None
        return user
