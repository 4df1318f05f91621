"""
MemoryStore: volatile, process-local implementation of EntityStore.

Entities live in per-kind tables keyed by id. Ids start at 1 per kind and
are never reused, even after deletes. Nothing is persisted.

Usage:
    store = MemoryStore()
    org = store.create_organization(name="Memorial Healthcare", ...)
    store.update_organization(org.id, phone="555-000-1111")
"""

import dataclasses
import functools
import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from oncall.models import (
    Organization,
    OrganizationPhysician,
    Physician,
    Request,
    RequestPriority,
    RequestStatus,
    Schedule,
    StatusHistoryEntry,
    User,
)
from oncall.store.base import EntityStore


T = TypeVar("T")


def _detached(entity: T) -> T:
    """Copy of an entity that shares no list with the stored row."""
    lists = {
        f.name: list(getattr(entity, f.name))
        for f in dataclasses.fields(entity)
        if isinstance(getattr(entity, f.name), list)
    }
    return dataclasses.replace(entity, **lists)


class _Table(Generic[T]):
    """
    Entities of one kind keyed by id, with their own id sequence.

    Rows go in and come out as copies, so callers never hold a reference
    into the table.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self.rows: Dict[int, T] = {}
        self._next_id = 1

    def next_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def all(self) -> List[T]:
        return [_detached(row) for row in self.rows.values()]

    def get(self, entity_id: int) -> Optional[T]:
        row = self.rows.get(entity_id)
        return _detached(row) if row is not None else None

    def put(self, entity: T) -> T:
        self.rows[entity.id] = _detached(entity)
        return entity

    def remove(self, entity_id: int) -> bool:
        return self.rows.pop(entity_id, None) is not None

    def where(self, predicate: Callable[[T], bool]) -> List[T]:
        return [_detached(row) for row in self.rows.values() if predicate(row)]


def _synchronized(method):
    """Run the decorated store method under the store lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class MemoryStore(EntityStore):
    """
    In-memory entity store.

    All public operations hold one re-entrant lock, so each call is atomic
    with respect to the others when the WSGI server runs threaded.

    Args:
        clock: Returns the current time; used for created_at, updated_at and
            status history timestamps. Defaults to datetime.now.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or datetime.now
        self._lock = threading.RLock()
        self.logger = logging.getLogger("store.MemoryStore")

        self._organizations: _Table[Organization] = _Table("organization")
        self._physicians: _Table[Physician] = _Table("physician")
        self._assignments: _Table[OrganizationPhysician] = _Table("organization_physician")
        self._schedules: _Table[Schedule] = _Table("schedule")
        self._requests: _Table[Request] = _Table("request")
        self._users: _Table[User] = _Table("user")

    @classmethod
    def with_demo_data(cls, seed: Optional[int] = None, **kwargs) -> "MemoryStore":
        """
        Build a store pre-loaded with the synthetic demo dataset.

        The dataset is laid out around the store's own clock.
        """
        from oncall.services.demo_data import seed_demo_data

        store = cls(**kwargs)
        seed_demo_data(store, seed=seed)
        return store

    def now(self) -> datetime:
        return self._clock()

    # =========================================================================
    # Shared helpers
    # =========================================================================

    def _merge(self, table: _Table, entity_id: int, changes: Dict[str, Any]):
        """Shallow-merge changes onto a stored entity; None if it is absent."""
        existing = table.get(entity_id)
        if existing is None:
            return None

        self._check_patch(type(existing), changes)
        updated = dataclasses.replace(existing, **changes)
        table.put(updated)
        self.logger.debug(f"Updated {table.kind} {entity_id}: {sorted(changes)}")
        return updated

    @staticmethod
    def _check_patch(entity_cls, changes: Dict[str, Any]) -> None:
        allowed = {f.name for f in dataclasses.fields(entity_cls)} - entity_cls.READ_ONLY_FIELDS
        invalid = sorted(set(changes) - allowed)
        if invalid:
            raise ValueError(
                f"Cannot update {entity_cls.__name__} field(s): {', '.join(invalid)}"
            )

    def _delete(self, table: _Table, entity_id: int) -> bool:
        removed = table.remove(entity_id)
        if removed:
            self.logger.debug(f"Deleted {table.kind} {entity_id}")
        return removed

    # =========================================================================
    # Organizations
    # =========================================================================

    @_synchronized
    def get_organizations(self) -> List[Organization]:
        return self._organizations.all()

    @_synchronized
    def get_organization(self, organization_id: int) -> Optional[Organization]:
        return self._organizations.get(organization_id)

    @_synchronized
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
    ) -> Organization:
        organization = Organization(
            id=self._organizations.next_id(),
            name=name,
            address=address,
            city=city,
            state=state,
            zip_code=zip_code,
            phone=phone,
            email=email,
            billing_codes=list(billing_codes or []),
            created_at=self.now(),
        )
        self.logger.debug(f"Created organization {organization.id}: {name}")
        return self._organizations.put(organization)

    @_synchronized
    def update_organization(self, organization_id: int, **changes) -> Optional[Organization]:
        return self._merge(self._organizations, organization_id, changes)

    @_synchronized
    def delete_organization(self, organization_id: int) -> bool:
        return self._delete(self._organizations, organization_id)

    # =========================================================================
    # Physicians
    # =========================================================================

    @_synchronized
    def get_physicians(self) -> List[Physician]:
        return self._physicians.all()

    @_synchronized
    def get_physician(self, physician_id: int) -> Optional[Physician]:
        return self._physicians.get(physician_id)

    @_synchronized
    def get_physicians_by_organization(self, organization_id: int) -> List[Physician]:
        """
        Physicians assigned to an organization, one per assignment row.

        Rows pointing at a deleted physician are skipped. Duplicate rows
        yield the physician more than once.
        """
        rows = self._assignments.where(lambda a: a.organization_id == organization_id)
        physicians = (self._physicians.get(row.physician_id) for row in rows)
        return [p for p in physicians if p is not None]

    @_synchronized
    def create_physician(
        self,
        first_name: str,
        last_name: str,
        specialty: str,
        phone: str,
        email: str,
        credentials: Optional[List[str]] = None,
    ) -> Physician:
        physician = Physician(
            id=self._physicians.next_id(),
            first_name=first_name,
            last_name=last_name,
            specialty=specialty,
            phone=phone,
            email=email,
            credentials=list(credentials or []),
            created_at=self.now(),
        )
        self.logger.debug(f"Created physician {physician.id}: {first_name} {last_name}")
        return self._physicians.put(physician)

    @_synchronized
    def update_physician(self, physician_id: int, **changes) -> Optional[Physician]:
        return self._merge(self._physicians, physician_id, changes)

    @_synchronized
    def delete_physician(self, physician_id: int) -> bool:
        return self._delete(self._physicians, physician_id)

    # =========================================================================
    # Organization <-> physician assignments
    # =========================================================================

    @_synchronized
    def get_assignments(self) -> List[OrganizationPhysician]:
        return self._assignments.all()

    @_synchronized
    def assign_physician_to_organization(
        self, organization_id: int, physician_id: int
    ) -> OrganizationPhysician:
        assignment = OrganizationPhysician(
            id=self._assignments.next_id(),
            organization_id=organization_id,
            physician_id=physician_id,
        )
        self.logger.debug(
            f"Assigned physician {physician_id} to organization {organization_id}"
        )
        return self._assignments.put(assignment)

    @_synchronized
    def remove_physician_from_organization(self, organization_id: int, physician_id: int) -> bool:
        """Remove the first matching assignment row only."""
        match = next(
            (
                row for row in self._assignments.rows.values()
                if row.organization_id == organization_id and row.physician_id == physician_id
            ),
            None,
        )
        if match is None:
            return False
        return self._delete(self._assignments, match.id)

    @_synchronized
    def get_organizations_by_physician(self, physician_id: int) -> List[Organization]:
        rows = self._assignments.where(lambda a: a.physician_id == physician_id)
        organizations = (self._organizations.get(row.organization_id) for row in rows)
        return [o for o in organizations if o is not None]

    # =========================================================================
    # Schedules
    # =========================================================================

    @_synchronized
    def get_schedules(self) -> List[Schedule]:
        return self._schedules.all()

    @_synchronized
    def get_schedule(self, schedule_id: int) -> Optional[Schedule]:
        return self._schedules.get(schedule_id)

    @_synchronized
    def get_schedules_by_organization(self, organization_id: int) -> List[Schedule]:
        return self._schedules.where(lambda s: s.organization_id == organization_id)

    @_synchronized
    def get_schedules_by_physician(self, physician_id: int) -> List[Schedule]:
        return self._schedules.where(lambda s: s.physician_id == physician_id)

    @_synchronized
    def get_active_schedules(
        self,
        organization_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Schedule]:
        """
        Active schedules of an organization.

        The time window applies only when both start and end are given;
        a schedule matches if it overlaps [start, end] inclusively.
        """
        def matches(schedule: Schedule) -> bool:
            if schedule.organization_id != organization_id or not schedule.is_active:
                return False
            if start is not None and end is not None:
                return schedule.overlaps(start, end)
            return True

        return self._schedules.where(matches)

    @_synchronized
    def create_schedule(
        self,
        organization_id: int,
        physician_id: int,
        start_time: datetime,
        end_time: datetime,
        title: str,
        description: Optional[str] = None,
        is_active: bool = True,
    ) -> Schedule:
        schedule = Schedule(
            id=self._schedules.next_id(),
            organization_id=organization_id,
            physician_id=physician_id,
            start_time=start_time,
            end_time=end_time,
            title=title,
            description=description,
            is_active=is_active,
            created_at=self.now(),
        )
        return self._schedules.put(schedule)

    @_synchronized
    def update_schedule(self, schedule_id: int, **changes) -> Optional[Schedule]:
        return self._merge(self._schedules, schedule_id, changes)

    @_synchronized
    def delete_schedule(self, schedule_id: int) -> bool:
        return self._delete(self._schedules, schedule_id)

    # =========================================================================
    # Requests
    # =========================================================================

    @_synchronized
    def get_requests(self) -> List[Request]:
        return self._requests.all()

    @_synchronized
    def get_request(self, request_id: int) -> Optional[Request]:
        return self._requests.get(request_id)

    @_synchronized
    def get_requests_by_organization(self, organization_id: int) -> List[Request]:
        return self._requests.where(lambda r: r.organization_id == organization_id)

    @_synchronized
    def get_requests_by_physician(self, physician_id: int) -> List[Request]:
        return self._requests.where(lambda r: r.physician_id == physician_id)

    @_synchronized
    def get_requests_by_status(self, status: str) -> List[Request]:
        return self._requests.where(lambda r: r.status == status)

    @_synchronized
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
    ) -> Request:
        """
        Create a request and seed its status history.

        created_at backdates the request (demo data, imports); it defaults
        to the current time.
        """
        now = created_at or self.now()
        status = status or RequestStatus.PENDING.value

        request = Request(
            id=self._requests.next_id(),
            organization_id=organization_id,
            physician_id=physician_id,
            patient_name=patient_name,
            patient_mrn=patient_mrn,
            diagnosis=diagnosis,
            location=location,
            notes=notes,
            status=status,
            priority=priority or RequestPriority.NORMAL.value,
            created_at=now,
            updated_at=now,
            status_history=[StatusHistoryEntry(status=status, timestamp=now)],
        )
        self.logger.debug(f"Created request {request.id} ({status})")
        return self._requests.put(request)

    @_synchronized
    def update_request(self, request_id: int, **changes) -> Optional[Request]:
        """
        Partial update of a request.

        A status change made here is recorded in the history without note
        or author; prefer update_request_status for status transitions.
        """
        existing = self._requests.get(request_id)
        if existing is None:
            return None

        self._check_patch(Request, changes)
        now = self.now()
        history = list(existing.status_history)
        new_status = changes.get("status")
        # Any string is a status here, including ""; only a missing key skips
        if new_status is not None and new_status != existing.status:
            history.append(StatusHistoryEntry(status=new_status, timestamp=now))

        updated = dataclasses.replace(
            existing, **changes, updated_at=now, status_history=history
        )
        self.logger.debug(f"Updated request {request_id}: {sorted(changes)}")
        return self._requests.put(updated)

    @_synchronized
    def update_request_status(
        self,
        request_id: int,
        status: str,
        note: Optional[str] = None,
        user_id: Optional[int] = None,
        timestamp: Optional[datetime] = None,
    ) -> Optional[Request]:
        """
        Record a status transition.

        Appends {status, timestamp, note, user_id} to the history and sets
        status and updated_at to match. The transition is not validated.
        timestamp backdates the entry (demo data); it defaults to now.
        """
        existing = self._requests.get(request_id)
        if existing is None:
            return None

        now = timestamp or self.now()
        entry = StatusHistoryEntry(status=status, timestamp=now, note=note, user_id=user_id)
        updated = dataclasses.replace(
            existing,
            status=status,
            updated_at=now,
            status_history=[*existing.status_history, entry],
        )
        self.logger.debug(f"Request {request_id}: {existing.status} -> {status}")
        return self._requests.put(updated)

    @_synchronized
    def delete_request(self, request_id: int) -> bool:
        return self._delete(self._requests, request_id)

    # =========================================================================
    # Users
    # =========================================================================

    @_synchronized
    def get_users(self) -> List[User]:
        return self._users.all()

    @_synchronized
    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    @_synchronized
    def get_user_by_username(self, username: str) -> Optional[User]:
        matches = self._users.where(lambda u: u.username == username)
        return matches[0] if matches else None

    @_synchronized
    def get_users_by_organization(self, organization_id: int) -> List[User]:
        return self._users.where(lambda u: u.organization_id == organization_id)

    @_synchronized
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
    ) -> User:
        # Username uniqueness is checked by the caller (see routes.auth).
        user = User(
            id=self._users.next_id(),
            username=username,
            password=password,
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=role,
            organization_id=organization_id,
            physician_id=physician_id,
            created_at=self.now(),
        )
        self.logger.debug(f"Created user {user.id}: {username} ({role})")
        return self._users.put(user)

    @_synchronized
    def update_user(self, user_id: int, **changes) -> Optional[User]:
        return self._merge(self._users, user_id, changes)

    @_synchronized
    def delete_user(self, user_id: int) -> bool:
        return self._delete(self._users, user_id)

    @_synchronized
    def verify_user_credentials(self, username: str, password: str) -> Optional[User]:
        return super().verify_user_credentials(username, password)
