"""
Demo dataset for the on-call manager.

Loads a store with enough history to drive the dashboard and reports:
- 2 organizations, 4 physicians and their assignments
- today's and tomorrow's shifts
- 90 days of past rotation schedules and 14 days of upcoming ones,
  following a 4-physician / 4-week rotation
- a handful of hand-written consult requests
- 90 days of weighted-random requests with realistic status histories
- an admin user and a physician user

Pass a seed for a reproducible dataset.
"""

import logging
import random
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Sequence

from oncall.models import Organization, Physician, RequestPriority, RequestStatus, UserRole
from oncall.store.base import EntityStore


logger = logging.getLogger("service.DemoData")

HISTORY_DAYS = 90
UPCOMING_DAYS = 14
# Past rotations newer than this many days stay active
ACTIVE_HISTORY_DAYS = 30

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Requests per day over a 4-week cycle (weekdays busier than weekends)
REQUEST_PATTERN = [
    9, 8, 10, 9, 11, 6, 5,
    10, 9, 9, 10, 12, 7, 6,
    8, 9, 10, 11, 10, 5, 4,
    9, 10, 11, 12, 13, 6, 5,
]
MIN_REQUESTS_PER_DAY = 3

STATUS_WEIGHTS = {
    RequestStatus.PENDING.value: 0.15,
    RequestStatus.ACCEPTED.value: 0.10,
    RequestStatus.IN_PROGRESS.value: 0.05,
    RequestStatus.COMPLETED.value: 0.55,
    RequestStatus.DECLINED.value: 0.10,
    RequestStatus.CANCELLED.value: 0.05,
}

PRIORITY_WEIGHTS = {
    RequestPriority.NORMAL.value: 0.6,
    RequestPriority.URGENT.value: 0.3,
    RequestPriority.EMERGENCY.value: 0.1,
}

# Share of requests handled by each physician, in physician order
PHYSICIAN_WEIGHTS = [0.4, 0.3, 0.2, 0.1]
DAY_SHIFT_SHARE = 0.7

DIAGNOSES = [
    "Chest pain", "Pneumonia", "Acute exacerbation of COPD", "Diabetic ketoacidosis",
    "Hypertensive emergency", "Acute bronchitis", "Arrhythmia", "Gastrointestinal bleeding",
    "Stroke symptoms", "Acute renal failure", "Seizure", "Severe allergic reaction",
    "Acute abdominal pain", "Deep vein thrombosis", "Pulmonary embolism",
]

# Minutes between consecutive status changes: (min, max) inclusive
ACCEPT_DELAY = (15, 29)
START_DELAY = (30, 89)
COMPLETE_DELAY = (45, 179)
RESPONSE_DELAY = (15, 44)

# System user credited with generated transitions
DEMO_ACTOR_USER_ID = 1


def _js_weekday(day: date) -> int:
    """Weekday index with Sunday as 0."""
    return (day.weekday() + 1) % 7


def _short_date(day: date) -> str:
    return f"{day.month}/{day.day}/{day.year}"


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))


def _weighted_choice(rng: random.Random, weights: Dict[str, float]) -> str:
    return rng.choices(list(weights), weights=list(weights.values()))[0]


# =============================================================================
# Organizations, physicians, assignments
# =============================================================================

def seed_organizations(store: EntityStore) -> List[Organization]:
    memorial = store.create_organization(
        name="Memorial Healthcare",
        address="123 Main St",
        city="Springfield",
        state="IL",
        zip_code="62701",
        phone="555-123-4567",
        email="admin@memorialhealthcare.com",
        billing_codes=["MH-001", "MH-002", "MH-003"],
    )
    city_general = store.create_organization(
        name="City General Hospital",
        address="456 Oak Ave",
        city="Riverside",
        state="CA",
        zip_code="92501",
        phone="555-987-6543",
        email="admin@citygeneralhospital.com",
        billing_codes=["CGH-001", "CGH-002"],
    )
    return [memorial, city_general]


def seed_physicians(store: EntityStore) -> List[Physician]:
    roster = [
        ("Robert", "Chen", "Cardiology", "555-111-2222", ["MD", "FACC"]),
        ("Lisa", "Wong", "Neurology", "555-222-3333", ["MD", "PhD"]),
        ("Sarah", "Miller", "Internal Medicine", "555-333-4444", ["MD"]),
        ("Michael", "Brown", "Oncology", "555-444-5555", ["MD", "PhD"]),
    ]
    return [
        store.create_physician(
            first_name=first,
            last_name=last,
            specialty=specialty,
            phone=phone,
            email=f"{first.lower()}.{last.lower()}@example.com",
            credentials=credentials,
        )
        for first, last, specialty, phone, credentials in roster
    ]


def seed_assignments(store: EntityStore, organizations, physicians) -> None:
    memorial, city_general = organizations
    for physician in physicians:
        store.assign_physician_to_organization(memorial.id, physician.id)
    for physician in (physicians[0], physicians[2]):
        store.assign_physician_to_organization(city_general.id, physician.id)


# =============================================================================
# Schedules
# =============================================================================

def build_rotation(physician_ids: Sequence[int]) -> List[List[int]]:
    """Four weekly orderings of four physicians, each shifted by one."""
    a, b, c, d = physician_ids
    return [
        [a, b, c, d],
        [d, a, b, c],
        [c, d, a, b],
        [b, c, d, a],
    ]


def rotation_pair(rotation: List[List[int]], day: date):
    """(primary, secondary) physician ids on call for a day."""
    week = rotation[((day.day - 1) // 7) % 4]
    index = _js_weekday(day) % 4
    return week[index], week[(index + 1) % 4]


def seed_current_shifts(store: EntityStore, organization: Organization, physicians, today: date) -> None:
    """Today's and tomorrow's named shifts."""
    tomorrow = today + timedelta(days=1)
    day_after = today + timedelta(days=2)
    cardio, neuro, internal, onco = physicians

    shifts = [
        (cardio, _at(today, 8), _at(today, 20), "Day Shift"),
        (neuro, _at(today, 8), _at(today, 20), "Day Shift"),
        (internal, _at(today, 8), _at(today, 20), "Day Shift"),
        (onco, _at(today, 18), _at(tomorrow, 8), "Night Shift"),
        (neuro, _at(tomorrow, 8), _at(tomorrow, 20), "Day Shift"),
        (onco, _at(tomorrow, 8), _at(tomorrow, 20), "Day Shift"),
        (internal, _at(tomorrow, 18), _at(day_after, 8), "Night Shift"),
    ]
    for physician, start, end, label in shifts:
        store.create_schedule(
            organization_id=organization.id,
            physician_id=physician.id,
            start_time=start,
            end_time=end,
            title=f"{label} - {physician.specialty}",
            description=f"Primary on-call for {physician.specialty.lower()} department",
            is_active=True,
        )


def _seed_rotation_day(store, organization_id, rotation, day, is_active) -> None:
    primary, secondary = rotation_pair(rotation, day)
    day_name = WEEKDAY_NAMES[_js_weekday(day)]

    store.create_schedule(
        organization_id=organization_id,
        physician_id=primary,
        start_time=_at(day, 8),
        end_time=_at(day, 20),
        title=f"Day Rotation - {day_name}",
        description=f"Regular day rotation schedule for {_short_date(day)}",
        is_active=is_active,
    )
    store.create_schedule(
        organization_id=organization_id,
        physician_id=secondary,
        start_time=_at(day, 20),
        end_time=_at(day + timedelta(days=1), 8),
        title=f"Night Rotation - {day_name}",
        description=f"Regular night rotation schedule for {_short_date(day)}",
        is_active=is_active,
    )


def seed_rotation_history(store: EntityStore, organization: Organization, physicians, today: date) -> None:
    """Past rotations plus specialty coverage days (Mon/Thu cardiology, Tue/Fri neurology)."""
    rotation = build_rotation([p.id for p in physicians])
    cardio, neuro = physicians[0], physicians[1]
    specialty_days = {1: cardio, 4: cardio, 2: neuro, 5: neuro}

    for days_ago in range(HISTORY_DAYS, 0, -1):
        day = today - timedelta(days=days_ago)
        is_active = days_ago < ACTIVE_HISTORY_DAYS
        _seed_rotation_day(store, organization.id, rotation, day, is_active)

        specialist = specialty_days.get(_js_weekday(day))
        if specialist is not None:
            store.create_schedule(
                organization_id=organization.id,
                physician_id=specialist.id,
                start_time=_at(day, 9),
                end_time=_at(day, 17),
                title=f"{specialist.specialty} Coverage",
                description=(
                    f"Dedicated {specialist.specialty.lower()} on-call coverage "
                    f"for {_short_date(day)}"
                ),
                is_active=is_active,
            )


def seed_upcoming_rotations(store: EntityStore, organization: Organization, physicians, today: date) -> None:
    """Rotations for the next two weeks, plus weekly backup on-call blocks."""
    rotation = build_rotation([p.id for p in physicians])
    for offset in range(1, UPCOMING_DAYS + 1):
        _seed_rotation_day(store, organization.id, rotation, today + timedelta(days=offset), True)

    backups = [physicians[0], physicians[2]]
    for week, physician in enumerate(backups):
        first_day = today + timedelta(days=week * 7 + 2)
        last_day = first_day + timedelta(days=6)
        week_start = _at(first_day, 0)
        week_end = datetime.combine(last_day, time(23, 59, 59, 999000))
        store.create_schedule(
            organization_id=organization.id,
            physician_id=physician.id,
            start_time=week_start,
            end_time=week_end,
            title="Weekly Backup On-Call",
            description=(
                f"Backup physician for emergency coverage from "
                f"{_short_date(first_day)} to {_short_date(last_day)}"
            ),
            is_active=True,
        )


# =============================================================================
# Requests
# =============================================================================

def seed_sample_requests(
    store: EntityStore, organization: Organization, physicians, now: datetime
) -> None:
    """Hand-written requests covering the main statuses."""
    cardio, neuro, internal, onco = physicians
    samples = [
        dict(
            physician_id=cardio.id,
            patient_name="Brian Taylor",
            patient_mrn="MT-4829",
            diagnosis="Chest pain, suspected angina",
            location="Emergency Department, Room 3",
            notes="Patient has history of heart disease",
            status=RequestStatus.ACCEPTED.value,
            priority=RequestPriority.URGENT.value,
            minutes_ago=45,
        ),
        dict(
            physician_id=neuro.id,
            patient_name="Maria Garcia",
            patient_mrn="MT-7621",
            diagnosis="Severe headache, suspected migraine",
            location="Emergency Department, Room 5",
            notes="Patient reports visual aura",
            status=RequestStatus.PENDING.value,
            priority=RequestPriority.NORMAL.value,
            minutes_ago=10,
        ),
        dict(
            physician_id=internal.id,
            patient_name="James Wilson",
            patient_mrn="MT-2134",
            diagnosis="Shortness of breath, suspected pneumonia",
            location="Inpatient Ward, Room 210",
            status=RequestStatus.COMPLETED.value,
            priority=RequestPriority.NORMAL.value,
            minutes_ago=300,
        ),
        dict(
            physician_id=onco.id,
            patient_name="Emma Johnson",
            patient_mrn="MT-5912",
            diagnosis="Follow-up on chemotherapy side effects",
            location="Oncology Clinic, Room 8",
            notes="Patient experiencing severe nausea",
            status=RequestStatus.DECLINED.value,
            priority=RequestPriority.URGENT.value,
            minutes_ago=120,
        ),
        dict(
            physician_id=cardio.id,
            patient_name="Daniel Lee",
            patient_mrn="MT-3307",
            diagnosis="Palpitations, resolved before consult",
            location="Emergency Department, Room 1",
            notes="Consult no longer needed after ED workup",
            status=RequestStatus.CANCELLED.value,
            priority=RequestPriority.NORMAL.value,
            minutes_ago=90,
        ),
    ]
    for sample in samples:
        created_at = now - timedelta(minutes=sample.pop("minutes_ago"))
        store.create_request(organization_id=organization.id, created_at=created_at, **sample)


def _random_request_time(rng: random.Random, day: date) -> datetime:
    if rng.random() < DAY_SHIFT_SHARE:
        hour = rng.randrange(8, 20)
    else:
        hour = rng.randrange(20, 32) % 24
    return _at(day, hour, rng.randrange(60))


def status_transitions(rng: random.Random, final_status: str, created_at: datetime):
    """
    (status, timestamp) steps taking a new request to final_status.

    Pending requests have no steps; declined and cancelled requests get a
    single response.
    """
    path = {
        RequestStatus.ACCEPTED.value: [RequestStatus.ACCEPTED.value],
        RequestStatus.IN_PROGRESS.value: [
            RequestStatus.ACCEPTED.value,
            RequestStatus.IN_PROGRESS.value,
        ],
        RequestStatus.COMPLETED.value: [
            RequestStatus.ACCEPTED.value,
            RequestStatus.IN_PROGRESS.value,
            RequestStatus.COMPLETED.value,
        ],
        RequestStatus.DECLINED.value: [RequestStatus.DECLINED.value],
        RequestStatus.CANCELLED.value: [RequestStatus.CANCELLED.value],
    }.get(final_status, [])

    delays = {
        RequestStatus.ACCEPTED.value: ACCEPT_DELAY,
        RequestStatus.IN_PROGRESS.value: START_DELAY,
        RequestStatus.COMPLETED.value: COMPLETE_DELAY,
        RequestStatus.DECLINED.value: RESPONSE_DELAY,
        RequestStatus.CANCELLED.value: RESPONSE_DELAY,
    }

    steps = []
    current = created_at
    for status in path:
        current = current + timedelta(minutes=rng.randint(*delays[status]))
        steps.append((status, current))
    return steps


def seed_request_history(
    store: EntityStore,
    organization: Organization,
    physicians,
    today: date,
    rng: random.Random,
) -> int:
    """Generate HISTORY_DAYS of requests; returns how many were created."""
    physician_ids = [p.id for p in physicians]
    created = 0

    for days_ago in range(HISTORY_DAYS, 0, -1):
        day = today - timedelta(days=days_ago)
        volume = REQUEST_PATTERN[(HISTORY_DAYS - days_ago) % len(REQUEST_PATTERN)]
        volume = max(MIN_REQUESTS_PER_DAY, volume + rng.randint(-2, 2))

        for j in range(volume):
            created_at = _random_request_time(rng, day)
            physician_id = rng.choices(physician_ids, weights=PHYSICIAN_WEIGHTS)[0]
            final_status = _weighted_choice(rng, STATUS_WEIGHTS)
            priority = _weighted_choice(rng, PRIORITY_WEIGHTS)

            request = store.create_request(
                organization_id=organization.id,
                physician_id=physician_id,
                patient_name=f"Patient {days_ago}-{j}",
                patient_mrn=f"MT-{1000 + days_ago * 10 + j}",
                diagnosis=rng.choice(DIAGNOSES),
                location=f"Ward {rng.randint(1, 10)}, Room {rng.randint(1, 30)}",
                notes=f"Historical request from {days_ago} days ago",
                status=RequestStatus.PENDING.value,
                priority=priority,
                created_at=created_at,
            )
            for status, timestamp in status_transitions(rng, final_status, created_at):
                store.update_request_status(
                    request.id, status, user_id=DEMO_ACTOR_USER_ID, timestamp=timestamp
                )
            created += 1

    return created


# =============================================================================
# Users
# =============================================================================

def seed_users(store: EntityStore, organization: Organization, physicians) -> None:
    store.create_user(
        username="admin",
        password="password",
        first_name="Admin",
        last_name="User",
        email="admin@example.com",
        role=UserRole.ADMIN.value,
        organization_id=organization.id,
    )
    sarah = physicians[2]
    store.create_user(
        username="sarah.miller",
        password="password",
        first_name=sarah.first_name,
        last_name=sarah.last_name,
        email=sarah.email,
        role=UserRole.PHYSICIAN.value,
        organization_id=organization.id,
        physician_id=sarah.id,
    )


# =============================================================================
# Entry point
# =============================================================================

def seed_demo_data(
    store: EntityStore,
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
) -> EntityStore:
    """
    Load the demo dataset into an empty store.

    Args:
        store: Store to populate; ids are assumed to start at 1.
        seed: Seed for the random generator. None gives a different
            dataset on every call.
        now: Reference time for "today" and for the sample requests;
            defaults to the store's own clock, so the dataset lines up with
            store.now(). Organizations, schedules and users are still stamped
            by the store when they are created.

    Returns:
        The populated store.
    """
    rng = random.Random(seed)
    if now is None:
        now = store.now()
    today = now.date()

    organizations = seed_organizations(store)
    physicians = seed_physicians(store)
    seed_assignments(store, organizations, physicians)

    memorial = organizations[0]
    seed_current_shifts(store, memorial, physicians, today)
    seed_rotation_history(store, memorial, physicians, today)
    seed_upcoming_rotations(store, memorial, physicians, today)

    seed_sample_requests(store, memorial, physicians, now)
    generated = seed_request_history(store, memorial, physicians, today, rng)

    seed_users(store, memorial, physicians)

    logger.info(
        f"Seeded demo data: {len(organizations)} organizations, "
        f"{len(physicians)} physicians, {len(store.get_schedules())} schedules, "
        f"{len(store.get_requests())} requests ({generated} generated), "
        f"{len(store.get_users())} users"
    )
    return store
