"""
Pytest configuration for all tests.
Sets up Python path to find the backend oncall package, and provides
shared store fixtures.
"""

import sys
import os
from datetime import datetime, timedelta

import pytest

# Add backend directory to Python path
backend_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'backend'))
if backend_path not in sys.path:
    sys.path.insert(0, backend_path)


class TickingClock:
    """Deterministic clock: every call advances one second."""

    def __init__(self, start=datetime(2024, 3, 1, 9, 0, 0)):
        self.current = start

    def __call__(self):
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    """Empty in-memory store driven by the ticking clock."""
    from oncall.store import MemoryStore
    return MemoryStore(clock=clock)


@pytest.fixture
def organization_fields():
    return dict(
        name="Test Hospital",
        address="123 Test St",
        city="Testville",
        state="TS",
        zip_code="12345",
        phone="555-0123",
        email="test@hospital.com",
        billing_codes=["CODE1", "CODE2"],
    )


@pytest.fixture
def physician_fields():
    return dict(
        first_name="John",
        last_name="Smith",
        specialty="Cardiology",
        phone="555-0124",
        email="john@hospital.com",
        credentials=["MD", "FACC"],
    )


@pytest.fixture
def request_fields():
    return dict(
        organization_id=1,
        physician_id=1,
        patient_name="Test Patient",
        patient_mrn="MRN123",
        diagnosis="Test Diagnosis",
        location="Room 101",
        notes="Test notes",
        priority="normal",
    )


@pytest.fixture
def user_fields():
    return dict(
        username="jdoe",
        password="secret",
        first_name="Jane",
        last_name="Doe",
        email="jdoe@example.com",
        role="admin",
        organization_id=1,
    )
