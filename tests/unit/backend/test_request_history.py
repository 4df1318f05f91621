"""
Unit tests for consult requests and their status history.

Covers both ways a status can change:
- update_request_status: the dedicated transition (note + author)
- update_request: a partial update that happens to change status
"""

from datetime import datetime

import pytest

from oncall.models import StatusHistoryEntry, is_conventional_transition


@pytest.fixture
def consult(store, request_fields):
    return store.create_request(status="pending", **request_fields)


class TestCreateRequest:
    """Tests for request creation."""

    def test_seeds_history_with_initial_status(self, store, request_fields):
        consult = store.create_request(status="accepted", **request_fields)

        assert consult.status == "accepted"
        assert consult.status_history == [
            StatusHistoryEntry(status="accepted", timestamp=consult.created_at)
        ]
        assert consult.created_at == consult.updated_at

    def test_status_defaults_to_pending(self, store, request_fields):
        consult = store.create_request(**request_fields)

        assert consult.status == "pending"
        assert len(consult.status_history) == 1
        entry = consult.status_history[0]
        assert entry.status == "pending"
        assert entry.note is None
        assert entry.user_id is None

    def test_priority_defaults_to_normal(self, store, request_fields):
        del request_fields["priority"]
        consult = store.create_request(**request_fields)

        assert consult.priority == "normal"

    def test_created_at_can_be_backdated(self, store, request_fields):
        when = datetime(2023, 12, 24, 23, 15)
        consult = store.create_request(created_at=when, **request_fields)

        assert consult.created_at == when
        assert consult.updated_at == when
        assert consult.status_history[0].timestamp == when

    def test_round_trip(self, store, consult):
        assert store.get_request(consult.id) == consult
        assert store.get_requests() == [consult]


class TestUpdateRequestStatus:
    """Tests for the dedicated status transition."""

    def test_appends_entry_with_note_and_author(self, store, consult, clock):
        updated = store.update_request_status(consult.id, "accepted", note="ok", user_id=7)

        assert updated.status == "accepted"
        assert len(updated.status_history) == 2
        assert updated.status_history[0] == consult.status_history[0]
        assert updated.status_history[1] == StatusHistoryEntry(
            status="accepted", timestamp=clock.current, note="ok", user_id=7
        )
        assert updated.updated_at == updated.status_history[1].timestamp
        assert store.get_request(consult.id) == updated

    def test_repeated_calls_append_in_order(self, store, consult):
        calls = [
            ("accepted", "on my way", 2),
            ("in_progress", None, 2),
            ("completed", "discharged", 3),
        ]
        for status, note, user_id in calls:
            store.update_request_status(consult.id, status, note=note, user_id=user_id)

        final = store.get_request(consult.id)
        assert [e.status for e in final.status_history] == [
            "pending", "accepted", "in_progress", "completed"
        ]
        timestamps = [e.timestamp for e in final.status_history]
        assert timestamps == sorted(timestamps)
        last = final.status_history[-1]
        assert (last.status, last.note, last.user_id) == ("completed", "discharged", 3)
        assert final.status == "completed"
        assert final.updated_at == last.timestamp

    def test_does_not_mutate_earlier_snapshot(self, store, consult):
        store.update_request_status(consult.id, "accepted")

        assert len(consult.status_history) == 1
        assert consult.status == "pending"

    def test_accepts_unconventional_transition(self, store, consult):
        store.update_request_status(consult.id, "completed")
        updated = store.update_request_status(consult.id, "pending")

        assert updated.status == "pending"
        assert len(updated.status_history) == 3

    def test_accepts_any_status_string(self, store, consult):
        updated = store.update_request_status(consult.id, "escalated")

        assert updated.status == "escalated"

    def test_same_status_is_still_recorded(self, store, consult):
        updated = store.update_request_status(consult.id, "pending", note="still waiting")

        assert len(updated.status_history) == 2

    def test_missing_request_returns_none(self, store):
        assert store.update_request_status(123, "accepted") is None

    def test_timestamp_can_be_backdated(self, store, consult):
        when = datetime(2024, 1, 1, 12, 0)
        updated = store.update_request_status(consult.id, "accepted", timestamp=when)

        assert updated.status_history[-1].timestamp == when
        assert updated.updated_at == when


class TestUpdateRequest:
    """Tests for the partial update path."""

    def test_changes_only_given_fields(self, store, consult):
        updated = store.update_request(consult.id, location="ICU, Bed 4")

        assert updated.location == "ICU, Bed 4"
        assert updated.patient_name == consult.patient_name
        assert updated.status == consult.status
        assert updated.status_history == consult.status_history
        assert updated.updated_at > consult.updated_at
        assert updated.created_at == consult.created_at

    def test_status_change_appends_bare_entry(self, store, consult):
        updated = store.update_request(consult.id, status="declined", notes="Out of scope")

        assert updated.status == "declined"
        assert updated.notes == "Out of scope"
        assert len(updated.status_history) == 2
        entry = updated.status_history[1]
        assert entry.status == "declined"
        assert entry.note is None
        assert entry.user_id is None
        assert entry.timestamp == updated.updated_at

    def test_unchanged_status_does_not_append(self, store, consult):
        updated = store.update_request(consult.id, status="pending")

        assert len(updated.status_history) == 1

    def test_empty_status_is_recorded_like_any_other(self, store, consult):
        updated = store.update_request(consult.id, status="")

        assert updated.status == ""
        assert [e.status for e in updated.status_history] == ["pending", ""]

    def test_update_without_status_key_does_not_append(self, store, consult):
        updated = store.update_request(consult.id, notes="Seen by resident")

        assert len(updated.status_history) == 1

    def test_both_paths_share_one_history(self, store, consult):
        store.update_request(consult.id, status="accepted")
        updated = store.update_request_status(consult.id, "in_progress", user_id=4)

        assert [e.status for e in updated.status_history] == [
            "pending", "accepted", "in_progress"
        ]

    def test_history_and_timestamps_are_read_only(self, store, consult):
        with pytest.raises(ValueError):
            store.update_request(consult.id, status_history=[])
        with pytest.raises(ValueError):
            store.update_request(consult.id, updated_at=datetime(2000, 1, 1))

    def test_missing_request_returns_none(self, store):
        assert store.update_request(5, status="accepted") is None


class TestRequestQueries:
    """Tests for request filters and deletion."""

    def test_filters(self, store, request_fields):
        a = store.create_request(**request_fields)
        b = store.create_request(**{**request_fields, "physician_id": 2})
        c = store.create_request(**{**request_fields, "organization_id": 2})
        store.update_request_status(b.id, "accepted")

        assert store.get_requests_by_organization(1) == [a, store.get_request(b.id)]
        assert store.get_requests_by_physician(1) == [a, c]
        assert [r.id for r in store.get_requests_by_status("accepted")] == [b.id]
        assert store.get_requests_by_status("cancelled") == []

    def test_delete(self, store, consult):
        assert store.delete_request(consult.id) is True
        assert store.get_request(consult.id) is None
        assert store.delete_request(consult.id) is False


class TestScenario:
    """End-to-end walk through an organization, physician and request."""

    def test_accepting_a_request(self, store, organization_fields, physician_fields, request_fields):
        org = store.create_organization(**organization_fields)
        physician = store.create_physician(**physician_fields)
        assert (org.id, physician.id) == (1, 1)
        store.assign_physician_to_organization(org.id, physician.id)

        consult = store.create_request(status="pending", **request_fields)
        updated = store.update_request_status(consult.id, "accepted", note="ok", user_id=7)

        assert updated.status == "accepted"
        assert len(updated.status_history) == 2
        entry = updated.status_history[1]
        assert (entry.status, entry.note, entry.user_id) == ("accepted", "ok", 7)
        assert entry.timestamp == updated.updated_at


class TestTransitions:
    """Tests for the conventional transition table."""

    @pytest.mark.parametrize("current,new", [
        ("pending", "accepted"),
        ("pending", "declined"),
        ("accepted", "in_progress"),
        ("accepted", "cancelled"),
        ("in_progress", "completed"),
        ("in_progress", "cancelled"),
    ])
    def test_conventional(self, current, new):
        assert is_conventional_transition(current, new)

    @pytest.mark.parametrize("current,new", [
        ("pending", "completed"),
        ("completed", "pending"),
        ("declined", "accepted"),
        ("cancelled", "in_progress"),
        ("unknown", "accepted"),
    ])
    def test_unconventional(self, current, new):
        assert not is_conventional_transition(current, new)
