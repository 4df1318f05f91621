"""
Integration tests for the REST API.

Tests the full request/response cycle of the Flask blueprints against a
real MemoryStore:
- 200/201/400/404 mapping
- partial updates and the two status-change endpoints
- password stripping
- session login
"""

import pytest

from oncall.store import MemoryStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def api_store(clock):
    return MemoryStore(clock=clock)


@pytest.fixture
def app(api_store):
    """Create Flask test app around an empty store."""
    from server import create_app
    app = create_app(store=api_store)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def org_payload():
    return {
        "name": "Memorial Healthcare",
        "address": "123 Main St",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62701",
        "phone": "555-123-4567",
        "email": "admin@memorial.example",
        "billing_codes": ["MH-001"],
    }


@pytest.fixture
def physician_payload():
    return {
        "first_name": "Robert",
        "last_name": "Chen",
        "specialty": "Cardiology",
        "phone": "555-111-2222",
        "email": "robert.chen@example.com",
        "credentials": ["MD"],
    }


@pytest.fixture
def request_payload():
    return {
        "organization_id": 1,
        "physician_id": 1,
        "patient_name": "Brian Taylor",
        "patient_mrn": "MT-4829",
        "diagnosis": "Chest pain",
        "location": "ED Room 3",
        "priority": "urgent",
    }


@pytest.fixture
def user_payload():
    return {
        "username": "admin",
        "password": "password",
        "first_name": "Admin",
        "last_name": "User",
        "email": "admin@example.com",
        "role": "admin",
        "organization_id": 1,
    }


# =============================================================================
# App
# =============================================================================

class TestApp:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json() == {"status": "ok", "store": "MemoryStore"}

    def test_default_app_is_seeded(self):
        from server import create_app
        app = create_app(seed_demo=True)

        response = app.test_client().get("/api/v1/organizations")

        assert len(response.get_json()) == 2

    def test_cors_headers(self, client):
        response = client.get("/api/v1/organizations")

        assert response.headers["Access-Control-Allow-Origin"] == "*"


# =============================================================================
# Organizations and assignments
# =============================================================================

class TestOrganizationEndpoints:

    def test_create_and_get(self, client, org_payload):
        created = client.post("/api/v1/organizations", json=org_payload)

        assert created.status_code == 201
        body = created.get_json()
        assert body["id"] == 1
        assert body["billing_codes"] == ["MH-001"]

        fetched = client.get("/api/v1/organizations/1")
        assert fetched.status_code == 200
        assert fetched.get_json() == body

    def test_list_empty_is_200(self, client):
        response = client.get("/api/v1/organizations")

        assert response.status_code == 200
        assert response.get_json() == []

    def test_get_missing_is_404(self, client):
        response = client.get("/api/v1/organizations/5")

        assert response.status_code == 404
        assert "error" in response.get_json()

    def test_non_numeric_id_is_404(self, client):
        assert client.get("/api/v1/organizations/abc").status_code == 404

    def test_create_missing_fields_is_400(self, client, org_payload):
        del org_payload["city"]
        response = client.post("/api/v1/organizations", json=org_payload)

        assert response.status_code == 400
        assert "city" in response.get_json()["error"]

    def test_create_wrong_type_is_400(self, client, org_payload):
        org_payload["billing_codes"] = "MH-001"
        response = client.post("/api/v1/organizations", json=org_payload)

        assert response.status_code == 400

    def test_partial_update(self, client, org_payload):
        client.post("/api/v1/organizations", json=org_payload)

        response = client.put("/api/v1/organizations/1", json={"phone": "555-000-0000"})

        assert response.status_code == 200
        body = response.get_json()
        assert body["phone"] == "555-000-0000"
        assert body["name"] == "Memorial Healthcare"

    def test_update_missing_is_404(self, client):
        response = client.put("/api/v1/organizations/9", json={"name": "X"})

        assert response.status_code == 404

    def test_delete(self, client, org_payload):
        client.post("/api/v1/organizations", json=org_payload)

        assert client.delete("/api/v1/organizations/1").status_code == 200
        assert client.delete("/api/v1/organizations/1").status_code == 404

    def test_assign_and_remove_physician(self, client, org_payload, physician_payload):
        client.post("/api/v1/organizations", json=org_payload)
        client.post("/api/v1/physicians", json=physician_payload)

        assigned = client.post(
            "/api/v1/organization-physicians",
            json={"organization_id": 1, "physician_id": 1},
        )
        assert assigned.status_code == 201
        assert assigned.get_json() == {"id": 1, "organization_id": 1, "physician_id": 1}

        physicians = client.get("/api/v1/organizations/1/physicians").get_json()
        assert [p["id"] for p in physicians] == [1]
        organizations = client.get("/api/v1/physicians/1/organizations").get_json()
        assert [o["id"] for o in organizations] == [1]

        assert client.delete("/api/v1/organizations/1/physicians/1").status_code == 200
        assert client.delete("/api/v1/organizations/1/physicians/1").status_code == 404
        assert client.get("/api/v1/organizations/1/physicians").get_json() == []

    def test_assign_requires_ids(self, client):
        response = client.post("/api/v1/organization-physicians", json={"organization_id": 1})

        assert response.status_code == 400


# =============================================================================
# Schedules
# =============================================================================

class TestScheduleEndpoints:

    def make(self, client, start, end, active=True, organization_id=1):
        payload = {
            "organization_id": organization_id,
            "physician_id": 1,
            "start_time": start,
            "end_time": end,
            "title": "Day Shift",
            "is_active": active,
        }
        response = client.post("/api/v1/schedules", json=payload)
        assert response.status_code == 201
        return response.get_json()

    def test_create_parses_timestamps(self, client):
        body = self.make(client, "2024-01-10T08:00:00", "2024-01-10T20:00:00")

        assert body["start_time"] == "2024-01-10T08:00:00"
        assert body["description"] is None
        assert body["is_active"] is True

    def test_bad_timestamp_is_400(self, client):
        response = client.post("/api/v1/schedules", json={
            "organization_id": 1,
            "physician_id": 1,
            "start_time": "tomorrow",
            "end_time": "2024-01-10T20:00:00",
            "title": "Shift",
        })

        assert response.status_code == 400

    def test_end_before_start_is_400(self, client):
        response = client.post("/api/v1/schedules", json={
            "organization_id": 1,
            "physician_id": 1,
            "start_time": "2024-01-10T20:00:00",
            "end_time": "2024-01-10T08:00:00",
            "title": "Shift",
        })

        assert response.status_code == 400

    def test_active_schedules_window(self, client):
        day = self.make(client, "2024-01-10T08:00:00", "2024-01-10T20:00:00")
        later = self.make(client, "2024-01-12T08:00:00", "2024-01-12T20:00:00")
        self.make(client, "2024-01-10T08:00:00", "2024-01-10T20:00:00", active=False)

        all_active = client.get("/api/v1/organizations/1/active-schedules").get_json()
        assert [s["id"] for s in all_active] == [day["id"], later["id"]]

        windowed = client.get(
            "/api/v1/organizations/1/active-schedules"
            "?from=2024-01-10T00:00:00&to=2024-01-10T23:59:00"
        ).get_json()
        assert [s["id"] for s in windowed] == [day["id"]]

        only_from = client.get(
            "/api/v1/organizations/1/active-schedules?from=2024-01-11T00:00:00"
        ).get_json()
        assert len(only_from) == 2

    def test_by_physician_and_update(self, client):
        created = self.make(client, "2024-01-10T08:00:00", "2024-01-10T20:00:00")

        response = client.put(f"/api/v1/schedules/{created['id']}", json={"is_active": False})
        assert response.get_json()["is_active"] is False

        schedules = client.get("/api/v1/physicians/1/schedules").get_json()
        assert [s["id"] for s in schedules] == [created["id"]]

        assert client.put("/api/v1/schedules/99", json={"title": "x"}).status_code == 404
        assert client.delete(f"/api/v1/schedules/{created['id']}").status_code == 200


# =============================================================================
# Requests
# =============================================================================

class TestRequestEndpoints:

    def test_create_seeds_history(self, client, request_payload):
        response = client.post("/api/v1/requests", json=request_payload)

        assert response.status_code == 201
        body = response.get_json()
        assert body["status"] == "pending"
        assert len(body["status_history"]) == 1
        assert body["status_history"][0]["status"] == "pending"
        assert body["status_history"][0]["timestamp"] == body["created_at"]

    def test_unknown_priority_is_400(self, client, request_payload):
        request_payload["priority"] = "whenever"
        response = client.post("/api/v1/requests", json=request_payload)

        assert response.status_code == 400

    def test_status_endpoint_records_note_and_author(self, client, request_payload):
        client.post("/api/v1/requests", json=request_payload)

        response = client.put(
            "/api/v1/requests/1/status",
            json={"status": "accepted", "note": "ok", "user_id": 7},
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["status"] == "accepted"
        assert len(body["status_history"]) == 2
        entry = body["status_history"][1]
        assert (entry["status"], entry["note"], entry["user_id"]) == ("accepted", "ok", 7)
        assert entry["timestamp"] == body["updated_at"]

    def test_status_endpoint_requires_status(self, client, request_payload):
        client.post("/api/v1/requests", json=request_payload)

        response = client.put("/api/v1/requests/1/status", json={"note": "hm"})

        assert response.status_code == 400

    def test_status_endpoint_missing_request_is_404(self, client):
        response = client.put("/api/v1/requests/3/status", json={"status": "accepted"})

        assert response.status_code == 404

    def test_unconventional_transition_is_allowed(self, client, request_payload, caplog):
        client.post("/api/v1/requests", json=request_payload)

        response = client.put("/api/v1/requests/1/status", json={"status": "completed"})

        assert response.status_code == 200
        assert "unconventional transition pending -> completed" in caplog.text

    def test_generic_update_appends_bare_entry(self, client, request_payload):
        client.post("/api/v1/requests", json=request_payload)

        response = client.put("/api/v1/requests/1", json={"status": "declined"})

        body = response.get_json()
        assert body["status"] == "declined"
        assert body["status_history"][1]["note"] is None
        assert body["status_history"][1]["user_id"] is None

    def test_filters(self, client, request_payload):
        client.post("/api/v1/requests", json=request_payload)
        client.post("/api/v1/requests", json={**request_payload, "physician_id": 2})
        client.put("/api/v1/requests/2/status", json={"status": "accepted"})

        by_status = client.get("/api/v1/requests/status/accepted").get_json()
        assert [r["id"] for r in by_status] == [2]
        assert client.get("/api/v1/requests/status/completed").get_json() == []

        by_physician = client.get("/api/v1/physicians/2/requests").get_json()
        assert [r["id"] for r in by_physician] == [2]

        by_org = client.get("/api/v1/organizations/1/requests").get_json()
        assert len(by_org) == 2

    def test_delete(self, client, request_payload):
        client.post("/api/v1/requests", json=request_payload)

        assert client.delete("/api/v1/requests/1").status_code == 200
        assert client.get("/api/v1/requests/1").status_code == 404


# =============================================================================
# Users and auth
# =============================================================================

class TestUserEndpoints:

    def test_password_is_never_returned(self, client, user_payload):
        created = client.post("/api/v1/users", json=user_payload)
        assert created.status_code == 201
        assert "password" not in created.get_json()

        assert "password" not in client.get("/api/v1/users/1").get_json()
        assert all("password" not in u for u in client.get("/api/v1/users").get_json())
        assert all(
            "password" not in u for u in client.get("/api/v1/organizations/1/users").get_json()
        )

    def test_duplicate_username_is_400(self, client, user_payload):
        client.post("/api/v1/users", json=user_payload)

        response = client.post("/api/v1/users", json=user_payload)

        assert response.status_code == 400
        assert "already exists" in response.get_json()["error"]

    def test_unknown_role_is_400(self, client, user_payload):
        user_payload["role"] = "superuser"

        assert client.post("/api/v1/users", json=user_payload).status_code == 400

    def test_update_and_delete(self, client, user_payload):
        client.post("/api/v1/users", json=user_payload)

        response = client.put("/api/v1/users/1", json={"email": "new@example.com"})
        assert response.get_json()["email"] == "new@example.com"
        assert "password" not in response.get_json()

        assert client.delete("/api/v1/users/1").status_code == 200
        assert client.delete("/api/v1/users/1").status_code == 404


class TestAuthEndpoints:

    def test_login_logout_flow(self, client, user_payload):
        client.post("/api/v1/auth/register", json=user_payload)

        assert client.get("/api/v1/auth/me").status_code == 401

        login = client.post(
            "/api/v1/auth/login", json={"username": "admin", "password": "password"}
        )
        assert login.status_code == 200
        assert login.get_json()["username"] == "admin"
        assert "password" not in login.get_json()

        me = client.get("/api/v1/auth/me")
        assert me.status_code == 200
        assert me.get_json()["id"] == 1

        client.post("/api/v1/auth/logout")
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_bad_credentials_are_401(self, client, user_payload):
        client.post("/api/v1/auth/register", json=user_payload)

        wrong_password = client.post(
            "/api/v1/auth/login", json={"username": "admin", "password": "nope"}
        )
        wrong_user = client.post(
            "/api/v1/auth/login", json={"username": "nobody", "password": "password"}
        )

        assert wrong_password.status_code == 401
        assert wrong_user.status_code == 401
        assert wrong_password.get_json() == wrong_user.get_json()

    def test_login_requires_fields(self, client):
        response = client.post("/api/v1/auth/login", json={"username": "admin"})

        assert response.status_code == 400

    def test_register_duplicate_is_400(self, client, user_payload):
        assert client.post("/api/v1/auth/register", json=user_payload).status_code == 201
        assert client.post("/api/v1/auth/register", json=user_payload).status_code == 400
