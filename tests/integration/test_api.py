"""Integration tests for API endpoints"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from hoa_portal.api.main import create_app
from hoa_portal.infrastructure.database.session import get_db
from hoa_portal.infrastructure.seed import seed_demo_data
from hoa_portal.portal import Portal

RESIDENT = {"X-User-ID": "user123"}
NEIGHBOR = {"X-User-ID": "user456"}
ADMIN = {"X-User-ID": "admin001"}


def as_decimal(value) -> Decimal:
    return Decimal(str(value))


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "hoa_notifications_created_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-42"})
    assert response.headers["X-Request-ID"] == "req-42"
    assert client.get("/health").headers["X-Request-ID"]


def test_notifications_require_user_header(client: TestClient):
    assert client.get("/v1/notifications").status_code == 401


def test_list_notifications_newest_first(client: TestClient):
    """Test seeded inbox is scoped to the caller and ordered by recency"""
    response = client.get("/v1/notifications", headers=RESIDENT)

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "user123"
    assert [n["id"] for n in data["notifications"]] == ["notif1", "notif2"]
    assert data["unread_count"] == 1
    assert all(n["user_id"] == "user123" for n in data["notifications"])


def test_mark_notification_read(client: TestClient):
    foreign = client.post("/v1/notifications/notif1/read", headers=NEIGHBOR)
    assert foreign.status_code == 200
    assert foreign.json()["success"] is False

    own = client.post("/v1/notifications/notif1/read", headers=RESIDENT)
    assert own.json()["success"] is True

    data = client.get("/v1/notifications", headers=RESIDENT).json()
    assert data["unread_count"] == 0
    assert data["notifications"][0]["is_read"] is True


def test_mark_all_notifications_read(client: TestClient):
    response = client.post("/v1/notifications/read-all", headers=RESIDENT)
    assert response.json() == {"updated_count": 1, "message": "1 notifications marked as read."}

    again = client.post("/v1/notifications/read-all", headers=RESIDENT)
    assert again.json()["updated_count"] == 0
    assert again.json()["message"] == "No unread notifications to mark."


def test_archive_notification(client: TestClient):
    assert client.post("/v1/notifications/notif2/archive", headers=RESIDENT).json()["success"] is True

    ids = [n["id"] for n in client.get("/v1/notifications", headers=RESIDENT).json()["notifications"]]
    assert ids == ["notif1"]


def test_billing_quote(client: TestClient):
    """Test quote for the reference 30-year loan"""
    response = client.post(
        "/v1/billing/quote",
        json={
            "principal": 250000,
            "annual_interest_rate_percent": 3.5,
            "term_years": 30,
            "payments_made": 60,
            "start_date": "2019-07-01",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert as_decimal(data["monthly_payment"]) == Decimal("1122.61")
    assert data["total_payments"] == 360
    assert len(data["payment_history"]) == 60
    assert data["payment_history"][0]["payment_date"] == "2019-07-01"
    assert data["payment_history"][-1]["payment_date"] == "2024-06-01"
    assert as_decimal(data["remaining_balance"]) == as_decimal(data["payment_history"][-1]["remaining_balance"])


def test_billing_quote_validation(client: TestClient):
    response = client.post(
        "/v1/billing/quote",
        json={"principal": 250000, "annual_interest_rate_percent": 3.5, "term_years": 0},
    )
    assert response.status_code == 422


@pytest.mark.parametrize(
    "payload",
    [
        {"principal": 1000, "annual_interest_rate_percent": 3, "term_years": 1, "payments_made": 96000, "start_date": "2024-01-01"},
        {"principal": 1000, "annual_interest_rate_percent": 3, "term_years": 1, "payments_made": 24, "start_date": "9999-01-01"},
        {"principal": 0.01, "annual_interest_rate_percent": 3.5, "term_years": 30},
        {"principal": 1000, "annual_interest_rate_percent": 3, "term_years": 1000000000},
    ],
)
def test_billing_quote_out_of_range(client: TestClient, payload):
    """Test out-of-range quotes are rejected with 422 rather than a server error"""
    assert client.post("/v1/billing/quote", json=payload).status_code == 422


def test_billing_account_access(client: TestClient):
    own = client.get("/v1/billing/accounts/billing-user1", headers=RESIDENT)
    assert own.status_code == 200
    data = own.json()
    assert as_decimal(data["monthly_payment"]) == Decimal("1122.61")
    assert data["payments_made"] == 60
    assert data["next_due_date"] == "2024-07-01"

    assert client.get("/v1/billing/accounts/billing-user1", headers=NEIGHBOR).status_code == 403
    assert client.get("/v1/billing/accounts/billing-user1", headers=ADMIN).status_code == 200
    assert client.get("/v1/billing/accounts/billing-nope", headers=ADMIN).status_code == 404


def test_billing_reminder(client: TestClient):
    assert client.post("/v1/billing/accounts/billing-user1/reminder", headers=RESIDENT).status_code == 403

    response = client.post("/v1/billing/accounts/billing-user1/reminder", headers=ADMIN)
    assert response.status_code == 200
    assert response.json()["success"] is True

    latest = client.get("/v1/notifications", headers=RESIDENT).json()["notifications"][0]
    assert latest["title"] == "Friendly Payment Reminder"
    assert latest["type"] == "billing"
    assert "$1,122.61" in latest["message"]


def test_announcement_fan_out(client: TestClient):
    """Test posting an announcement notifies each resident"""
    payload = {"title": "Pool Opening", "content": "The community pool opens this weekend.", "type": "event"}

    assert client.post("/v1/announcements", json=payload, headers=RESIDENT).status_code == 403
    assert client.post("/v1/announcements", json={**payload, "title": "Hi"}, headers=ADMIN).status_code == 422

    response = client.post("/v1/announcements", json=payload, headers=ADMIN)
    assert response.status_code == 201
    data = response.json()
    assert data["notified_count"] == 3
    announcement_id = data["announcement"]["id"]

    for headers in (RESIDENT, NEIGHBOR, {"X-User-ID": "user789"}):
        latest = client.get("/v1/notifications", headers=headers).json()["notifications"][0]
        assert latest["title"] == "New event: Pool Opening"
        assert latest["link"] == "/community-feed"

    listed = client.get("/v1/announcements").json()
    assert [a["id"] for a in listed] == [announcement_id]

    updated = client.put(
        f"/v1/announcements/{announcement_id}",
        json={**payload, "title": "Pool Opening Delayed"},
        headers=ADMIN,
    )
    assert updated.json()["title"] == "Pool Opening Delayed"

    assert client.delete(f"/v1/announcements/{announcement_id}", headers=ADMIN).status_code == 204
    assert client.delete(f"/v1/announcements/{announcement_id}", headers=ADMIN).status_code == 404


def test_vehicle_permit_flow(client: TestClient):
    vehicle = client.post(
        "/v1/vehicles",
        json={"make": "Honda", "model": "Civic", "year": "2020", "color": "Blue", "license_plate": "HOA-1"},
        headers=RESIDENT,
    )
    assert vehicle.status_code == 201
    vehicle_id = vehicle.json()["id"]
    assert vehicle.json()["status"] == "pending_permit"

    admin_inbox = client.get("/v1/notifications", headers=ADMIN).json()["notifications"]
    assert admin_inbox[0]["title"] == "New Vehicle Registered"

    assert client.post(f"/v1/vehicles/{vehicle_id}/permit", json={"permit_number": "P-9"}, headers=RESIDENT).status_code == 403
    issued = client.post(f"/v1/vehicles/{vehicle_id}/permit", json={"permit_number": "P-9"}, headers=ADMIN)
    assert issued.json()["status"] == "active"

    resident_inbox = client.get("/v1/notifications", headers=RESIDENT).json()["notifications"]
    assert resident_inbox[0]["title"] == "Vehicle Permit Issued"

    assert len(client.get("/v1/vehicles", headers=RESIDENT).json()) == 1
    assert client.get("/v1/vehicles", headers=NEIGHBOR).json() == []

    assert client.delete(f"/v1/vehicles/{vehicle_id}", headers=NEIGHBOR).status_code == 403
    assert client.delete(f"/v1/vehicles/{vehicle_id}", headers=RESIDENT).status_code == 204
    assert client.get("/v1/vehicles", headers=RESIDENT).json() == []
    assert client.get("/v1/vehicles", headers=ADMIN).json()[0]["status"] == "inactive"


def test_visitor_pass_flow(client: TestClient):
    created = client.post(
        "/v1/visitor-passes",
        json={"visitor_name": "Jane Guest", "visit_date": "2024-07-04", "visit_start_time": "10:00 AM"},
        headers=RESIDENT,
    )
    assert created.status_code == 201
    pass_id = created.json()["id"]

    reviewed = client.post(
        f"/v1/visitor-passes/{pass_id}/status",
        json={"status": "approved", "notes": "Gate 2"},
        headers=ADMIN,
    )
    assert reviewed.status_code == 200
    assert reviewed.json()["status"] == "approved"

    latest = client.get("/v1/notifications", headers=RESIDENT).json()["notifications"][0]
    assert latest["title"] == "Visitor Pass Approved"

    # Approved passes can no longer be cancelled
    assert client.post(f"/v1/visitor-passes/{pass_id}/cancel", headers=RESIDENT).status_code == 422
    assert client.post(f"/v1/visitor-passes/{pass_id}/cancel", headers=NEIGHBOR).status_code == 404


@pytest.fixture
def database_client(db: Session) -> TestClient:
    """Client whose notifications live in the SQL test database"""
    portal = Portal(notification_backend="database")
    seed_demo_data(portal)
    app = create_app(portal)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def test_database_backend_round_trip(database_client: TestClient):
    """Test fan-out and read tracking persist through SQLAlchemy"""
    assert database_client.get("/v1/notifications", headers=RESIDENT).json()["notifications"] == []

    payload = {"title": "Board Election", "content": "Vote for the new board this Friday.", "type": "announcement"}
    assert database_client.post("/v1/announcements", json=payload, headers=ADMIN).status_code == 201

    data = database_client.get("/v1/notifications", headers=RESIDENT).json()
    assert data["unread_count"] == 1
    notification_id = data["notifications"][0]["id"]

    assert database_client.post(f"/v1/notifications/{notification_id}/read", headers=NEIGHBOR).json()["success"] is False
    assert database_client.post(f"/v1/notifications/{notification_id}/read", headers=RESIDENT).json()["success"] is True
    assert database_client.get("/v1/notifications", headers=RESIDENT).json()["unread_count"] == 0
    assert database_client.post("/v1/notifications/read-all", headers=NEIGHBOR).json()["updated_count"] == 1
