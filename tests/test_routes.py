import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from salonbook.dependencies.services import get_selection_store
from salonbook.main import app
from salonbook.services.mock_store import reset_mock_store


@pytest.fixture(autouse=True)
def _reset_state() -> None:
    reset_mock_store()
    get_selection_store.cache_clear()
    yield
    reset_mock_store()
    get_selection_store.cache_clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_slots_endpoint(client: TestClient) -> None:
    response = client.get("/slots", params={"employee_id": 1, "service_id": 101, "date": "2026-01-30"})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 56
    assert body["free"] == 21
    assert body["slots"][0]["start_time"] == "2026-01-30T08:00:00"
    assert body["slots"][0]["is_free"] is False


def test_slots_for_unknown_employee_returns_404(client: TestClient) -> None:
    response = client.get("/slots", params={"employee_id": 404, "service_id": 101, "date": "2026-01-30"})

    assert response.status_code == 404


def test_shift_resolve_endpoint(client: TestClient) -> None:
    response = client.get("/shifts/resolve", params={"employee_id": 3, "date": "2026-01-30"})

    assert response.status_code == 200
    assert response.json()["is_working"] is False
    assert response.json()["shift_type"] == "vacation"


def test_layout_endpoint(client: TestClient) -> None:
    response = client.post(
        "/layout",
        json={"start_time": "2026-01-30T12:05:00Z", "end_time": "2026-01-30T13:05:00Z"},
    )

    assert response.status_code == 200
    assert response.json() == {"top_offset_px": 490, "height_px": 120, "clamped": False}


def test_layout_endpoint_clamps_overnight_block(client: TestClient) -> None:
    response = client.post(
        "/layout",
        json={"start_time": "2026-01-30T21:00:00", "end_time": "2026-01-31T01:00:00"},
    )

    assert response.status_code == 200
    assert response.json()["clamped"] is True
    assert response.json()["height_px"] == 120


def test_layout_endpoint_rejects_garbage(client: TestClient) -> None:
    response = client.post("/layout", json={"start_time": "soon", "end_time": "later"})

    assert response.status_code == 422


def test_calendar_day_uses_selected_branch(client: TestClient) -> None:
    response = client.get("/calendar/day", params={"date": "2026-01-30"})

    assert response.status_code == 200
    body = response.json()
    assert [column["name"] for column in body["columns"]] == ["Anna", "Boris"]
    assert body["height_px"] == 1680

    client.put("/context/branch", json={"branch_id": 11})
    riverside = client.get("/calendar/day", params={"date": "2026-01-30"}).json()
    assert [column["name"] for column in riverside["columns"]] == ["Eva"]


def test_calendar_draft(client: TestClient) -> None:
    draft = client.get("/calendar/draft", params={"employee_id": 1, "date": "2026-01-30", "time": "17:30"})
    closed = client.get("/calendar/draft", params={"employee_id": 1, "date": "2026-01-30", "time": "08:00"})
    invalid = client.get("/calendar/draft", params={"employee_id": 1, "date": "2026-01-30", "time": "late"})

    assert draft.status_code == 200
    assert draft.json()["start"] == "17:30"
    assert draft.json()["end"] == "18:30"
    assert closed.status_code == 200
    assert closed.json() is None
    assert invalid.status_code == 422


def test_booking_then_conflict(client: TestClient) -> None:
    payload = {
        "employee_id": 1,
        "service_id": 102,
        "start_time": "2026-01-30T15:00:00",
        "client_name": "Lena",
        "client_phone": "555-0101",
    }

    created = client.post("/bookings", json=payload)
    conflict = client.post("/bookings", json=payload)

    assert created.status_code == 201
    assert created.json()["status"] == "created"
    assert created.json()["appointment"]["end_time"] == "2026-01-30T15:30:00"

    assert conflict.status_code == 409
    detail = conflict.json()["detail"]
    assert detail["status"] == "conflict"
    assert detail["reason"] == f"Overlaps appointment {created.json()['appointment']['id']}"
    assert len(detail["slots"]) == 56


def test_booking_validation_error(client: TestClient) -> None:
    response = client.post("/bookings", json={})

    assert response.status_code == 422
    assert response.json()["detail"] == "Please choose a service"


def test_quick_booking(client: TestClient) -> None:
    response = client.post(
        "/bookings/quick",
        json={
            "employee_id": 2,
            "service_id": 102,
            "date": "2026-01-30",
            "start": "15:00",
            "client_name": "Walk-in",
            "client_phone": "000",
        },
    )

    assert response.status_code == 201
    assert response.json()["appointment"]["end_time"] == "2026-01-30T16:00:00"


def test_create_customer(client: TestClient) -> None:
    response = client.post("/customers", json={"first_name": "Mia", "phone": "777", "branch_id": 10})

    assert response.status_code == 201
    assert response.json()["id"] >= 1


def test_list_and_update_appointments(client: TestClient) -> None:
    listed = client.get("/appointments", params={"employee_ids": "1,2", "date": "2026-01-30"})

    assert listed.status_code == 200
    assert listed.json()["total"] == 4
    assert listed.json()["items"][1]["start_time"] == "2026-01-30T12:05:00"

    updated = client.patch("/appointments/2", json={"status": "arrived"})
    assert updated.status_code == 200
    assert updated.json()["status"] == "arrived"

    missing = client.patch("/appointments/999", json={"status": "arrived"})
    assert missing.status_code == 404

    bad_status = client.patch("/appointments/2", json={"status": "done"})
    assert bad_status.status_code == 422


def test_reviving_cancelled_appointment_over_new_booking_returns_409(client: TestClient) -> None:
    booked = client.post(
        "/bookings",
        json={
            "employee_id": 1,
            "service_id": 102,
            "start_time": "2026-01-30T14:00:00",
            "client_name": "Lena",
            "client_phone": "555-0101",
        },
    )
    assert booked.status_code == 201

    revived = client.patch("/appointments/3", json={"status": "confirmed"})

    assert revived.status_code == 409


def test_appointments_reject_non_numeric_ids(client: TestClient) -> None:
    response = client.get("/appointments", params={"employee_ids": "1,x", "date": "2026-01-30"})

    assert response.status_code == 422


def test_directory_endpoints(client: TestClient) -> None:
    employees = client.get("/directory/employees", params={"branch_id": 10, "visible_only": True})
    services = client.get("/directory/services", params={"branch_id": 11})
    offerings = client.get("/directory/employees/2/services")

    assert employees.json()["total"] == 3
    assert services.json()["total"] == 2
    assert offerings.json() == [{"service_id": 102, "name": "Men's Haircut", "price": 28.0, "duration_minutes": 30}]


def test_branch_context_endpoints(client: TestClient) -> None:
    initial = client.get("/context", params={"session": "owner"})
    assert initial.json()["selected_branch_id"] == 10

    selected = client.put("/context/branch", json={"session": "owner", "branch_id": 11})
    assert selected.status_code == 200
    assert selected.json()["selected_branch_id"] == 11

    services = client.get("/directory/services", params={"session": "owner"})
    assert services.json()["branch_id"] == 11

    unknown = client.put("/context/branch", json={"session": "owner", "branch_id": 99})
    assert unknown.status_code == 404


def test_shift_editor_round_trip(client: TestClient) -> None:
    saved = client.post(
        "/shifts",
        json=[{"employee_id": 3, "date": "2026-02-02", "shift_type": "work", "start_time": "09:00", "end_time": "13:00"}],
    )
    assert saved.status_code == 200
    assert saved.json()[0]["date"] == "2026-02-02"

    state = client.get("/shifts/resolve", params={"employee_id": 3, "date": "2026-02-02"}).json()
    assert state["is_working"] is True

    february = client.get("/shifts", params={"branch_id": 10, "month": "2026-02-01"})
    assert [shift["employee_id"] for shift in february.json()] == [3]


def test_shift_editor_rejects_incomplete_work_shift(client: TestClient) -> None:
    response = client.post("/shifts", json=[{"employee_id": 3, "date": "2026-02-02", "shift_type": "work"}])

    assert response.status_code == 422


def test_schedule_endpoint(client: TestClient) -> None:
    response = client.get("/schedule", params={"branch_id": 10, "start": "2026-01-30", "days": 2})

    assert response.status_code == 200
    rows = {row["name"]: row for row in response.json()["employees"]}
    assert rows["Anna"]["summary"]["total_hours"] == 15.0
    assert len(rows["Anna"]["days"]) == 2


def test_health_endpoints(client: TestClient) -> None:
    assert client.get("/health").json()["status"] == "ok"
    assert client.get("/mcp/info").json()["path"] == "/mcp"
    assert client.get("/mcp/health").json() == {"ok": True}
