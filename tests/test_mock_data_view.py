from __future__ import annotations

import asyncio

from fastapi.testclient import TestClient

from salonbook.main import app
from salonbook.schemas.booking import CustomerCreate
from salonbook.services.mock_store import get_mock_store, reset_mock_store


def test_mock_data_view_renders_seed_data() -> None:
    reset_mock_store()
    client = TestClient(app)

    response = client.get("/mock-data")
    assert response.status_code == 200
    body = response.text

    assert "Mock Booking Data" in body
    assert "Aurora Central" in body  # seeded branch name
    assert "Hair Colouring" in body  # seeded service name
    assert "Dmitri" in body  # hidden employees are still listed
    assert "No records found." in body  # no customers yet


def test_mock_data_view_includes_created_records() -> None:
    reset_mock_store()
    store = get_mock_store()

    asyncio.run(
        store.customers.create(
            CustomerCreate(first_name="Test Client", phone="1234567", branch_id=10, email="client@example.com")
        )
    )

    client = TestClient(app)
    response = client.get("/mock-data")
    assert response.status_code == 200

    body = response.text
    assert "Test Client" in body
    assert "client@example.com" in body


def test_delete_mock_data_record_removes_entry() -> None:
    reset_mock_store()
    store = get_mock_store()

    client = TestClient(app)
    delete_response = client.delete("/mock-data/appointments/3")

    assert delete_response.status_code == 200
    payload = delete_response.json()
    assert payload["status"] == "deleted"
    assert payload["collection"] == "appointments"
    assert payload["record_id"] == "3"

    remaining = asyncio.run(store.appointments.get(3))
    assert remaining is None


def test_delete_mock_data_missing_record_returns_404() -> None:
    reset_mock_store()
    client = TestClient(app)

    assert client.delete("/mock-data/shifts/999").status_code == 404
    assert client.delete("/mock-data/customers/abc").status_code == 404


def test_delete_mock_data_unknown_collection_returns_404() -> None:
    reset_mock_store()
    client = TestClient(app)

    response = client.delete("/mock-data/unknown/123")

    assert response.status_code == 404
    assert response.json()["detail"] == "Unsupported mock data collection"
