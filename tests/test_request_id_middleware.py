from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from space_booking.core.app_factory import create_app


@pytest.fixture
def client(launch_feed, destination_store, booking_repository, generous_rate_limiter) -> TestClient:
    app = create_app(
        launch_feed=launch_feed,
        destination_store=destination_store,
        booking_repository=booking_repository,
        rate_limiter=generous_rate_limiter,
    )
    return TestClient(app)


def test_preserves_incoming_request_id_header(client: TestClient):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient):
    resp = client.get("/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert isinstance(generated, str)

    duration = resp.headers.get("X-Request-Duration-ms")
    assert duration is not None


def test_error_body_carries_request_id(client: TestClient, destination_store):
    destination_store.ids = []
    payload = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "birthday": "1990-12-10",
        "launchpad_id": "pad-1",
        "destination_id": 6,
        "launch_date": "2049-12-25",
    }

    resp = client.post("/bookings", json=payload, headers={"X-Request-ID": "req-502"})

    assert resp.status_code == 502
    assert resp.json()["error"]["request_id"] == "req-502"
