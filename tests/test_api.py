"""Tests for the HTTP layer: routing, error mapping and correlation IDs."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from conftest import OTHER_USER_ID, TEST_USER_ID
from hotelbooking.api.deps import get_store, get_user_directory, reset_dependencies
from hotelbooking.api.factory import create_app
from hotelbooking.infra.store import InMemoryStore, StorageError


@pytest.fixture
def client(store, users):
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_user_directory] = lambda: users
    yield TestClient(app, raise_server_exceptions=False)
    reset_dependencies()


def _book(client, room_id="room-101", check_in="2024-01-10", check_out="2024-01-15", user_id=TEST_USER_ID):
    return client.post(
        "/bookings",
        json={"user_id": user_id, "room_id": room_id, "check_in": check_in, "check_out": check_out},
    )


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestCorrelationId:
    def test_generated_when_missing(self, client):
        resp = client.get("/health")
        assert resp.headers["X-Correlation-ID"]

    def test_echoed_when_provided(self, client):
        resp = client.get("/health", headers={"X-Correlation-ID": "cid-123"})
        assert resp.headers["X-Correlation-ID"] == "cid-123"


class TestCreateBooking:
    def test_created(self, client):
        resp = _book(client)

        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "CONFIRMED"
        assert body["total_cents"] == 60000
        assert body["check_in"] == "2024-01-10"

    def test_overlap_returns_400(self, client):
        _book(client)

        resp = _book(client, check_in="2024-01-12", check_out="2024-01-18", user_id=OTHER_USER_ID)

        assert resp.status_code == 400
        assert resp.json()["detail"] == "room_unavailable"

    def test_invalid_range_returns_400(self, client):
        resp = _book(client, check_in="2024-01-15", check_out="2024-01-15")

        assert resp.status_code == 400
        assert resp.json()["detail"] == "invalid_date_range"

    def test_unknown_room_returns_404(self, client):
        resp = _book(client, room_id="room-999")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "room_not_found"

    def test_unknown_user_returns_404(self, client):
        resp = _book(client, user_id="ghost")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "user_not_found"

    def test_extra_fields_rejected(self, client):
        resp = client.post(
            "/bookings",
            json={
                "user_id": TEST_USER_ID,
                "room_id": "room-101",
                "check_in": "2024-01-10",
                "check_out": "2024-01-15",
                "total_cents": 1,
            },
        )
        assert resp.status_code == 422

    def test_storage_error_returns_500_without_details(self, users):
        store = MagicMock()
        store.room_scope.side_effect = StorageError("Storage failure: OperationalError")
        app = create_app()
        app.dependency_overrides[get_store] = lambda: store
        app.dependency_overrides[get_user_directory] = lambda: users
        client = TestClient(app, raise_server_exceptions=False)

        resp = _book(client)

        assert resp.status_code == 500
        assert resp.json() == {"detail": "storage_error", "message": "Internal storage error"}


class TestCancelBooking:
    def test_cancel(self, client):
        booking_id = _book(client).json()["id"]

        resp = client.delete(f"/bookings/{booking_id}")

        assert resp.status_code == 200
        assert resp.json()["status"] == "CANCELED"
        assert _book(client, user_id=OTHER_USER_ID).status_code == 201

    def test_cancel_twice(self, client):
        booking_id = _book(client).json()["id"]
        client.delete(f"/bookings/{booking_id}")

        resp = client.delete(f"/bookings/{booking_id}")

        assert resp.status_code == 200
        assert resp.json()["status"] == "CANCELED"

    def test_cancel_unknown(self, client):
        resp = client.delete("/bookings/missing")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "booking_not_found"


class TestReadBookings:
    def test_get_booking(self, client):
        booking_id = _book(client).json()["id"]

        resp = client.get(f"/bookings/{booking_id}")

        assert resp.status_code == 200
        assert resp.json()["id"] == booking_id

    def test_user_bookings_include_display_fields(self, client):
        _book(client)
        _book(client, room_id="room-201", user_id=OTHER_USER_ID)

        resp = client.get(f"/bookings/user/{TEST_USER_ID}")

        assert resp.status_code == 200
        (item,) = resp.json()
        assert item["room_type"] == "DOUBLE"
        assert item["hotel_name"] == "Seaside Inn"

    def test_admin_all(self, client):
        _book(client)
        _book(client, room_id="room-201", user_id=OTHER_USER_ID)

        resp = client.get("/bookings/admin/all")

        assert resp.status_code == 200
        assert len(resp.json()) == 2


class TestRooms:
    def test_available(self, client):
        _book(client)

        resp = client.get("/rooms/available", params={"check_in": "2024-01-12", "check_out": "2024-01-13"})

        assert resp.status_code == 200
        assert [r["id"] for r in resp.json()] == ["room-102", "room-201"]

    def test_available_invalid_range(self, client):
        resp = client.get("/rooms/available", params={"check_in": "2024-01-13", "check_out": "2024-01-12"})
        assert resp.status_code == 400


class TestReports:
    def test_revenue(self, client):
        _book(client)
        cancelled = _book(client, room_id="room-102").json()["id"]
        client.delete(f"/bookings/{cancelled}")

        resp = client.get("/reports/revenue", params={"start_date": "2024-01-01", "end_date": "2024-01-31"})

        assert resp.status_code == 200
        assert resp.json()["total_revenue_cents"] == 60000

    def test_occupancy(self, client):
        _book(client, check_in="2024-01-01", check_out="2024-01-11")

        resp = client.get("/reports/occupancy", params={"start_date": "2024-01-01", "end_date": "2024-01-11"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["total_room_nights"] == 30
        assert body["booked_room_nights"] == 10
        assert body["occupancy_rate"] == pytest.approx(100 / 3)

    def test_reversed_window(self, client):
        resp = client.get("/reports/revenue", params={"start_date": "2024-01-31", "end_date": "2024-01-01"})
        assert resp.status_code == 400

    def test_missing_dates(self, client):
        resp = client.get("/reports/occupancy")
        assert resp.status_code == 422


class TestDependencies:
    def test_store_is_cached_until_reset(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("STORE_BACKEND", raising=False)
        reset_dependencies()

        first = get_store()
        assert isinstance(first, InMemoryStore)
        assert get_store() is first

        reset_dependencies()

        assert get_store() is not first
        reset_dependencies()

    def test_reset_rereads_settings(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("STORE_BACKEND", "memory")
        reset_dependencies()
        get_store()

        monkeypatch.setenv("STORE_BACKEND", "redis")
        reset_dependencies()

        with pytest.raises(RuntimeError, match="STORE_BACKEND"):
            get_store()
        reset_dependencies()
