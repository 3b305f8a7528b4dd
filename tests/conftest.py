"""Shared pytest fixtures for hotelbooking tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from hotelbooking.domain.models import Room  # noqa: E402
from hotelbooking.domain.reports import ReportingEngine  # noqa: E402
from hotelbooking.domain.reservations import ReservationEngine  # noqa: E402
from hotelbooking.infra.store import InMemoryStore  # noqa: E402
from hotelbooking.infra.users import InMemoryUserDirectory  # noqa: E402

TEST_USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def rooms():
    return [
        Room(
            id="room-101",
            hotel_id="hotel-1",
            room_type="DOUBLE",
            price_per_night_cents=12000,
            amenities="wifi,tv",
            hotel_name="Seaside Inn",
        ),
        Room(
            id="room-102",
            hotel_id="hotel-1",
            room_type="SUITE",
            price_per_night_cents=25000,
            hotel_name="Seaside Inn",
        ),
        Room(
            id="room-201",
            hotel_id="hotel-2",
            room_type="SINGLE",
            price_per_night_cents=8000,
            hotel_name="Mountain Lodge",
        ),
    ]


@pytest.fixture
def store(rooms):
    return InMemoryStore(rooms)


@pytest.fixture
def users():
    return InMemoryUserDirectory([TEST_USER_ID, OTHER_USER_ID])


@pytest.fixture
def engine(store, users):
    return ReservationEngine(store, users)


@pytest.fixture
def reports(store):
    return ReportingEngine(store)
