"""Unit tests for SQL repositories.

These tests mock the database cursor so they run without Postgres.
"""

from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest

from hotelbooking.domain.models import BookingStatus
from hotelbooking.infra.repositories import bookings_repository, rooms_repository, users_repository


@pytest.fixture
def cur():
    """Mocked psycopg2 cursor."""
    return MagicMock()


_ROW = (
    "b-1",
    "user-1",
    "room-101",
    date(2024, 1, 10),
    date(2024, 1, 15),
    60000,
    "CONFIRMED",
    datetime(2024, 1, 1, tzinfo=timezone.utc),
)


class TestFindConfirmedOverlapping:
    def test_strict_inequalities(self, cur):
        """Touching dates must not match: checkin < new_checkout AND checkout > new_checkin."""
        cur.fetchall.return_value = []

        bookings_repository.find_confirmed_overlapping(
            cur,
            room_id="room-101",
            check_in=date(2024, 1, 15),
            check_out=date(2024, 1, 20),
        )

        query, params = cur.execute.call_args[0]
        assert "b.checkin < %s" in query
        assert "b.checkout > %s" in query
        assert params == ("room-101", "CONFIRMED", date(2024, 1, 20), date(2024, 1, 15))

    def test_maps_rows(self, cur):
        cur.fetchall.return_value = [_ROW]

        (booking,) = bookings_repository.find_confirmed_overlapping(
            cur,
            room_id="room-101",
            check_in=date(2024, 1, 12),
            check_out=date(2024, 1, 18),
        )

        assert booking.id == "b-1"
        assert booking.status is BookingStatus.CONFIRMED
        assert booking.nights == 5


class TestSetBookingStatus:
    def test_conditional_update(self, cur):
        cur.fetchone.return_value = _ROW[:6] + ("CANCELED",) + _ROW[7:]

        booking = bookings_repository.set_booking_status(
            cur, "b-1", BookingStatus.CANCELED, expected_status=BookingStatus.CONFIRMED
        )

        query, params = cur.execute.call_args[0]
        assert "UPDATE bookings" in query
        assert "WHERE b.id = %s AND b.status = %s" in query
        assert params == ("CANCELED", "b-1", "CONFIRMED")
        assert booking.status is BookingStatus.CANCELED

    def test_no_matching_row(self, cur):
        cur.fetchone.return_value = None

        assert bookings_repository.set_booking_status(
            cur, "b-1", BookingStatus.CANCELED, expected_status=BookingStatus.CONFIRMED
        ) is None


class TestListBookings:
    def test_no_filters(self, cur):
        cur.fetchall.return_value = []

        bookings_repository.list_bookings(cur)

        query, params = cur.execute.call_args[0]
        assert "WHERE" not in query
        assert params == []

    def test_user_filter(self, cur):
        cur.fetchall.return_value = [_ROW]

        bookings_repository.list_bookings(cur, user_id="user-1")

        query, params = cur.execute.call_args[0]
        assert "b.user_id = %s" in query
        assert params == ["user-1"]


class TestListBookingViews:
    def test_joins_room_and_hotel(self, cur):
        cur.fetchall.return_value = [_ROW + ("DOUBLE", "Seaside Inn")]

        (view,) = bookings_repository.list_booking_views(cur, user_id="user-1")

        query = cur.execute.call_args[0][0]
        assert "LEFT JOIN rooms" in query
        assert "LEFT JOIN hotels" in query
        assert view.booking.id == "b-1"
        assert view.room_type == "DOUBLE"
        assert view.hotel_name == "Seaside Inn"


class TestRoomsRepository:
    def test_get_room_missing(self, cur):
        cur.fetchone.return_value = None
        assert rooms_repository.get_room(cur, "room-404") is None

    def test_null_amenities_become_empty(self, cur):
        cur.fetchone.return_value = ("room-101", "hotel-1", "DOUBLE", 12000, None, True, None)
        assert rooms_repository.get_room(cur, "room-101").amenities == ""

    def test_list_rooms_by_hotel(self, cur):
        cur.fetchall.return_value = []

        rooms_repository.list_rooms(cur, hotel_id="hotel-1")

        query, params = cur.execute.call_args[0]
        assert "r.hotel_id = %s" in query
        assert params == ("hotel-1",)

    def test_lock_room_missing(self, cur):
        cur.fetchone.return_value = None
        assert rooms_repository.lock_room(cur, "room-404") is False


class TestUsersRepository:
    def test_exists(self, cur):
        cur.fetchone.return_value = (1,)
        assert users_repository.user_exists(cur, "user-1") is True

    def test_missing(self, cur):
        cur.fetchone.return_value = None
        assert users_repository.user_exists(cur, "ghost") is False
