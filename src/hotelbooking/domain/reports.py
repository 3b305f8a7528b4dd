"""Reporting engine - revenue and occupancy over a date window.

Both reports select CONFIRMED bookings with the closed-bounds predicate

    checkin <= end_date AND checkout >= start_date

which is wider than the half-open overlap used for conflict detection: a
booking checking out exactly on start_date still counts toward revenue.
Occupancy then clips each stay to [start_date, end_date), so such touching
stays contribute zero nights.

Reports are read-only and never mutate bookings or rooms. Each report reads
through store.read_scope(), so rooms and bookings come from one snapshot.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from hotelbooking.domain.intervals import InvalidDateRangeError, clip, intersects_inclusive
from hotelbooking.domain.models import Booking, BookingStatus, OccupancyReport, RevenueReport

if TYPE_CHECKING:
    from hotelbooking.infra.store import BookingStore

logger = logging.getLogger(__name__)


def _validate_window(start_date: date, end_date: date) -> None:
    # A zero-length window is allowed; a reversed one is not.
    if end_date < start_date:
        raise InvalidDateRangeError(
            start_date,
            end_date,
            f"Report end date {end_date.isoformat()} is before start date {start_date.isoformat()}",
        )


def _confirmed_in_window(bookings: list[Booking], start_date: date, end_date: date) -> list[Booking]:
    return [
        b
        for b in bookings
        if b.status is BookingStatus.CONFIRMED
        and intersects_inclusive(b.check_in, b.check_out, start_date, end_date)
    ]


class ReportingEngine:
    def __init__(self, store: BookingStore) -> None:
        self._store = store

    def revenue_report(self, start_date: date, end_date: date) -> RevenueReport:
        """Sum total_cents of CONFIRMED bookings touching [start_date, end_date].

        Raises:
            InvalidDateRangeError: end_date before start_date.
        """
        _validate_window(start_date, end_date)

        with self._store.read_scope() as snapshot:
            bookings = _confirmed_in_window(
                snapshot.list_bookings(start_date, end_date), start_date, end_date
            )
        total = sum(b.total_cents for b in bookings)

        logger.info(
            "revenue report computed",
            extra={
                "extra_fields": {
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "booking_count": len(bookings),
                },
            },
        )
        return RevenueReport(
            start_date=start_date,
            end_date=end_date,
            total_revenue_cents=total,
            booking_count=len(bookings),
        )

    def occupancy_report(self, start_date: date, end_date: date) -> OccupancyReport:
        """Percentage of room-nights in the window taken by CONFIRMED bookings.

        occupancy_rate = booked_room_nights / (room_count * window_nights) * 100,
        or 0.0 when there are no rooms or the window has zero nights.

        Raises:
            InvalidDateRangeError: end_date before start_date.
        """
        _validate_window(start_date, end_date)

        with self._store.read_scope() as snapshot:
            rooms = snapshot.list_rooms()
            bookings = _confirmed_in_window(
                snapshot.list_bookings(start_date, end_date), start_date, end_date
            )

        window_nights = (end_date - start_date).days
        total_room_nights = len(rooms) * window_nights

        booked_room_nights = 0
        for booking in bookings:
            clipped = clip(booking.check_in, booking.check_out, start_date, end_date)
            if clipped is not None:
                booked_room_nights += (clipped[1] - clipped[0]).days

        occupancy_rate = 0.0
        if total_room_nights > 0:
            occupancy_rate = booked_room_nights / total_room_nights * 100.0

        logger.info(
            "occupancy report computed",
            extra={
                "extra_fields": {
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "room_count": len(rooms),
                    "booked_room_nights": booked_room_nights,
                },
            },
        )
        return OccupancyReport(
            start_date=start_date,
            end_date=end_date,
            room_count=len(rooms),
            total_room_nights=total_room_nights,
            booked_room_nights=booked_room_nights,
            occupancy_rate=occupancy_rate,
        )
