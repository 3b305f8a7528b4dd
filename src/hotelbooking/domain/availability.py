"""Room search: rooms free for a requested stay.

The result is advisory. ReservationEngine.book() re-checks overlaps under
the room lock, so a room listed here can still be taken by a concurrent
booking.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from hotelbooking.domain.intervals import validate_range
from hotelbooking.domain.models import Room

if TYPE_CHECKING:
    from hotelbooking.infra.store import BookingStore


def search_available_rooms(
    store: BookingStore,
    check_in: date,
    check_out: date,
    hotel_id: str | None = None,
) -> list[Room]:
    """List rooms marked available with no CONFIRMED booking overlapping the stay.

    Args:
        store: Booking store.
        check_in: Desired check-in date (inclusive).
        check_out: Desired check-out date (exclusive).
        hotel_id: Restrict the search to one hotel.

    Raises:
        InvalidDateRangeError: check_out is not after check_in.
    """
    validate_range(check_in, check_out)

    return [
        room
        for room in store.list_rooms(hotel_id)
        if room.is_available
        and not store.find_confirmed_bookings_for_room(room.id, check_in, check_out)
    ]
