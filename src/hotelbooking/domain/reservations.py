"""Reservation engine - booking creation, cancellation and listings.

book() runs its overlap check and its write inside one store room scope:

    lock room → load room → find overlapping CONFIRMED bookings → price → save

Two requests for the same room are serialized by the scope, so at most one
of them can pass the overlap check for a given range. Requests for
different rooms do not block each other.

Overlap formula (half-open):  (new_checkin < existing_checkout) AND (new_checkout > existing_checkin)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Protocol

from hotelbooking.domain.intervals import nights, validate_range
from hotelbooking.domain.models import Booking, BookingStatus, BookingView

if TYPE_CHECKING:
    from hotelbooking.infra.store import BookingStore

logger = logging.getLogger(__name__)


class ReservationError(Exception):
    """Base class for reservation failures the caller can act on."""


class UserNotFoundError(ReservationError):
    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class RoomNotFoundError(ReservationError):
    def __init__(self, room_id: str) -> None:
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class BookingNotFoundError(ReservationError):
    def __init__(self, booking_id: str) -> None:
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found")


class RoomUnavailableError(ReservationError):
    """Raised when a room already has a CONFIRMED booking overlapping the request."""

    def __init__(
        self,
        room_id: str,
        check_in: date,
        check_out: date,
        conflicting_booking_id: str | None = None,
    ) -> None:
        self.room_id = room_id
        self.check_in = check_in
        self.check_out = check_out
        self.conflicting_booking_id = conflicting_booking_id
        super().__init__(
            f"Room {room_id} is already booked between "
            f"{check_in.isoformat()} and {check_out.isoformat()}"
        )


class BookingNotCancellableError(ReservationError):
    """Raised when cancelling a booking that already reached COMPLETED."""

    def __init__(self, booking_id: str, status: BookingStatus) -> None:
        self.booking_id = booking_id
        self.status = status
        super().__init__(
            f"Booking {booking_id} has status '{status.value}', expected 'CONFIRMED'"
        )


class UserDirectory(Protocol):
    def user_exists(self, user_id: str) -> bool: ...


class ReservationEngine:
    """Creates, cancels and lists bookings against a BookingStore."""

    def __init__(self, store: BookingStore, users: UserDirectory) -> None:
        self._store = store
        self._users = users

    def book(self, user_id: str, room_id: str, check_in: date, check_out: date) -> Booking:
        """Book a room for [check_in, check_out).

        Either a CONFIRMED booking is persisted and returned, or nothing is
        written. A StorageError raised while checking for overlaps aborts
        the booking.

        Raises:
            InvalidDateRangeError: check_out is not after check_in.
            UserNotFoundError: Unknown user.
            RoomNotFoundError: Unknown room.
            RoomUnavailableError: Overlapping CONFIRMED booking exists.
            StorageError: Persistence failure.
        """
        validate_range(check_in, check_out)

        if not self._users.user_exists(user_id):
            raise UserNotFoundError(user_id)

        with self._store.room_scope(room_id) as scope:
            room = scope.get_room(room_id)
            if room is None:
                raise RoomNotFoundError(room_id)

            conflicts = scope.find_confirmed_bookings_for_room(room_id, check_in, check_out)
            if conflicts:
                conflicting_id = conflicts[0].id
                logger.warning(
                    "room unavailable",
                    extra={
                        "extra_fields": {
                            "room_id": room_id,
                            "requested_checkin": check_in.isoformat(),
                            "requested_checkout": check_out.isoformat(),
                            "conflicting_booking_id": conflicting_id,
                            "conflict_count": len(conflicts),
                        },
                    },
                )
                raise RoomUnavailableError(room_id, check_in, check_out, conflicting_id)

            total_cents = nights(check_in, check_out) * room.price_per_night_cents
            booking = scope.save_booking(
                Booking(
                    id=None,
                    user_id=user_id,
                    room_id=room_id,
                    check_in=check_in,
                    check_out=check_out,
                    total_cents=total_cents,
                    status=BookingStatus.CONFIRMED,
                )
            )

        logger.info(
            "booking confirmed",
            extra={
                "extra_fields": {
                    "booking_id": booking.id,
                    "room_id": room_id,
                    "checkin": check_in.isoformat(),
                    "checkout": check_out.isoformat(),
                    "total_cents": total_cents,
                },
            },
        )
        return booking

    def cancel(self, booking_id: str) -> Booking:
        """Cancel a CONFIRMED booking, freeing its dates.

        Cancelling an already CANCELED booking is a no-op: the stored
        record is returned unchanged and not re-saved.

        Raises:
            BookingNotFoundError: Unknown booking.
            BookingNotCancellableError: Booking is COMPLETED.
        """
        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)

        if booking.status is BookingStatus.CANCELED:
            return booking

        if booking.status is not BookingStatus.CONFIRMED:
            raise BookingNotCancellableError(booking_id, booking.status)

        cancelled = self._store.set_booking_status(
            booking_id, BookingStatus.CANCELED, expected_status=BookingStatus.CONFIRMED
        )
        if cancelled is None:
            # Status changed between the read and the update.
            current = self._store.get_booking(booking_id)
            if current is None:
                raise BookingNotFoundError(booking_id)
            if current.status is BookingStatus.CANCELED:
                return current
            raise BookingNotCancellableError(booking_id, current.status)

        logger.info(
            "booking cancelled",
            extra={
                "extra_fields": {
                    "booking_id": booking_id,
                    "room_id": booking.room_id,
                },
            },
        )
        return cancelled

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def list_by_user(self, user_id: str) -> list[Booking]:
        """All bookings of a user, any status, in insertion order."""
        return self._store.list_bookings_for_user(user_id)

    def list_all(self) -> list[Booking]:
        return self._store.list_bookings()

    def list_views(self, user_id: str | None = None) -> list[BookingView]:
        """Bookings with room type and hotel name joined in at read time."""
        return self._store.list_booking_views(user_id)
