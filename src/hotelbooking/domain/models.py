"""Domain records: rooms, bookings and report results.

Records are frozen dataclasses. A status change produces a new Booking via
with_status(); stores replace whole records, so a reader never observes a
half-updated booking.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum

from hotelbooking.domain.intervals import nights, validate_range


class BookingStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    CANCELED = "CANCELED"
    COMPLETED = "COMPLETED"

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.CONFIRMED

    def can_transition_to(self, target: BookingStatus) -> bool:
        """Only CONFIRMED -> CANCELED and CONFIRMED -> COMPLETED are allowed."""
        if self is target:
            return True
        return self is BookingStatus.CONFIRMED


class InvalidStatusTransitionError(Exception):
    """Raised when a booking is moved out of a terminal status."""

    def __init__(self, booking_id: str | None, current: BookingStatus, target: BookingStatus) -> None:
        self.booking_id = booking_id
        self.current = current
        self.target = target
        super().__init__(
            f"Booking {booking_id} cannot go from {current.value} to {target.value}"
        )


@dataclass(frozen=True)
class Room:
    id: str
    hotel_id: str
    room_type: str
    price_per_night_cents: int
    amenities: str = ""
    is_available: bool = True
    hotel_name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.price_per_night_cents < 0:
            raise ValueError(
                f"Room {self.id} price_per_night_cents must be >= 0, "
                f"got {self.price_per_night_cents}"
            )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "hotel_id": self.hotel_id,
            "hotel_name": self.hotel_name,
            "room_type": self.room_type,
            "price_per_night_cents": self.price_per_night_cents,
            "amenities": self.amenities,
            "is_available": self.is_available,
        }


@dataclass(frozen=True)
class Booking:
    """A reservation of one room for [check_in, check_out).

    total_cents is computed once at booking time and never recomputed,
    even if the room's nightly price changes later.
    """

    id: str | None
    user_id: str
    room_id: str
    check_in: date
    check_out: date
    total_cents: int
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        validate_range(self.check_in, self.check_out)

    @property
    def nights(self) -> int:
        return nights(self.check_in, self.check_out)

    def with_status(self, status: BookingStatus) -> Booking:
        if not self.status.can_transition_to(status):
            raise InvalidStatusTransitionError(self.id, self.status, status)
        return replace(self, status=status)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "room_id": self.room_id,
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
            "total_cents": self.total_cents,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class BookingView:
    """Booking joined with room/hotel display fields at read time.

    Never persisted: room_type and hotel_name always reflect the current
    room and hotel rows.
    """

    booking: Booking
    room_type: str | None = None
    hotel_name: str | None = None

    def to_dict(self) -> dict:
        data = self.booking.to_dict()
        data["room_type"] = self.room_type
        data["hotel_name"] = self.hotel_name
        return data


@dataclass(frozen=True)
class RevenueReport:
    start_date: date
    end_date: date
    total_revenue_cents: int
    booking_count: int

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_revenue_cents": self.total_revenue_cents,
            "booking_count": self.booking_count,
        }


@dataclass(frozen=True)
class OccupancyReport:
    start_date: date
    end_date: date
    room_count: int
    total_room_nights: int
    booked_room_nights: int
    occupancy_rate: float

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "room_count": self.room_count,
            "total_room_nights": self.total_room_nights,
            "booked_room_nights": self.booked_room_nights,
            "occupancy_rate": self.occupancy_rate,
        }
