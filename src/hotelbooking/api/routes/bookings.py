"""Bookings endpoints.

POST   /bookings                  → book
GET    /bookings/{id}             → single booking
GET    /bookings/user/{user_id}   → a user's bookings (with room/hotel fields)
DELETE /bookings/{id}             → cancel (soft: status becomes CANCELED)
GET    /bookings/admin/all        → every booking (with room/hotel fields)

The caller identity is established upstream; user_id in the body is
trusted as the authenticated principal.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, ConfigDict

from hotelbooking.api.deps import get_reservation_engine
from hotelbooking.domain.reservations import ReservationEngine
from hotelbooking.observability.logging import get_logger
from hotelbooking.observability.redaction import safe_log_context

router = APIRouter(prefix="/bookings", tags=["bookings"])

logger = get_logger(__name__)


class CreateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str
    room_id: str
    check_in: date
    check_out: date


@router.post("", status_code=201)
def create_booking(
    body: CreateBookingRequest,
    engine: ReservationEngine = Depends(get_reservation_engine),
) -> dict:
    """Book a room. 400 if dates are invalid or the room is taken."""
    booking = engine.book(body.user_id, body.room_id, body.check_in, body.check_out)
    logger.info(
        "booking created",
        extra={
            "extra_fields": safe_log_context(booking_id=booking.id, room_id=booking.room_id)
        },
    )
    return booking.to_dict()


@router.get("/admin/all")
def list_all_bookings(
    engine: ReservationEngine = Depends(get_reservation_engine),
) -> list[dict]:
    return [view.to_dict() for view in engine.list_views()]


@router.get("/user/{user_id}")
def list_user_bookings(
    user_id: str = Path(..., min_length=1),
    engine: ReservationEngine = Depends(get_reservation_engine),
) -> list[dict]:
    return [view.to_dict() for view in engine.list_views(user_id)]


@router.get("/{booking_id}")
def get_booking(
    booking_id: str,
    engine: ReservationEngine = Depends(get_reservation_engine),
) -> dict:
    return engine.get_booking(booking_id).to_dict()


@router.delete("/{booking_id}")
def cancel_booking(
    booking_id: str,
    engine: ReservationEngine = Depends(get_reservation_engine),
) -> dict:
    """Cancel a booking. Repeating the call on a cancelled booking returns it unchanged."""
    return engine.cancel(booking_id).to_dict()
