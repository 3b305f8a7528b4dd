"""Room search endpoint.

GET /rooms/available?check_in=...&check_out=...[&hotel_id=...]
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from hotelbooking.api.deps import get_store
from hotelbooking.domain.availability import search_available_rooms
from hotelbooking.infra.store import BookingStore

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("/available")
def list_available_rooms(
    check_in: date = Query(..., description="Check-in date (YYYY-MM-DD, inclusive)"),
    check_out: date = Query(..., description="Check-out date (YYYY-MM-DD, exclusive)"),
    hotel_id: str | None = Query(None),
    store: BookingStore = Depends(get_store),
) -> list[dict]:
    """Rooms with no CONFIRMED booking overlapping the stay.

    Advisory: booking re-checks availability under the room lock.
    """
    return [room.to_dict() for room in search_available_rooms(store, check_in, check_out, hotel_id)]
