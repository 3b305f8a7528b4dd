"""Rooms repository - read access to rooms joined with their hotel.

Uses raw SQL with psycopg2 (no ORM). Room CRUD lives outside this package;
the reservation engine only reads rooms and locks them.
"""

from psycopg2.extensions import cursor as PgCursor

from hotelbooking.domain.models import Room
from hotelbooking.infra.db import fetchall, fetchone, for_update

_SELECT_ROOMS = """
    SELECT r.id, r.hotel_id, r.room_type, r.price_per_night_cents,
           r.amenities, r.is_available, h.name
    FROM rooms r
    LEFT JOIN hotels h ON h.id = r.hotel_id
"""


def _row_to_room(row: tuple) -> Room:
    return Room(
        id=str(row[0]),
        hotel_id=str(row[1]),
        room_type=row[2],
        price_per_night_cents=row[3],
        amenities=row[4] or "",
        is_available=row[5],
        hotel_name=row[6],
    )


def get_room(cur: PgCursor, room_id: str) -> Room | None:
    """Fetch a single room by id.

    Returns:
        Room, or None if the id does not resolve.
    """
    row = fetchone(cur, _SELECT_ROOMS + " WHERE r.id = %s", (room_id,))
    if row is None:
        return None
    return _row_to_room(row)


def list_rooms(cur: PgCursor, *, hotel_id: str | None = None) -> list[Room]:
    """List rooms, optionally restricted to one hotel, ordered by id."""
    if hotel_id is None:
        rows = fetchall(cur, _SELECT_ROOMS + " ORDER BY r.id")
    else:
        rows = fetchall(cur, _SELECT_ROOMS + " WHERE r.hotel_id = %s ORDER BY r.id", (hotel_id,))
    return [_row_to_room(row) for row in rows]


def lock_room(cur: PgCursor, room_id: str) -> bool:
    """Take a row lock on the room until the surrounding transaction ends.

    Serializes every booking attempt for the same room: a second
    transaction blocks here until the first commits or rolls back.

    Returns:
        True if the room exists (and is now locked), False otherwise.
    """
    row = for_update(cur, "SELECT id FROM rooms WHERE id = %s", (room_id,))
    return row is not None
