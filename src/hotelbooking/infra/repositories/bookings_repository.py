"""Bookings repository - persistence for booking records.

Uses raw SQL with psycopg2 (no ORM).

Bookings are never deleted; cancellation is a status update. The
no_confirmed_room_overlap exclusion constraint (see migrations) backs the
application-level overlap check.
"""

from datetime import date

from psycopg2.extensions import cursor as PgCursor

from hotelbooking.domain.models import Booking, BookingStatus, BookingView
from hotelbooking.infra.db import fetchall, fetchone

_BOOKING_COLUMNS = """
    b.id, b.user_id, b.room_id, b.checkin, b.checkout,
    b.total_cents, b.status, b.created_at
"""


def _row_to_booking(row: tuple) -> Booking:
    return Booking(
        id=str(row[0]),
        user_id=str(row[1]),
        room_id=str(row[2]),
        check_in=row[3],
        check_out=row[4],
        total_cents=row[5],
        status=BookingStatus(row[6]),
        created_at=row[7],
    )


def get_booking(cur: PgCursor, booking_id: str) -> Booking | None:
    row = fetchone(
        cur,
        f"SELECT {_BOOKING_COLUMNS} FROM bookings b WHERE b.id = %s",
        (booking_id,),
    )
    if row is None:
        return None
    return _row_to_booking(row)


def find_confirmed_overlapping(
    cur: PgCursor,
    *,
    room_id: str,
    check_in: date,
    check_out: date,
) -> list[Booking]:
    """Find CONFIRMED bookings of a room overlapping [check_in, check_out).

    Overlap formula: (existing.checkin < new_checkout) AND (existing.checkout > new_checkin).
    Strict inequality allows check-out day == check-in day.

    Args:
        cur: Database cursor (should be within the room's locking transaction).
        room_id: Room identifier.
        check_in: Requested check-in date (inclusive).
        check_out: Requested check-out date (exclusive).

    Returns:
        Overlapping bookings ordered by check-in; empty list if none.
    """
    rows = fetchall(
        cur,
        f"""
        SELECT {_BOOKING_COLUMNS}
        FROM bookings b
        WHERE b.room_id = %s
          AND b.status = %s
          AND b.checkin < %s
          AND b.checkout > %s
        ORDER BY b.checkin
        """,
        (room_id, BookingStatus.CONFIRMED.value, check_out, check_in),
    )
    return [_row_to_booking(row) for row in rows]


def insert_booking(cur: PgCursor, booking: Booking) -> Booking:
    """Insert a new booking; the database assigns id and created_at.

    Raises:
        psycopg2.errors.ExclusionViolation: If a CONFIRMED booking for the
            same room overlaps (no_confirmed_room_overlap constraint).
    """
    row = fetchone(
        cur,
        f"""
        INSERT INTO bookings AS b (
            user_id, room_id, checkin, checkout, total_cents, status
        )
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING {_BOOKING_COLUMNS}
        """,
        (
            booking.user_id,
            booking.room_id,
            booking.check_in,
            booking.check_out,
            booking.total_cents,
            booking.status.value,
        ),
    )
    return _row_to_booking(row)


def upsert_booking(cur: PgCursor, booking: Booking) -> Booking:
    """Overwrite a booking by id, inserting it if the id is unknown."""
    row = fetchone(
        cur,
        f"""
        INSERT INTO bookings AS b (
            id, user_id, room_id, checkin, checkout, total_cents, status
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        ON CONFLICT (id) DO UPDATE SET
            user_id = EXCLUDED.user_id,
            room_id = EXCLUDED.room_id,
            checkin = EXCLUDED.checkin,
            checkout = EXCLUDED.checkout,
            total_cents = EXCLUDED.total_cents,
            status = EXCLUDED.status,
            updated_at = now()
        RETURNING {_BOOKING_COLUMNS}
        """,
        (
            booking.id,
            booking.user_id,
            booking.room_id,
            booking.check_in,
            booking.check_out,
            booking.total_cents,
            booking.status.value,
        ),
    )
    return _row_to_booking(row)


def set_booking_status(
    cur: PgCursor,
    booking_id: str,
    status: BookingStatus,
    *,
    expected_status: BookingStatus,
) -> Booking | None:
    """Move a booking from expected_status to status in one UPDATE.

    Returns:
        The updated booking, or None if the id is unknown or the booking is
        no longer in expected_status.
    """
    row = fetchone(
        cur,
        f"""
        UPDATE bookings AS b
        SET status = %s, updated_at = now()
        WHERE b.id = %s AND b.status = %s
        RETURNING {_BOOKING_COLUMNS}
        """,
        (status.value, booking_id, expected_status.value),
    )
    if row is None:
        return None
    return _row_to_booking(row)


def list_bookings(
    cur: PgCursor,
    *,
    user_id: str | None = None,
    window_start: date | None = None,
    window_end: date | None = None,
) -> list[Booking]:
    """List bookings in insertion order with optional filters.

    The window filter uses closed bounds on both ends
    (checkin <= window_end AND checkout >= window_start), matching the
    reporting predicate, so a narrowed scan returns exactly what a full
    scan plus intersects_inclusive() would.
    """
    conditions: list[str] = []
    params: list = []

    if user_id is not None:
        conditions.append("b.user_id = %s")
        params.append(user_id)

    if window_end is not None:
        conditions.append("b.checkin <= %s")
        params.append(window_end)

    if window_start is not None:
        conditions.append("b.checkout >= %s")
        params.append(window_start)

    where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

    rows = fetchall(
        cur,
        f"""
        SELECT {_BOOKING_COLUMNS}
        FROM bookings b
        {where_clause}
        ORDER BY b.created_at, b.id
        """,
        params,
    )
    return [_row_to_booking(row) for row in rows]


def list_booking_views(cur: PgCursor, *, user_id: str | None = None) -> list[BookingView]:
    """List bookings joined with room type and hotel name at query time."""
    where_clause = "WHERE b.user_id = %s" if user_id is not None else ""
    params = (user_id,) if user_id is not None else ()

    rows = fetchall(
        cur,
        f"""
        SELECT {_BOOKING_COLUMNS}, r.room_type, h.name
        FROM bookings b
        LEFT JOIN rooms r ON r.id = b.room_id
        LEFT JOIN hotels h ON h.id = r.hotel_id
        {where_clause}
        ORDER BY b.created_at, b.id
        """,
        params,
    )
    return [
        BookingView(booking=_row_to_booking(row[:8]), room_type=row[8], hotel_name=row[9])
        for row in rows
    ]
