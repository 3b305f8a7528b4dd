"""Room & booking store - system of record for the reservation engine.

Two backends share the BookingStore protocol:

- InMemoryStore: dict-backed, thread-safe, one lock per room.
- PostgresStore: psycopg2 repositories, one transaction per call;
  room_scope() holds a FOR UPDATE lock on the room row and read_scope()
  runs several reads against one REPEATABLE READ snapshot.

Every persistence failure surfaces as StorageError. NotFound is a None
return value; the engine maps it to its own error kinds.
"""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager, nullcontext
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import ContextManager, Iterator, Protocol

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

from hotelbooking.domain.intervals import intersects_inclusive, overlaps
from hotelbooking.domain.models import Booking, BookingStatus, BookingView, Room
from hotelbooking.domain.reservations import RoomUnavailableError
from hotelbooking.infra.db import txn
from hotelbooking.infra.locks import KeyedLock
from hotelbooking.infra.repositories import bookings_repository, rooms_repository
from hotelbooking.infra.settings import Settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the underlying persistence layer fails."""


class BookingStore(Protocol):
    def get_room(self, room_id: str) -> Room | None: ...

    def list_rooms(self, hotel_id: str | None = None) -> list[Room]: ...

    def get_booking(self, booking_id: str) -> Booking | None: ...

    def find_confirmed_bookings_for_room(
        self, room_id: str, start: date, end: date
    ) -> list[Booking]: ...

    def save_booking(self, booking: Booking) -> Booking: ...

    def set_booking_status(
        self, booking_id: str, status: BookingStatus, expected_status: BookingStatus
    ) -> Booking | None: ...

    def list_bookings(
        self, start: date | None = None, end: date | None = None
    ) -> list[Booking]: ...

    def list_bookings_for_user(self, user_id: str) -> list[Booking]: ...

    def list_booking_views(self, user_id: str | None = None) -> list[BookingView]: ...

    def room_scope(self, room_id: str) -> ContextManager[BookingStore]: ...

    def read_scope(self) -> ContextManager[BookingStore]: ...


# ── In-memory backend ─────────────────────────────────────────────────────────


class InMemoryStore:
    """Thread-safe in-process store.

    Records are immutable and replaced whole under self._lock, so readers
    see either the old or the new version of a booking. room_scope()
    serializes callers per room id through a KeyedLock.
    """

    def __init__(self, rooms: list[Room] | None = None) -> None:
        self._lock = threading.RLock()
        self._room_locks = KeyedLock()
        self._rooms: dict[str, Room] = {}
        self._bookings: dict[str, Booking] = {}
        for room in rooms or []:
            self.add_room(room)

    def add_room(self, room: Room) -> Room:
        with self._lock:
            self._rooms[room.id] = room
        return room

    def get_room(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def list_rooms(self, hotel_id: str | None = None) -> list[Room]:
        with self._lock:
            rooms = list(self._rooms.values())
        if hotel_id is not None:
            rooms = [room for room in rooms if room.hotel_id == hotel_id]
        return rooms

    def get_booking(self, booking_id: str) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def find_confirmed_bookings_for_room(
        self, room_id: str, start: date, end: date
    ) -> list[Booking]:
        with self._lock:
            bookings = list(self._bookings.values())
        found = [
            b
            for b in bookings
            if b.room_id == room_id
            and b.status is BookingStatus.CONFIRMED
            and overlaps(b.check_in, b.check_out, start, end)
        ]
        return sorted(found, key=lambda b: b.check_in)

    def save_booking(self, booking: Booking) -> Booking:
        if booking.id is None:
            booking = replace(
                booking,
                id=str(uuid.uuid4()),
                created_at=datetime.now(timezone.utc),
            )
        with self._lock:
            self._bookings[booking.id] = booking
        return booking

    def set_booking_status(
        self, booking_id: str, status: BookingStatus, expected_status: BookingStatus
    ) -> Booking | None:
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None or current.status is not expected_status:
                return None
            updated = current.with_status(status)
            self._bookings[booking_id] = updated
        return updated

    def list_bookings(self, start: date | None = None, end: date | None = None) -> list[Booking]:
        with self._lock:
            bookings = list(self._bookings.values())
        if start is not None and end is not None:
            bookings = [
                b for b in bookings if intersects_inclusive(b.check_in, b.check_out, start, end)
            ]
        return bookings

    def list_bookings_for_user(self, user_id: str) -> list[Booking]:
        with self._lock:
            return [b for b in self._bookings.values() if b.user_id == user_id]

    def list_booking_views(self, user_id: str | None = None) -> list[BookingView]:
        with self._lock:
            bookings = list(self._bookings.values())
            rooms = dict(self._rooms)
        views = []
        for booking in bookings:
            if user_id is not None and booking.user_id != user_id:
                continue
            room = rooms.get(booking.room_id)
            views.append(
                BookingView(
                    booking=booking,
                    room_type=room.room_type if room else None,
                    hotel_name=room.hotel_name if room else None,
                )
            )
        return views

    @contextmanager
    def room_scope(self, room_id: str) -> Iterator[InMemoryStore]:
        with self._room_locks.hold(room_id):
            yield self

    @contextmanager
    def read_scope(self) -> Iterator[InMemoryStore]:
        """Block writers so a sequence of reads sees one state."""
        with self._lock:
            yield self


# ── Postgres backend ──────────────────────────────────────────────────────────


@contextmanager
def storage_txn(conn: PgConnection | None = None) -> Iterator[PgCursor]:
    """txn() that reports psycopg2 failures as StorageError."""
    try:
        with txn(conn) as cur:
            yield cur
    except psycopg2.Error as exc:
        logger.error(
            "storage failure",
            extra={"extra_fields": {"error_type": type(exc).__name__, "pgcode": exc.pgcode}},
        )
        raise StorageError(f"Storage failure: {type(exc).__name__}") from exc


class _CursorStore:
    """Store operations bound to one open transaction."""

    def __init__(self, cur: PgCursor) -> None:
        self._cur = cur

    def get_room(self, room_id: str) -> Room | None:
        return rooms_repository.get_room(self._cur, room_id)

    def list_rooms(self, hotel_id: str | None = None) -> list[Room]:
        return rooms_repository.list_rooms(self._cur, hotel_id=hotel_id)

    def get_booking(self, booking_id: str) -> Booking | None:
        return bookings_repository.get_booking(self._cur, booking_id)

    def find_confirmed_bookings_for_room(
        self, room_id: str, start: date, end: date
    ) -> list[Booking]:
        return bookings_repository.find_confirmed_overlapping(
            self._cur, room_id=room_id, check_in=start, check_out=end
        )

    def save_booking(self, booking: Booking) -> Booking:
        try:
            if booking.id is None:
                return bookings_repository.insert_booking(self._cur, booking)
            return bookings_repository.upsert_booking(self._cur, booking)
        except pg_errors.ExclusionViolation:
            # no_confirmed_room_overlap: the database caught an overlap the
            # application-level check did not see.
            raise RoomUnavailableError(booking.room_id, booking.check_in, booking.check_out)

    def set_booking_status(
        self, booking_id: str, status: BookingStatus, expected_status: BookingStatus
    ) -> Booking | None:
        return bookings_repository.set_booking_status(
            self._cur, booking_id, status, expected_status=expected_status
        )

    def list_bookings(self, start: date | None = None, end: date | None = None) -> list[Booking]:
        if start is None or end is None:
            return bookings_repository.list_bookings(self._cur)
        return bookings_repository.list_bookings(self._cur, window_start=start, window_end=end)

    def list_bookings_for_user(self, user_id: str) -> list[Booking]:
        return bookings_repository.list_bookings(self._cur, user_id=user_id)

    def list_booking_views(self, user_id: str | None = None) -> list[BookingView]:
        return bookings_repository.list_booking_views(self._cur, user_id=user_id)

    def room_scope(self, room_id: str) -> ContextManager[_CursorStore]:
        raise RuntimeError("room_scope cannot be nested inside an open transaction")

    def read_scope(self) -> ContextManager[_CursorStore]:
        return nullcontext(self)


class PostgresStore:
    """psycopg2-backed store. Each call runs in its own short transaction."""

    def __init__(self, conn: PgConnection | None = None) -> None:
        self._conn = conn

    @contextmanager
    def _scope(self) -> Iterator[_CursorStore]:
        with storage_txn(self._conn) as cur:
            yield _CursorStore(cur)

    def get_room(self, room_id: str) -> Room | None:
        with self._scope() as scope:
            return scope.get_room(room_id)

    def list_rooms(self, hotel_id: str | None = None) -> list[Room]:
        with self._scope() as scope:
            return scope.list_rooms(hotel_id)

    def get_booking(self, booking_id: str) -> Booking | None:
        with self._scope() as scope:
            return scope.get_booking(booking_id)

    def find_confirmed_bookings_for_room(
        self, room_id: str, start: date, end: date
    ) -> list[Booking]:
        with self._scope() as scope:
            return scope.find_confirmed_bookings_for_room(room_id, start, end)

    def save_booking(self, booking: Booking) -> Booking:
        with self._scope() as scope:
            return scope.save_booking(booking)

    def set_booking_status(
        self, booking_id: str, status: BookingStatus, expected_status: BookingStatus
    ) -> Booking | None:
        with self._scope() as scope:
            return scope.set_booking_status(booking_id, status, expected_status)

    def list_bookings(self, start: date | None = None, end: date | None = None) -> list[Booking]:
        with self._scope() as scope:
            return scope.list_bookings(start, end)

    def list_bookings_for_user(self, user_id: str) -> list[Booking]:
        with self._scope() as scope:
            return scope.list_bookings_for_user(user_id)

    def list_booking_views(self, user_id: str | None = None) -> list[BookingView]:
        with self._scope() as scope:
            return scope.list_booking_views(user_id)

    @contextmanager
    def room_scope(self, room_id: str) -> Iterator[_CursorStore]:
        """One transaction holding the room's row lock until commit/rollback."""
        with storage_txn(self._conn) as cur:
            rooms_repository.lock_room(cur, room_id)
            yield _CursorStore(cur)

    @contextmanager
    def read_scope(self) -> Iterator[_CursorStore]:
        """One read-only REPEATABLE READ transaction: every query sees the same snapshot."""
        with storage_txn(self._conn) as cur:
            cur.execute("SET TRANSACTION ISOLATION LEVEL REPEATABLE READ READ ONLY")
            yield _CursorStore(cur)


def create_store(settings: Settings) -> InMemoryStore | PostgresStore:
    if settings.store_backend == "postgres":
        return PostgresStore()
    return InMemoryStore()
