"""Reservation schema: hotels, rooms, users, bookings.

bookings carries the no_confirmed_room_overlap exclusion constraint. It is
the database-level guard behind the application's per-room lock:
daterange('[)') gives the same half-open semantics as the overlap check,
so checkout_A == checkin_B is not a conflict. Only CONFIRMED rows take
part, so cancelling a booking frees its dates.

Revision ID: 001_reservation_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op

revision = "001_reservation_schema"
down_revision = None
branch_labels = None
depends_on = None


_UPGRADE_SQL = """
CREATE EXTENSION IF NOT EXISTS btree_gist;
CREATE EXTENSION IF NOT EXISTS pgcrypto;

CREATE TABLE hotels (
    id text PRIMARY KEY,
    name text NOT NULL,
    location text
);

CREATE TABLE rooms (
    id text PRIMARY KEY,
    hotel_id text NOT NULL REFERENCES hotels (id),
    room_type text NOT NULL,
    price_per_night_cents integer NOT NULL CHECK (price_per_night_cents >= 0),
    amenities text NOT NULL DEFAULT '',
    is_available boolean NOT NULL DEFAULT true
);

CREATE INDEX rooms_hotel_id_idx ON rooms (hotel_id);

CREATE TABLE users (
    id text PRIMARY KEY
);

CREATE TYPE booking_status AS ENUM ('CONFIRMED', 'CANCELED', 'COMPLETED');

CREATE TABLE bookings (
    id text PRIMARY KEY DEFAULT gen_random_uuid()::text,
    user_id text NOT NULL REFERENCES users (id),
    room_id text NOT NULL REFERENCES rooms (id),
    checkin date NOT NULL,
    checkout date NOT NULL,
    total_cents integer NOT NULL CHECK (total_cents >= 0),
    status booking_status NOT NULL DEFAULT 'CONFIRMED',
    created_at timestamptz NOT NULL DEFAULT now(),
    updated_at timestamptz NOT NULL DEFAULT now(),
    CONSTRAINT bookings_checkout_after_checkin CHECK (checkout > checkin),
    CONSTRAINT no_confirmed_room_overlap EXCLUDE USING gist (
        room_id WITH =,
        daterange(checkin, checkout, '[)') WITH &&
    ) WHERE (status = 'CONFIRMED')
);

CREATE INDEX bookings_user_id_idx ON bookings (user_id);
CREATE INDEX bookings_room_dates_idx ON bookings (room_id, checkin, checkout);
"""


def upgrade() -> None:
    op.execute(_UPGRADE_SQL)


def downgrade() -> None:
    op.execute(
        """
        DROP TABLE IF EXISTS bookings;
        DROP TYPE IF EXISTS booking_status;
        DROP TABLE IF EXISTS users;
        DROP TABLE IF EXISTS rooms;
        DROP TABLE IF EXISTS hotels;
        """
    )
    # btree_gist and pgcrypto are kept: other objects may depend on them.
