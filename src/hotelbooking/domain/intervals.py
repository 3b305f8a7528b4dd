"""Date interval arithmetic for bookings and reports.

All intervals are calendar dates (no time-of-day, no timezone).

Two overlap predicates coexist on purpose:

- overlaps(): half-open [start, end). Used for double-booking detection.
  checkout_A == checkin_B is NOT an overlap (same-day turnover is allowed).
- intersects_inclusive(): closed [start, end] on both sides. Used by the
  revenue/occupancy reports, which count a booking if any part of its stay
  touches the window. Unifying the two would change report numbers.
"""

from __future__ import annotations

from datetime import date


class InvalidDateRangeError(ValueError):
    """Raised when an interval's end is not after its start."""

    def __init__(self, start: date, end: date, message: str | None = None) -> None:
        self.start = start
        self.end = end
        super().__init__(
            message or f"End date {end.isoformat()} must be after start date {start.isoformat()}"
        )


def validate_range(start: date, end: date) -> None:
    """Raise InvalidDateRangeError unless end > start."""
    if end <= start:
        raise InvalidDateRangeError(start, end)


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """True iff [a_start, a_end) and [b_start, b_end) share at least one night."""
    return a_start < b_end and b_start < a_end


def intersects_inclusive(
    start: date,
    end: date,
    window_start: date,
    window_end: date,
) -> bool:
    """True iff [start, end] touches [window_start, window_end] (closed bounds)."""
    return start <= window_end and end >= window_start


def clip(
    start: date,
    end: date,
    window_start: date,
    window_end: date,
) -> tuple[date, date] | None:
    """Intersect [start, end) with [window_start, window_end).

    Returns:
        (clipped_start, clipped_end) or None if the intersection is empty.
    """
    clipped_start = max(start, window_start)
    clipped_end = min(end, window_end)
    if clipped_end <= clipped_start:
        return None
    return clipped_start, clipped_end


def nights(start: date, end: date) -> int:
    """Whole nights between start (check-in) and end (check-out).

    Raises:
        InvalidDateRangeError: If end <= start.
    """
    validate_range(start, end)
    return (end - start).days
