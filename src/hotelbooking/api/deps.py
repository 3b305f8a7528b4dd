"""FastAPI dependencies wiring the engines to the configured store.

The store and user directory are process-wide singletons built lazily from
environment settings. Tests replace them through app.dependency_overrides.
"""

from __future__ import annotations

import threading

from fastapi import Depends

from hotelbooking.domain.reports import ReportingEngine
from hotelbooking.domain.reservations import ReservationEngine, UserDirectory
from hotelbooking.infra.settings import load_settings
from hotelbooking.infra.store import BookingStore, create_store
from hotelbooking.infra.users import create_user_directory

_lock = threading.Lock()
_store: BookingStore | None = None
_users: UserDirectory | None = None


def get_store() -> BookingStore:
    global _store
    with _lock:
        if _store is None:
            _store = create_store(load_settings())
        return _store


def get_user_directory() -> UserDirectory:
    global _users
    with _lock:
        if _users is None:
            _users = create_user_directory(load_settings())
        return _users


def get_reservation_engine(
    store: BookingStore = Depends(get_store),
    users: UserDirectory = Depends(get_user_directory),
) -> ReservationEngine:
    return ReservationEngine(store, users)


def get_reporting_engine(store: BookingStore = Depends(get_store)) -> ReportingEngine:
    return ReportingEngine(store)


def reset_dependencies() -> None:
    """Drop cached singletons so the next request re-reads settings."""
    global _store, _users
    with _lock:
        _store = None
        _users = None
