"""User directory implementations consumed by the reservation engine."""

from __future__ import annotations

import threading
from typing import Iterable

from psycopg2.extensions import connection as PgConnection

from hotelbooking.infra.repositories.users_repository import user_exists
from hotelbooking.infra.settings import Settings
from hotelbooking.infra.store import storage_txn


class PostgresUserDirectory:
    def __init__(self, conn: PgConnection | None = None) -> None:
        self._conn = conn

    def user_exists(self, user_id: str) -> bool:
        with storage_txn(self._conn) as cur:
            return user_exists(cur, user_id)


class InMemoryUserDirectory:
    """Set of known user ids, for local runs and tests."""

    def __init__(self, user_ids: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._user_ids = set(user_ids)

    def add(self, user_id: str) -> None:
        with self._lock:
            self._user_ids.add(user_id)

    def user_exists(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._user_ids


def create_user_directory(settings: Settings) -> PostgresUserDirectory | InMemoryUserDirectory:
    if settings.store_backend == "postgres":
        return PostgresUserDirectory()
    return InMemoryUserDirectory()
