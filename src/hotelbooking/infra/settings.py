"""Runtime settings loaded from environment variables.

Environment:
    DATABASE_URL:   Postgres DSN or URL. Enables the postgres backend.
    DB_PASSWORD:    Password fallback when DATABASE_URL carries none
                    (read directly by hotelbooking.infra.db.get_conn).
    STORE_BACKEND:  "postgres" or "memory". Defaults to "postgres" when
                    DATABASE_URL is set, "memory" otherwise.
    LOG_LEVEL:      Logging level name for JSON loggers (default INFO).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

StoreBackend = Literal["postgres", "memory"]

_VALID_BACKENDS = ("postgres", "memory")


@dataclass(frozen=True)
class Settings:
    database_url: str | None = None
    store_backend: StoreBackend = "memory"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build Settings from the current environment.

    Raises:
        RuntimeError: If STORE_BACKEND is unknown, or is "postgres" without
            DATABASE_URL.
    """
    database_url = os.environ.get("DATABASE_URL") or None
    default_backend = "postgres" if database_url else "memory"
    store_backend = os.environ.get("STORE_BACKEND", default_backend).strip().lower()

    if store_backend not in _VALID_BACKENDS:
        raise RuntimeError(
            f"STORE_BACKEND must be one of {', '.join(_VALID_BACKENDS)}, got '{store_backend}'"
        )
    if store_backend == "postgres" and not database_url:
        raise RuntimeError("STORE_BACKEND=postgres requires DATABASE_URL")

    return Settings(
        database_url=database_url,
        store_backend=store_backend,  # type: ignore[arg-type]
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
