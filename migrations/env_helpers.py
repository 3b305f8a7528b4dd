"""Database URL helpers for Alembic migrations.

Extracted so they can be tested without triggering alembic.context at import time.
"""

from __future__ import annotations

import os

from psycopg2.extensions import parse_dsn
from sqlalchemy.engine import URL

DRIVERNAME = "postgresql+psycopg2"


def dsn_to_url(dsn: str) -> str:
    """Convert a libpq DSN or postgres:// URL into a SQLAlchemy URL string.

    Unix-socket hosts (e.g. /cloudsql/...) are passed as the ?host= query
    parameter. DB_PASSWORD fills in a missing password.
    """
    params = parse_dsn(dsn)

    password = params.get("password") or os.environ.get("DB_PASSWORD") or None
    host = params.get("host")
    port = params.get("port")
    query: dict[str, str] = {}

    if host and host.startswith("/"):
        query["host"] = host
        host = None
        port = None

    url = URL.create(
        DRIVERNAME,
        username=params.get("user"),
        password=password,
        host=host,
        port=int(port) if port else None,
        database=params.get("dbname"),
        query=query,
    )
    return url.render_as_string(hide_password=False)


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    if url.startswith(DRIVERNAME + "://"):
        return url
    return dsn_to_url(url)
