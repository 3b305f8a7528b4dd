"""Users repository - existence checks against the users table.

Registration and login live outside this package.
"""

from psycopg2.extensions import cursor as PgCursor

from hotelbooking.infra.db import fetchone


def user_exists(cur: PgCursor, user_id: str) -> bool:
    return fetchone(cur, "SELECT 1 FROM users WHERE id = %s", (user_id,)) is not None
