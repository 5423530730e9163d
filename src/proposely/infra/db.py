"""Database access layer using psycopg2.

Provides:
- get_conn(): Get a bounded database connection
- txn(): Context manager for short, safe transactions
"""

from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

from proposely.domain.errors import ConfigurationError


def get_conn(
    dsn: str | None,
    *,
    connect_timeout_s: int = 5,
    statement_timeout_ms: int = 5000,
) -> PgConnection:
    """Open a new connection with connect and statement timeouts applied.

    Args:
        dsn: libpq DSN or postgres:// URL.
        connect_timeout_s: Seconds to wait for the server.
        statement_timeout_ms: Server-side limit for every statement.

    Returns:
        psycopg2 connection object.

    Raises:
        ConfigurationError: If no DSN is configured.
        psycopg2.Error: On connection failure.
    """
    if not dsn:
        raise ConfigurationError("Server configuration error.")
    return psycopg2.connect(
        dsn,
        connect_timeout=connect_timeout_s,
        options=f"-c statement_timeout={int(statement_timeout_ms)}",
    )


@contextmanager
def txn(conn: PgConnection) -> Iterator[PgCursor]:
    """Context manager for a short, safe transaction on an open connection.

    Commits on successful exit, rolls back on exception. The connection is
    always closed on exit; each store call owns exactly one.

    Example:
        with txn(get_conn(dsn)) as cur:
            cur.execute("UPDATE proposals SET phone = %s WHERE id = %s", (p, i))
    """
    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
