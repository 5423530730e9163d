"""Database URL helpers for Alembic migrations.

Kept apart from env.py so they can be tested without an alembic context.
The app itself hands DATABASE_URL straight to psycopg2, which accepts both
libpq key=value DSNs and URLs; SQLAlchemy only accepts URLs.
"""

from __future__ import annotations

import os
import shlex
from urllib.parse import quote_plus

_DRIVER_PREFIX = "postgresql+psycopg2://"


def parse_libpq_dsn(dsn: str) -> dict[str, str]:
    """Parse a libpq key=value DSN. Single-quoted values may contain spaces."""
    tokens: dict[str, str] = {}
    for part in shlex.split(dsn, posix=True):
        key, sep, value = part.partition("=")
        if sep:
            tokens[key.strip()] = value
    return tokens


def libpq_dsn_to_url(dsn: str) -> str:
    """Convert a libpq DSN to a SQLAlchemy URL.

    host=/some/socket/dir becomes a ?host= query parameter, anything else a
    regular host:port netloc.
    """
    tokens = parse_libpq_dsn(dsn)
    user = quote_plus(tokens.get("user", ""))
    password = quote_plus(tokens.get("password", ""))
    credentials = f"{user}:{password}@" if password else (f"{user}@" if user else "")
    dbname = quote_plus(tokens.get("dbname", ""))
    host = tokens.get("host", "localhost")
    port = tokens.get("port", "5432")

    if host.startswith("/"):
        return f"{_DRIVER_PREFIX}{credentials}/{dbname}?host={quote_plus(host)}"
    return f"{_DRIVER_PREFIX}{credentials}{host}:{port}/{dbname}"


def to_sqlalchemy_url(raw: str) -> str:
    """Normalise DATABASE_URL (URL or DSN) to a psycopg2 SQLAlchemy URL."""
    if "://" not in raw:
        return libpq_dsn_to_url(raw)
    for scheme in ("postgres://", "postgresql://"):
        if raw.startswith(scheme):
            return _DRIVER_PREFIX + raw[len(scheme):]
    return raw


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    return to_sqlalchemy_url(url)
