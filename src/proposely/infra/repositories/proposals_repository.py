"""Proposals repository - persistence for proposal records.

Uses raw SQL with psycopg2 (no ORM). The module-level functions take an open
cursor; PgProposalStore wraps each in its own short transaction and
translates driver failures into the domain error taxonomy.
"""

from __future__ import annotations

import uuid
from typing import Any, Callable, TypeVar

import psycopg2
from psycopg2 import sql
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

from proposely.config import Settings
from proposely.domain.errors import UpstreamError
from proposely.domain.proposals import (
    NewProposal,
    PaymentStatus,
    Proposal,
    ShareSlug,
)
from proposely.infra.db import get_conn, txn
from proposely.observability.logging import get_logger
from proposely.observability.redaction import safe_log_context

logger = get_logger(__name__)

T = TypeVar("T")

_COLUMNS = (
    "id, partner_name, creator_email, phone, custom_message, photo_url, "
    "payment_status, share_slug, created_at, paid_at"
)

# Columns the authoring side may change. Status and slug belong to PaymentGate.
UPDATABLE_FIELDS = {"partner_name", "creator_email", "phone", "custom_message", "photo_url"}


def _row_to_proposal(row: tuple[Any, ...]) -> Proposal:
    return Proposal(
        id=str(row[0]),
        partner_name=row[1],
        creator_email=row[2],
        phone=row[3],
        custom_message=row[4],
        photo_url=row[5],
        payment_status=PaymentStatus(row[6]),
        share_slug=ShareSlug.from_persisted(row[7]) if row[7] else None,
        created_at=row[8],
        paid_at=row[9],
    )


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


def insert_proposal(cur: PgCursor, fields: NewProposal) -> str:
    """Insert an unpaid proposal and return its id."""
    cur.execute(
        """
        INSERT INTO proposals (
            partner_name, creator_email, phone, custom_message, photo_url
        )
        VALUES (%s, %s, %s, %s, %s)
        RETURNING id
        """,
        (
            fields.partner_name,
            fields.creator_email,
            fields.phone,
            fields.custom_message,
            fields.photo_url,
        ),
    )
    row = cur.fetchone()
    return str(row[0])


def get_proposal(cur: PgCursor, proposal_id: str) -> Proposal | None:
    """Get a proposal by id. Non-UUID ids never match."""
    if not _is_uuid(proposal_id):
        return None
    cur.execute(f"SELECT {_COLUMNS} FROM proposals WHERE id = %s", (proposal_id,))
    row = cur.fetchone()
    return _row_to_proposal(row) if row else None


def get_proposal_by_slug(cur: PgCursor, slug: str) -> Proposal | None:
    """Get a proposal by share slug, regardless of payment status."""
    cur.execute(f"SELECT {_COLUMNS} FROM proposals WHERE share_slug = %s", (slug,))
    row = cur.fetchone()
    return _row_to_proposal(row) if row else None


def update_proposal(cur: PgCursor, proposal_id: str, fields: dict[str, Any]) -> Proposal | None:
    """Apply a partial update to the authoring fields.

    Raises:
        ValueError: If fields contains a column outside UPDATABLE_FIELDS.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")
    if not _is_uuid(proposal_id):
        return None
    if not fields:
        return get_proposal(cur, proposal_id)

    names = sorted(fields)
    assignments = sql.SQL(", ").join(
        sql.SQL("{} = %s").format(sql.Identifier(name)) for name in names
    )
    query = sql.SQL("UPDATE proposals SET {} WHERE id = %s RETURNING " + _COLUMNS).format(
        assignments
    )
    cur.execute(query, [fields[name] for name in names] + [proposal_id])
    row = cur.fetchone()
    return _row_to_proposal(row) if row else None


def mark_paid_if_unpaid(cur: PgCursor, proposal_id: str, slug: str) -> Proposal | None:
    """Conditionally flip to paid with the given slug.

    Writes only if the row is still unpaid, so concurrent confirms converge
    on the first slug written. Returns the row as persisted either way.
    """
    if not _is_uuid(proposal_id):
        return None
    cur.execute(
        f"""
        UPDATE proposals
        SET payment_status = 'paid', share_slug = %s, paid_at = now()
        WHERE id = %s AND payment_status = 'unpaid'
        RETURNING {_COLUMNS}
        """,
        (slug, proposal_id),
    )
    row = cur.fetchone()
    if row is not None:
        return _row_to_proposal(row)
    return get_proposal(cur, proposal_id)


def replace_paid_slug(cur: PgCursor, proposal_id: str, slug: str) -> Proposal | None:
    """Overwrite the slug of a paid row. Unpaid rows are left untouched."""
    if not _is_uuid(proposal_id):
        return None
    cur.execute(
        f"""
        UPDATE proposals
        SET share_slug = %s
        WHERE id = %s AND payment_status = 'paid'
        RETURNING {_COLUMNS}
        """,
        (slug, proposal_id),
    )
    row = cur.fetchone()
    if row is not None:
        return _row_to_proposal(row)
    return get_proposal(cur, proposal_id)


class PgProposalStore:
    """ProposalStore backed by Postgres, one connection per call."""

    def __init__(
        self,
        settings: Settings,
        *,
        connect: Callable[[], PgConnection] | None = None,
    ) -> None:
        self._settings = settings
        self._connect = connect or self._default_connect

    def _default_connect(self) -> PgConnection:
        return get_conn(
            self._settings.database_url,
            connect_timeout_s=self._settings.db_connect_timeout_s,
            statement_timeout_ms=self._settings.db_statement_timeout_ms,
        )

    def _run(self, operation: str, fn: Callable[[PgCursor], T]) -> T:
        try:
            with txn(self._connect()) as cur:
                return fn(cur)
        except psycopg2.Error as e:
            logger.error(
                "proposal store call failed",
                extra={
                    "extra_fields": safe_log_context(
                        operation=operation,
                        error_type=type(e).__name__,
                        pgcode=e.pgcode,
                    )
                },
            )
            raise UpstreamError("The proposal store is unavailable. Please try again.") from e

    def create(self, fields: NewProposal) -> str:
        return self._run("create", lambda cur: insert_proposal(cur, fields))

    def get_by_id(self, proposal_id: str) -> Proposal | None:
        return self._run("get_by_id", lambda cur: get_proposal(cur, proposal_id))

    def get_by_slug(self, slug: str) -> Proposal | None:
        return self._run("get_by_slug", lambda cur: get_proposal_by_slug(cur, slug))

    def update(self, proposal_id: str, **fields: Any) -> Proposal | None:
        return self._run("update", lambda cur: update_proposal(cur, proposal_id, fields))

    def mark_paid(self, proposal_id: str, slug: ShareSlug) -> Proposal | None:
        return self._run(
            "mark_paid", lambda cur: mark_paid_if_unpaid(cur, proposal_id, slug.reveal())
        )

    def replace_slug(self, proposal_id: str, slug: ShareSlug) -> Proposal | None:
        return self._run(
            "replace_slug", lambda cur: replace_paid_slug(cur, proposal_id, slug.reveal())
        )
