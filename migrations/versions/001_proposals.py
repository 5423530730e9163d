"""Proposals table.

One row per proposal. share_slug is the capability token for the recipient
link: unique when present, and present exactly when payment_status = 'paid'.

Revision ID: 001_proposals
Revises:
Create Date: 2026-02-07
"""

from __future__ import annotations

from alembic import op

revision = "001_proposals"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")
    op.execute("""
        CREATE TABLE proposals (
            id              uuid PRIMARY KEY DEFAULT gen_random_uuid(),
            partner_name    text NOT NULL,
            creator_email   text NOT NULL,
            phone           text NOT NULL,
            custom_message  text,
            photo_url       text,
            payment_status  text NOT NULL DEFAULT 'unpaid',
            share_slug      text,
            created_at      timestamptz NOT NULL DEFAULT now(),
            paid_at         timestamptz,
            CONSTRAINT proposals_payment_status_check
                CHECK (payment_status IN ('unpaid', 'paid')),
            CONSTRAINT proposals_slug_iff_paid
                CHECK ((share_slug IS NOT NULL) = (payment_status = 'paid'))
        )
    """)
    op.execute("""
        CREATE UNIQUE INDEX proposals_share_slug_key
            ON proposals (share_slug)
            WHERE share_slug IS NOT NULL
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS proposals")
