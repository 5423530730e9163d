"""Shared test helpers for Proposely tests.

These are NOT fixtures - they are fakes and recorders that conftest.py and
individual test files build on.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from proposely.domain.errors import UpstreamError
from proposely.domain.proposals import NewProposal, PaymentStatus, Proposal, ShareSlug
from proposely.notifications.resend_client import NotifierError


class InMemoryProposalStore:
    """Dict-backed ProposalStore with the same conditional-update semantics
    as the Postgres implementation.

    - mark_paid writes only while unpaid and returns the stored row.
    - fail_with: set to make every call raise UpstreamError, chained from
      a RuntimeError carrying this detail.
    - calls: operation names in call order.
    """

    def __init__(self) -> None:
        self.rows: dict[str, Proposal] = {}
        self.calls: list[str] = []
        self.fail_with: str | None = None

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with:
            raise UpstreamError() from RuntimeError(self.fail_with)

    @property
    def mutating_calls(self) -> list[str]:
        return [c for c in self.calls if c in ("create", "update", "mark_paid", "replace_slug")]

    def create(self, fields: NewProposal) -> str:
        self._enter("create")
        proposal_id = str(uuid.uuid4())
        self.rows[proposal_id] = Proposal(
            id=proposal_id,
            partner_name=fields.partner_name,
            creator_email=fields.creator_email,
            phone=fields.phone,
            custom_message=fields.custom_message,
            photo_url=fields.photo_url,
            payment_status=PaymentStatus.UNPAID,
            share_slug=None,
            created_at=datetime.now(timezone.utc),
        )
        return proposal_id

    def get_by_id(self, proposal_id: str) -> Proposal | None:
        self._enter("get_by_id")
        return self.rows.get(proposal_id)

    def get_by_slug(self, slug: str) -> Proposal | None:
        self._enter("get_by_slug")
        for row in self.rows.values():
            if row.share_slug is not None and row.share_slug.reveal() == slug:
                return row
        return None

    def update(self, proposal_id: str, **fields: Any) -> Proposal | None:
        self._enter("update")
        row = self.rows.get(proposal_id)
        if row is None:
            return None
        self.rows[proposal_id] = replace(row, **fields)
        return self.rows[proposal_id]

    def mark_paid(self, proposal_id: str, slug: ShareSlug) -> Proposal | None:
        self._enter("mark_paid")
        row = self.rows.get(proposal_id)
        if row is None:
            return None
        if row.payment_status is PaymentStatus.UNPAID:
            row = replace(
                row,
                payment_status=PaymentStatus.PAID,
                share_slug=slug,
                paid_at=datetime.now(timezone.utc),
            )
            self.rows[proposal_id] = row
        return row

    def replace_slug(self, proposal_id: str, slug: ShareSlug) -> Proposal | None:
        self._enter("replace_slug")
        row = self.rows.get(proposal_id)
        if row is None:
            return None
        if row.payment_status is PaymentStatus.PAID:
            row = replace(row, share_slug=slug)
            self.rows[proposal_id] = row
        return row

    # Test-only backdoor mimicking a direct database edit
    def force(self, proposal_id: str, **fields: Any) -> None:
        self.rows[proposal_id] = replace(self.rows[proposal_id], **fields)


class FakeNotifier:
    """Notifier that records sends instead of emailing."""

    def __init__(self, *, configured: bool = True, fail: bool = False) -> None:
        self.configured = configured
        self.fail = fail
        self.sent: list[dict[str, str]] = []

    def is_configured(self) -> bool:
        return self.configured

    def send_email(self, *, to: str, subject: str, text: str) -> str:
        if self.fail:
            raise NotifierError("provider returned 500")
        self.sent.append({"to": to, "subject": subject, "text": text})
        return f"msg_{len(self.sent)}"


class LogRecorder:
    """Simple recorder to capture log calls deterministically."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple, dict]] = []

    def _record(self, level: str, *args, **kwargs) -> None:
        self.calls.append((level, args, kwargs))

    def info(self, *args, **kwargs):
        self._record("info", *args, **kwargs)

    def warning(self, *args, **kwargs):
        self._record("warning", *args, **kwargs)

    def error(self, *args, **kwargs):
        self._record("error", *args, **kwargs)

    def exception(self, *args, **kwargs):
        self._record("exception", *args, **kwargs)

    def debug(self, *args, **kwargs):
        self._record("debug", *args, **kwargs)

    def get_all_logged_content(self) -> str:
        """Concatenate all args and kwargs from all calls into one string."""
        parts = []
        for _, args, kwargs in self.calls:
            parts.append(str(args))
            parts.append(str(kwargs))
        return " ".join(parts)

    def messages(self) -> list[str]:
        return [args[0] for _, args, _ in self.calls if args]


def new_proposal(**overrides: Any) -> NewProposal:
    fields: dict[str, Any] = {
        "partner_name": "Alex",
        "creator_email": "a@example.com",
        "phone": "+1 555 0100",
        "custom_message": None,
        "photo_url": None,
    }
    fields.update(overrides)
    return NewProposal(**fields)
