"""Proposal entity, share slug value type and the store contract.

A proposal starts unpaid with no share slug. PaymentGate is the only writer
of payment_status and share_slug; the slug exists iff the proposal is paid.
"""

from __future__ import annotations

import base64
import hmac
import re
import secrets
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from proposely.observability.redaction import mask_token

# 8 random bytes -> 64 bits of entropy -> 11 url-safe base64 chars
SLUG_ENTROPY_BYTES = 8
SLUG_MAX_LENGTH = 64
_SLUG_ALPHABET = re.compile(r"^[A-Za-z0-9_-]+$")

_EMAIL_SHAPE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class ShareSlug:
    """Capability token granting read access to one paid proposal.

    Not constructible from arbitrary strings outside this module's two entry
    points: _mint() (PaymentGate) and from_persisted() (store rows). repr()
    and str() are masked so a slug cannot end up in a log line by accident;
    reveal() is the explicit way to get the token for a response body.
    """

    __slots__ = ("_token",)

    def __init__(self, token: str, *, _key: object = None) -> None:
        if _key is not _CONSTRUCT_KEY:
            raise TypeError("ShareSlug is minted by PaymentGate, not constructed directly")
        self._token = token

    @classmethod
    def _mint(cls) -> "ShareSlug":
        raw = secrets.token_bytes(SLUG_ENTROPY_BYTES)
        token = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
        return cls(token, _key=_CONSTRUCT_KEY)

    @classmethod
    def from_persisted(cls, token: str) -> "ShareSlug":
        """Rebuild a slug read back from the store."""
        return cls(token, _key=_CONSTRUCT_KEY)

    def reveal(self) -> str:
        return self._token

    def masked(self) -> str:
        return mask_token(self._token)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShareSlug):
            return NotImplemented
        return hmac.compare_digest(self._token, other._token)

    def __hash__(self) -> int:
        return hash(self._token)

    def __repr__(self) -> str:
        return f"ShareSlug({self.masked()!r})"

    __str__ = __repr__


_CONSTRUCT_KEY = object()


def is_well_formed_slug(token: str) -> bool:
    """Cheap shape check done before any store lookup."""
    return 0 < len(token) <= SLUG_MAX_LENGTH and bool(_SLUG_ALPHABET.match(token))


def looks_like_email(value: str | None) -> bool:
    return bool(value) and bool(_EMAIL_SHAPE.match(value.strip()))


@dataclass(frozen=True)
class NewProposal:
    """Fields supplied by the authoring flow."""

    partner_name: str
    creator_email: str
    phone: str
    custom_message: str | None = None
    photo_url: str | None = None


@dataclass(frozen=True)
class Proposal:
    id: str
    partner_name: str
    creator_email: str | None
    phone: str
    custom_message: str | None
    photo_url: str | None
    payment_status: PaymentStatus
    share_slug: ShareSlug | None
    created_at: datetime | None = None
    paid_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status is PaymentStatus.PAID


class ProposalStore(Protocol):
    """Persistence contract for proposal records.

    Each call is a single-record read or write. None means "no such record";
    collaborator failures raise UpstreamError, missing credentials
    ConfigurationError.
    """

    def create(self, fields: NewProposal) -> str: ...

    def get_by_id(self, proposal_id: str) -> Proposal | None: ...

    def get_by_slug(self, slug: str) -> Proposal | None: ...

    def update(self, proposal_id: str, **fields: Any) -> Proposal | None: ...

    def mark_paid(self, proposal_id: str, slug: ShareSlug) -> Proposal | None:
        """Set paid + slug only if currently unpaid; return the row as stored."""
        ...

    def replace_slug(self, proposal_id: str, slug: ShareSlug) -> Proposal | None:
        """Overwrite the slug of a paid row; return the row as stored."""
        ...
