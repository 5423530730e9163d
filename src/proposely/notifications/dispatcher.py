"""Acceptance notification: tell the proposal's creator the answer was yes."""

from __future__ import annotations

from dataclasses import dataclass

from proposely.domain.errors import (
    ConfigurationError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from proposely.domain.proposals import ProposalStore, looks_like_email
from proposely.observability.logging import get_logger
from proposely.observability.redaction import safe_log_context

from . import templates
from .resend_client import Notifier, NotifierError

logger = get_logger(__name__)


@dataclass(frozen=True)
class AcceptanceDetails:
    """Values from the recipient's follow-up form. All optional."""

    vibe: str | None = None
    when_free: str | None = None
    partner_name_override: str | None = None


def _or_fallback(value: str | None, fallback: str) -> str:
    if value is None or not value.strip():
        return fallback
    return value.strip()


class NotificationDispatcher:
    """Composes the acceptance email and hands it to the notifier.

    Args:
        store: Proposal store used to look up the creator's address.
        notifier: Email collaborator. None means not configured.
    """

    def __init__(self, store: ProposalStore, notifier: Notifier | None) -> None:
        self._store = store
        self._notifier = notifier

    def notify_acceptance(self, proposal_id: str, details: AcceptanceDetails) -> str:
        """Send the acceptance notice and return the notifier's message id.

        Raises:
            ValidationError: Blank id or no usable creator email on record.
            NotFoundError: No such proposal.
            ConfigurationError: Notifier credentials missing.
            UpstreamError: Store or notifier failure.
        """
        if not proposal_id or not proposal_id.strip():
            raise ValidationError("proposalId is required.")

        proposal = self._store.get_by_id(proposal_id)
        if proposal is None:
            raise NotFoundError("Proposal not found.")

        if not looks_like_email(proposal.creator_email):
            raise ValidationError("No creator email found for this proposal.")

        if self._notifier is None or not self._notifier.is_configured():
            logger.error(
                "notifier not configured",
                extra={"extra_fields": safe_log_context(proposal_id=proposal_id)},
            )
            raise ConfigurationError("Email service not configured.")

        subject, text = templates.render(
            "acceptance",
            {
                "partner_name": _or_fallback(
                    details.partner_name_override,
                    _or_fallback(proposal.partner_name, templates.FALLBACK_PARTNER_NAME),
                ),
                "date": _or_fallback(details.when_free, templates.FALLBACK_DATE),
                "vibe": _or_fallback(details.vibe, templates.FALLBACK_VIBE),
            },
        )

        try:
            message_id = self._notifier.send_email(
                to=proposal.creator_email.strip(),
                subject=subject,
                text=text,
            )
        except NotifierError as e:
            logger.error(
                "acceptance notification failed",
                extra={
                    "extra_fields": safe_log_context(
                        proposal_id=proposal_id, error=str(e)
                    )
                },
            )
            raise UpstreamError("Failed to send email.") from e

        logger.info(
            "acceptance notification sent",
            extra={"extra_fields": safe_log_context(proposal_id=proposal_id)},
        )
        return message_id
