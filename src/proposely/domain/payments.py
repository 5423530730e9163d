"""Payment gate: the unpaid -> paid transition and share slug issuance.

Real payment processing does not exist here. confirm() simulates the payment
event and is only live when simulation is enabled (non-production).
"""

from __future__ import annotations

from proposely.observability.logging import get_logger
from proposely.observability.redaction import safe_log_context

from .errors import NotFoundError, OperationUnavailableError, ValidationError
from .proposals import Proposal, ProposalStore, ShareSlug

logger = get_logger(__name__)

UNAVAILABLE_MESSAGE = "Dev payment verification is only available in development."


class PaymentGate:
    """Moves a proposal from unpaid to paid and mints its share slug.

    Args:
        store: Proposal store.
        simulation_enabled: Process-wide mode flag. When False every call
                            fails with OperationUnavailableError before the
                            store is touched.
    """

    def __init__(self, store: ProposalStore, *, simulation_enabled: bool) -> None:
        self._store = store
        self._simulation_enabled = simulation_enabled

    def _require_simulation(self, operation: str) -> None:
        if not self._simulation_enabled:
            logger.warning(
                "payment simulation disabled",
                extra={"extra_fields": safe_log_context(operation=operation)},
            )
            raise OperationUnavailableError(UNAVAILABLE_MESSAGE)

    def _load(self, proposal_id: str) -> Proposal:
        if not proposal_id or not proposal_id.strip():
            raise ValidationError("proposalId is required.")
        proposal = self._store.get_by_id(proposal_id)
        if proposal is None:
            raise NotFoundError("Proposal not found.")
        return proposal

    def confirm(self, proposal_id: str) -> ShareSlug:
        """Record the payment event and return the effective share slug.

        Idempotent: an already-paid proposal keeps its slug. On a race the
        slug that the store actually persisted wins.

        Raises:
            OperationUnavailableError: Simulation is disabled.
            ValidationError: proposal_id is blank.
            NotFoundError: No such proposal.
            UpstreamError: Store failure.
        """
        self._require_simulation("confirm")
        proposal = self._load(proposal_id)

        if proposal.is_paid and proposal.share_slug is not None:
            logger.info(
                "payment already confirmed",
                extra={"extra_fields": safe_log_context(proposal_id=proposal_id)},
            )
            return proposal.share_slug

        # Minted only after the payment event, never at creation time
        candidate = ShareSlug._mint()
        stored = self._store.mark_paid(proposal_id, candidate)
        if stored is None:
            raise NotFoundError("Proposal not found.")
        if stored.share_slug is None:
            # Paid row without a slug violates the schema CHECK; treat as gone
            raise NotFoundError("Proposal not found.")

        logger.info(
            "payment confirmed",
            extra={
                "extra_fields": safe_log_context(
                    proposal_id=proposal_id,
                    share_slug=stored.share_slug,
                    lost_race=stored.share_slug != candidate,
                )
            },
        )
        return stored.share_slug

    def remint(self, proposal_id: str) -> ShareSlug:
        """Replace the slug of a paid proposal, revoking the old link.

        Raises:
            OperationUnavailableError: Simulation is disabled.
            ValidationError: Blank id, or the proposal is not paid yet.
            NotFoundError: No such proposal.
        """
        self._require_simulation("remint")
        proposal = self._load(proposal_id)
        if not proposal.is_paid:
            raise ValidationError("Proposal has not been paid yet.")

        stored = self._store.replace_slug(proposal_id, ShareSlug._mint())
        if stored is None or stored.share_slug is None:
            raise NotFoundError("Proposal not found.")

        logger.info(
            "share slug reminted",
            extra={"extra_fields": safe_log_context(proposal_id=proposal_id)},
        )
        return stored.share_slug
