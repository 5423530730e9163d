"""Share resolution: the only read path recipients use."""

from __future__ import annotations

from proposely.observability.logging import get_logger
from proposely.observability.redaction import mask_token, safe_log_context

from .errors import NotFoundError
from .proposals import Proposal, ProposalStore, is_well_formed_slug

logger = get_logger(__name__)

# Same message for "no such slug" and "exists but unpaid"
NOT_FOUND_MESSAGE = "This proposal link is invalid or not yet active."


class ShareResolver:
    def __init__(self, store: ProposalStore) -> None:
        self._store = store

    def resolve(self, slug: str) -> Proposal:
        """Map a share slug to its paid proposal.

        Raises:
            NotFoundError: Unknown slug, malformed slug, or unpaid proposal.
            UpstreamError: Store failure.
        """
        if not is_well_formed_slug(slug):
            raise NotFoundError(NOT_FOUND_MESSAGE)

        proposal = self._store.get_by_slug(slug)
        if proposal is None or not proposal.is_paid:
            logger.info(
                "share slug not resolved",
                extra={
                    "extra_fields": safe_log_context(
                        slug=mask_token(slug),
                        # Internal only; the response is identical either way
                        unpaid_match=proposal is not None,
                    )
                },
            )
            raise NotFoundError(NOT_FOUND_MESSAGE)

        return proposal
