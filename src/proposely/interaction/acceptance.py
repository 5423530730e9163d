"""Recipient-side acceptance flow: asking -> accepted.

Session-local and never persisted. While asking, pointer events drive the
evasive reject control and the accept action is always available. Accepting
stops the evasion, fires the celebration once and reveals the follow-up form.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable

from proposely.domain.errors import ProposelyError
from proposely.notifications.dispatcher import AcceptanceDetails

from .evasion import EvasionController, Viewport

if TYPE_CHECKING:
    from proposely.domain.sharing import ShareResolver


class AcceptanceState(str, Enum):
    ASKING = "asking"
    ACCEPTED = "accepted"


@dataclass(frozen=True)
class ParticleBurst:
    """Parameters of the celebratory confetti burst."""

    particle_count: int = 120
    spread: int = 70
    origin_y: float = 0.6
    colors: tuple[str, ...] = ("#ec4899", "#f472b6", "#fbbf24", "#fef3c7")


CELEBRATION_BURST = ParticleBurst()


@dataclass
class FollowUpForm:
    vibe: str = ""
    when_free: str = ""

    def clear(self) -> None:
        self.vibe = ""
        self.when_free = ""


# notify(proposal_id, details) -> message id
NotifyFn = Callable[[str, AcceptanceDetails], str]


@dataclass
class AcceptanceFlow:
    proposal_id: str
    evasion: EvasionController
    celebrate: Callable[[ParticleBurst], None]
    notify: NotifyFn
    partner_name: str | None = None
    state: AcceptanceState = AcceptanceState.ASKING
    form: FollowUpForm | None = None
    last_error: str | None = None
    sent_message_ids: list[str] = field(default_factory=list)

    def on_pointer_move(self, px: float, py: float) -> bool:
        if self.state is not AcceptanceState.ASKING:
            return False
        return self.evasion.on_pointer_move(px, py)

    def accept(self) -> bool:
        """Take the accept action. Returns False if already accepted."""
        if self.state is AcceptanceState.ACCEPTED:
            return False
        self.evasion.stop()
        self.state = AcceptanceState.ACCEPTED
        self.form = FollowUpForm()
        self.celebrate(CELEBRATION_BURST)
        return True

    def submit(self) -> str:
        """Send the follow-up form. May be called any number of times.

        Clears the form on success. On failure the form keeps its values,
        last_error holds the user-facing message and the error propagates.

        Raises:
            RuntimeError: If the flow has not been accepted yet.
            ProposelyError: Whatever the notification path raised. Any other
                exception also propagates, with a generic last_error.
        """
        if self.state is not AcceptanceState.ACCEPTED or self.form is None:
            raise RuntimeError("follow-up form is only available after accepting")

        details = AcceptanceDetails(
            vibe=self.form.vibe or None,
            when_free=self.form.when_free or None,
            partner_name_override=self.partner_name or None,
        )
        try:
            message_id = self.notify(self.proposal_id, details)
        except ProposelyError as e:
            self.last_error = e.public_message
            raise
        except Exception:
            self.last_error = ProposelyError.default_message
            raise

        self.last_error = None
        self.sent_message_ids.append(message_id)
        self.form.clear()
        return message_id


def start_session(
    resolver: ShareResolver,
    slug: str,
    viewport: Viewport,
    *,
    celebrate: Callable[[ParticleBurst], None],
    notify: NotifyFn,
    rng: random.Random | None = None,
) -> AcceptanceFlow:
    """Open a recipient view for a share slug.

    The control is placed only after the slug resolves to a paid proposal.

    Raises:
        NotFoundError: The slug does not resolve.
    """
    proposal = resolver.resolve(slug)
    evasion = EvasionController(viewport, rng)
    evasion.place()
    return AcceptanceFlow(
        proposal_id=proposal.id,
        evasion=evasion,
        celebrate=celebrate,
        notify=notify,
        partner_name=proposal.partner_name,
    )
