"""Follow-up form submission: email the creator that the answer was yes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from proposely.api.deps import get_dispatcher
from proposely.notifications.dispatcher import AcceptanceDetails, NotificationDispatcher

router = APIRouter(prefix="/api", tags=["invitations"])


class SendInvitationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    proposal_id: str = Field(alias="proposalId", min_length=1, max_length=64)
    date: str | None = Field(default=None, max_length=64)
    vibe: str | None = Field(default=None, max_length=500)
    partner_name: str | None = Field(default=None, alias="partnerName", max_length=200)


class SendInvitationResponse(BaseModel):
    id: str


@router.post("/send-invitation", response_model=SendInvitationResponse)
def send_invitation(
    body: SendInvitationRequest,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> SendInvitationResponse:
    """Send the acceptance email and return the provider message id.

    Raises:
        400: Missing proposalId, or no creator email on record.
        404: Proposal not found.
        500: Email service not configured.
        502: Store or email provider failure.
    """
    message_id = dispatcher.notify_acceptance(
        body.proposal_id,
        AcceptanceDetails(
            vibe=body.vibe,
            when_free=body.date,
            partner_name_override=body.partner_name,
        ),
    )
    return SendInvitationResponse(id=message_id)
