"""Authoring endpoints: create a proposal and read it back for the payment page."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, ConfigDict, Field, field_validator

from proposely.api.deps import get_store
from proposely.domain.errors import NotFoundError
from proposely.domain.proposals import NewProposal, ProposalStore, looks_like_email
from proposely.observability.logging import get_logger
from proposely.observability.redaction import safe_log_context

router = APIRouter(prefix="/api/proposals", tags=["proposals"])

logger = get_logger(__name__)


class CreateProposalRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    partner_name: str = Field(alias="partnerName", min_length=1, max_length=200)
    creator_email: str = Field(alias="creatorEmail", max_length=320)
    phone: str = Field(min_length=1, max_length=40)
    custom_message: str | None = Field(default=None, alias="customMessage", max_length=2000)
    photo_url: str | None = Field(default=None, alias="photoUrl", max_length=2048)

    @field_validator("creator_email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        if not looks_like_email(value):
            raise ValueError("Valid email is required")
        return value


class CreateProposalResponse(BaseModel):
    id: str


class ProposalSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    partner_name: str = Field(alias="partnerName")
    custom_message: str | None = Field(default=None, alias="customMessage")
    photo_url: str | None = Field(default=None, alias="photoUrl")
    payment_status: str = Field(alias="paymentStatus")


@router.post("", response_model=CreateProposalResponse, status_code=201)
def create_proposal(
    body: CreateProposalRequest,
    store: ProposalStore = Depends(get_store),
) -> CreateProposalResponse:
    """Create an unpaid proposal. It has no share slug until payment."""
    proposal_id = store.create(
        NewProposal(
            partner_name=body.partner_name,
            creator_email=body.creator_email,
            phone=body.phone,
            custom_message=body.custom_message or None,
            photo_url=body.photo_url or None,
        )
    )
    logger.info(
        "proposal created",
        extra={
            "extra_fields": safe_log_context(
                proposal_id=proposal_id, has_photo=bool(body.photo_url)
            )
        },
    )
    return CreateProposalResponse(id=proposal_id)


@router.get("/{proposal_id}", response_model=ProposalSummary)
def get_proposal(
    proposal_id: str = Path(..., min_length=1, max_length=64),
    store: ProposalStore = Depends(get_store),
) -> ProposalSummary:
    """Proposal summary for the payment page. Contact fields are never returned."""
    proposal = store.get_by_id(proposal_id)
    if proposal is None:
        raise NotFoundError("Proposal not found.")
    return ProposalSummary(
        id=proposal.id,
        partner_name=proposal.partner_name,
        custom_message=proposal.custom_message,
        photo_url=proposal.photo_url,
        payment_status=proposal.payment_status.value,
    )
