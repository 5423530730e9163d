"""Recipient read path: resolve a share slug to the proposal display fields."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, ConfigDict, Field

from proposely.api.deps import get_share_resolver
from proposely.domain.sharing import ShareResolver

router = APIRouter(prefix="/api/share", tags=["share"])


class SharedProposal(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    partner_name: str = Field(alias="partnerName")
    custom_message: str | None = Field(default=None, alias="customMessage")
    photo_url: str | None = Field(default=None, alias="photoUrl")


@router.get("/{slug}", response_model=SharedProposal)
def resolve_share(
    slug: str = Path(...),
    resolver: ShareResolver = Depends(get_share_resolver),
) -> SharedProposal:
    """Return a paid proposal by slug; 404 for unknown or unpaid alike."""
    proposal = resolver.resolve(slug)
    return SharedProposal(
        id=proposal.id,
        partner_name=proposal.partner_name,
        custom_message=proposal.custom_message,
        photo_url=proposal.photo_url,
    )
