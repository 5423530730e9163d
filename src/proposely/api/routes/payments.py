"""Simulated payment confirmation.

Only live when payment simulation is enabled (development). In any other
mode every call is rejected with 403 before the body is read or the store
is touched.
"""

from __future__ import annotations

import pydantic
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field
from starlette.concurrency import run_in_threadpool

from proposely.api.deps import get_payment_gate, require_payment_simulation
from proposely.domain.payments import PaymentGate

router = APIRouter(prefix="/api", tags=["payments"])


class ConfirmPaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    proposal_id: str = Field(alias="proposalId", min_length=1, max_length=64)


class ConfirmPaymentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    share_slug: str = Field(alias="shareSlug")


@router.post(
    "/dev-verify-payment",
    response_model=ConfirmPaymentResponse,
    dependencies=[Depends(require_payment_simulation)],
)
async def dev_verify_payment(
    request: Request,
    gate: PaymentGate = Depends(get_payment_gate),
) -> ConfirmPaymentResponse:
    """Mark a proposal paid and return its share slug.

    The body is parsed here rather than declared as a parameter, so the mode
    check above runs first even for malformed JSON.

    Raises:
        403: Payment simulation disabled.
        400: Invalid JSON, or proposalId missing or blank.
        404: Proposal not found.
        502: Store failure.
    """
    try:
        body = ConfirmPaymentRequest.model_validate_json(await request.body())
    except pydantic.ValidationError as e:
        raise RequestValidationError(e.errors()) from e

    slug = await run_in_threadpool(gate.confirm, body.proposal_id)
    return ConfirmPaymentResponse(share_slug=slug.reveal())
