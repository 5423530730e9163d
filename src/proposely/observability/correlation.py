"""Correlation ID management for request tracing."""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Iterator

# Context variable for correlation ID - visible to every log call in the request
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Incoming IDs longer than this are replaced, not echoed back
_MAX_INCOMING_LENGTH = 128


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Get current correlation ID from context."""
    return correlation_id_var.get()


def set_correlation_id(cid: str) -> Token[str]:
    """Set correlation ID in context."""
    return correlation_id_var.set(cid)


def reset_correlation_id(token: Token[str]) -> None:
    """Reset correlation ID to previous value."""
    correlation_id_var.reset(token)


def accept_or_generate(incoming: str | None) -> str:
    """Reuse a caller-supplied correlation ID when it looks sane."""
    if incoming and len(incoming) <= _MAX_INCOMING_LENGTH and incoming.isprintable():
        return incoming
    return generate_correlation_id()


@contextmanager
def correlation_scope(cid: str | None = None) -> Iterator[str]:
    """Bind a correlation ID for the duration of the block.

    Example:
        with correlation_scope("script:confirm") as cid:
            gate.confirm(proposal_id)
    """
    cid = cid or generate_correlation_id()
    token = set_correlation_id(cid)
    try:
        yield cid
    finally:
        reset_correlation_id(token)
