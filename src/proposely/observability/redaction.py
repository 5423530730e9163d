"""Redaction helpers for safe logging.

Creator emails, phone numbers and share slugs are capabilities or PII and
must never reach a log line in clear. Everything passed as structured log
context goes through safe_log_context().
"""

import hashlib
import re
from typing import Any

# Patterns that should never appear in logs
_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{8,}\d")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_REDACTED = "[REDACTED]"

# Visible prefix of a masked token
_TOKEN_PREFIX_LEN = 3


def redact_string(value: str) -> str:
    """Redact PII patterns from a string."""
    result = _PHONE_PATTERN.sub(_REDACTED, value)
    result = _EMAIL_PATTERN.sub(_REDACTED, result)
    return result


def redact_value(value: Any) -> str:
    """Redact any value for safe logging. Returns string representation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        # For dicts, only log keys (structure), never values
        return f"dict(keys={list(value.keys())})"
    if isinstance(value, (list, tuple)):
        return f"list(len={len(value)})"
    # Value types that know how to mask themselves (e.g. ShareSlug)
    if hasattr(value, "masked"):
        return value.masked()
    return f"<{type(value).__name__}>"


def mask_token(token: str) -> str:
    """Show only the first few characters of a capability token."""
    if len(token) <= _TOKEN_PREFIX_LEN:
        return "***"
    return f"{token[:_TOKEN_PREFIX_LEN]}***"


def hash_identifier(value: str) -> str:
    """Create non-reversible hash for logging. Returns first 12 chars of sha256."""
    return hashlib.sha256(value.encode()).hexdigest()[:12]


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build a context dict safe for logging. All values are redacted."""
    return {k: redact_value(v) for k, v in kwargs.items()}
