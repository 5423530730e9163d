"""Outbound email via the Resend HTTP API.

Security: NEVER log the recipient address or the message text. Only log
hashes and lengths.
"""

from __future__ import annotations

from typing import Any, Protocol

import requests

from proposely.config import Settings
from proposely.observability.logging import get_logger
from proposely.observability.redaction import hash_identifier, safe_log_context

logger = get_logger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"

# Timeout for HTTP requests (seconds)
DEFAULT_TIMEOUT = 10.0


class NotifierError(Exception):
    """Delivery failed at the provider or on the way there."""


class Notifier(Protocol):
    def is_configured(self) -> bool: ...

    def send_email(self, *, to: str, subject: str, text: str) -> str:
        """Send one email and return the provider's message id."""
        ...


class ResendNotifier:
    """Notifier that posts to Resend.

    Usage:
        notifier = ResendNotifier(api_key="re_...", from_address="Me <me@x.dev>")
        message_id = notifier.send_email(to=..., subject=..., text=...)
    """

    def __init__(
        self,
        api_key: str | None,
        from_address: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._from_address = from_address
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResendNotifier":
        return cls(
            settings.resend_api_key,
            settings.resend_from_email,
            timeout=settings.notifier_timeout_s,
        )

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def send_email(self, *, to: str, subject: str, text: str) -> str:
        """Send a plain-text email.

        Args:
            to: Recipient address. NEVER logged.
            subject: Subject line.
            text: Body. NEVER logged.

        Returns:
            Resend message id.

        Raises:
            NotifierError: Not configured, network error, timeout, non-2xx
                           response, or a response without an id.
        """
        if not self._api_key:
            raise NotifierError("RESEND_API_KEY missing")

        log_ctx = safe_log_context(
            to_hash=hash_identifier(to.lower()),
            text_len=len(text),
            provider="resend",
        )
        logger.info("sending acceptance email", extra={"extra_fields": log_ctx})

        payload: dict[str, Any] = {
            "from": self._from_address,
            "to": [to],
            "subject": subject,
            "text": text,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            resp = self._session.post(
                RESEND_API_URL, json=payload, headers=headers, timeout=self._timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(
                "acceptance email timed out",
                extra={"extra_fields": safe_log_context(**log_ctx, error_type="Timeout")},
            )
            raise NotifierError("email provider timed out") from e
        except requests.exceptions.RequestException as e:
            logger.error(
                "acceptance email request failed",
                extra={
                    "extra_fields": safe_log_context(**log_ctx, error_type=type(e).__name__)
                },
            )
            raise NotifierError("email provider unreachable") from e

        if not resp.ok:
            # Provider error bodies can echo the recipient; keep only the status
            logger.error(
                "acceptance email rejected",
                extra={"extra_fields": safe_log_context(**log_ctx, status=resp.status_code)},
            )
            raise NotifierError(f"email provider returned {resp.status_code}")

        try:
            message_id = resp.json().get("id")
        except ValueError as e:
            raise NotifierError("email provider returned invalid JSON") from e
        if not message_id:
            raise NotifierError("email provider returned no message id")

        logger.info(
            "acceptance email sent",
            extra={"extra_fields": safe_log_context(**log_ctx, message_id=message_id)},
        )
        return str(message_id)
