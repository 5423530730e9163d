"""Process configuration.

Settings are read from the environment once, by the app factory or a script,
and then passed down explicitly. Domain code never reads os.environ.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_FROM_EMAIL = "Valentine <onboarding@resend.dev>"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(raw: str | None, *, name: str) -> bool | None:
    if raw is None or raw.strip() == "":
        return None
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _parse_positive(raw: str | None, default: float, *, name: str) -> float:
    if raw is None or raw.strip() == "":
        return default
    value = float(raw)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        app_env: Deployment environment. Anything other than "development"
                 disables simulated payments unless PAYMENT_SIMULATION says
                 otherwise; "production" disables them unconditionally.
        simulation_enabled: Whether the dev confirm-payment operation is live.
        database_url: libpq DSN or postgres:// URL for the proposal store.
        db_statement_timeout_ms: Server-side bound for every store query.
        db_connect_timeout_s: Bound for opening a store connection.
        resend_api_key: Credential for the email notifier.
        resend_from_email: Sender shown on acceptance emails.
        notifier_timeout_s: HTTP timeout for the notifier.
    """

    app_env: str = "production"
    simulation_enabled: bool = False
    database_url: str | None = None
    db_statement_timeout_ms: int = 5000
    db_connect_timeout_s: int = 5
    resend_api_key: str | None = None
    resend_from_email: str = DEFAULT_FROM_EMAIL
    notifier_timeout_s: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ValueError: If a numeric or boolean variable is malformed.
        """
        env = os.environ if environ is None else environ

        app_env = (env.get("APP_ENV") or "production").strip().lower()
        override = _parse_bool(env.get("PAYMENT_SIMULATION"), name="PAYMENT_SIMULATION")
        if override is None:
            simulation_enabled = app_env == "development"
        else:
            # The override can switch simulation off anywhere, never on in production
            simulation_enabled = override and app_env != "production"

        return cls(
            app_env=app_env,
            simulation_enabled=simulation_enabled,
            database_url=env.get("DATABASE_URL") or None,
            db_statement_timeout_ms=int(
                _parse_positive(
                    env.get("DB_STATEMENT_TIMEOUT_MS"), 5000, name="DB_STATEMENT_TIMEOUT_MS"
                )
            ),
            db_connect_timeout_s=int(
                _parse_positive(env.get("DB_CONNECT_TIMEOUT_S"), 5, name="DB_CONNECT_TIMEOUT_S")
            ),
            resend_api_key=(env.get("RESEND_API_KEY") or "").strip() or None,
            resend_from_email=env.get("RESEND_FROM_EMAIL") or DEFAULT_FROM_EMAIL,
            notifier_timeout_s=_parse_positive(
                env.get("NOTIFIER_TIMEOUT_S"), 10.0, name="NOTIFIER_TIMEOUT_S"
            ),
        )
