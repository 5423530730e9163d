"""FastAPI application factory.

Collaborators (settings, store, notifier) are built once here and put on
app.state; tests pass fakes instead.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from proposely.config import Settings
from proposely.domain.errors import ProposelyError
from proposely.domain.proposals import ProposalStore
from proposely.infra.repositories.proposals_repository import PgProposalStore
from proposely.notifications.resend_client import Notifier, ResendNotifier
from proposely.observability.correlation import (
    CORRELATION_ID_HEADER,
    accept_or_generate,
    correlation_scope,
)
from proposely.observability.logging import get_logger
from proposely.observability.redaction import safe_log_context

from .routers import public
from .routes import invitations, payments, proposals, share

logger = get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    """Turn pydantic errors into one short user-facing sentence."""
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON body."

    loc = [part for part in first.get("loc", ()) if part != "body"]
    field = str(loc[-1]) if loc else "body"
    if first.get("type") in ("missing", "string_too_short"):
        return f"{field} is required."
    if first.get("type") == "value_error":
        ctx_error = (first.get("ctx") or {}).get("error")
        if ctx_error:
            return str(ctx_error)
    return f"{field} is invalid."


def create_app(
    settings: Settings | None = None,
    *,
    store: ProposalStore | None = None,
    notifier: Notifier | None = None,
) -> FastAPI:
    """Create the FastAPI app.

    Args:
        settings: Runtime settings. If None, read from the environment.
        store: Proposal store. Defaults to Postgres via settings.database_url.
        notifier: Email notifier. Defaults to Resend via settings.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title="Proposely",
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else PgProposalStore(settings)
    app.state.notifier = notifier if notifier is not None else ResendNotifier.from_settings(settings)

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        with correlation_scope(accept_or_generate(request.headers.get(CORRELATION_ID_HEADER))) as cid:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response

    @app.exception_handler(ProposelyError)
    async def proposely_error_handler(request: Request, exc: ProposelyError) -> JSONResponse:
        context: dict[str, Any] = safe_log_context(
            path=request.url.path,
            error_type=type(exc).__name__,
            status=exc.status_code,
        )
        if exc.status_code >= 500:
            # Chained cause carries the collaborator detail; logged, not returned
            logger.error(
                "request failed",
                exc_info=exc if exc.__cause__ is not None else None,
                extra={"extra_fields": context},
            )
        else:
            logger.info("request rejected", extra={"extra_fields": context})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    app.include_router(public.router)
    app.include_router(proposals.router)
    app.include_router(payments.router)
    app.include_router(share.router)
    app.include_router(invitations.router)

    logger.info(
        "app created",
        extra={
            "extra_fields": safe_log_context(
                env=settings.app_env,
                payment_simulation=settings.simulation_enabled,
                store_configured=bool(settings.database_url) or store is not None,
                notifier_configured=app.state.notifier.is_configured(),
            )
        },
    )
    return app
