"""Request-scoped dependencies built from objects held on app.state."""

from __future__ import annotations

from fastapi import Depends, Request

from proposely.config import Settings
from proposely.domain.errors import OperationUnavailableError
from proposely.domain.payments import UNAVAILABLE_MESSAGE, PaymentGate
from proposely.domain.proposals import ProposalStore
from proposely.domain.sharing import ShareResolver
from proposely.notifications.dispatcher import NotificationDispatcher
from proposely.notifications.resend_client import Notifier


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ProposalStore:
    return request.app.state.store


def get_notifier(request: Request) -> Notifier | None:
    return request.app.state.notifier


def get_payment_gate(
    settings: Settings = Depends(get_settings),
    store: ProposalStore = Depends(get_store),
) -> PaymentGate:
    return PaymentGate(store, simulation_enabled=settings.simulation_enabled)


def get_share_resolver(store: ProposalStore = Depends(get_store)) -> ShareResolver:
    return ShareResolver(store)


def get_dispatcher(
    store: ProposalStore = Depends(get_store),
    notifier: Notifier | None = Depends(get_notifier),
) -> NotificationDispatcher:
    return NotificationDispatcher(store, notifier)


def require_payment_simulation(settings: Settings = Depends(get_settings)) -> None:
    """Reject simulated-payment calls outside simulation mode, before body use."""
    if not settings.simulation_enabled:
        raise OperationUnavailableError(UNAVAILABLE_MESSAGE)
