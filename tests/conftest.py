"""Shared pytest fixtures for Proposely tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from helpers import FakeNotifier, InMemoryProposalStore  # noqa: E402
from proposely.api.factory import create_app  # noqa: E402
from proposely.config import Settings  # noqa: E402

DEV_SETTINGS = Settings(app_env="development", simulation_enabled=True)
PROD_SETTINGS = Settings(app_env="production", simulation_enabled=False)


@pytest.fixture
def store() -> InMemoryProposalStore:
    return InMemoryProposalStore()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def dev_client(store, notifier) -> TestClient:
    """App in simulation mode backed by in-memory fakes."""
    return TestClient(create_app(DEV_SETTINGS, store=store, notifier=notifier))


@pytest.fixture
def prod_client(store, notifier) -> TestClient:
    """App in production mode backed by in-memory fakes."""
    return TestClient(create_app(PROD_SETTINGS, store=store, notifier=notifier))
