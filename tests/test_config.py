"""Tests for Settings.from_env."""

import pytest

from proposely.config import DEFAULT_FROM_EMAIL, Settings


def test_defaults_are_production_without_simulation():
    settings = Settings.from_env({})
    assert settings.app_env == "production"
    assert settings.is_production
    assert settings.simulation_enabled is False
    assert settings.database_url is None
    assert settings.resend_api_key is None
    assert settings.resend_from_email == DEFAULT_FROM_EMAIL
    assert settings.db_statement_timeout_ms == 5000
    assert settings.db_connect_timeout_s == 5
    assert settings.notifier_timeout_s == 10.0


def test_development_enables_simulation():
    settings = Settings.from_env({"APP_ENV": "Development"})
    assert settings.app_env == "development"
    assert settings.simulation_enabled is True
    assert not settings.is_production


@pytest.mark.parametrize(
    "env, expected",
    [
        ({"APP_ENV": "development", "PAYMENT_SIMULATION": "false"}, False),
        ({"APP_ENV": "staging", "PAYMENT_SIMULATION": "1"}, True),
        ({"APP_ENV": "staging", "PAYMENT_SIMULATION": ""}, False),
        ({"APP_ENV": "production", "PAYMENT_SIMULATION": "1"}, False),
        ({"PAYMENT_SIMULATION": "true"}, False),
    ],
)
def test_simulation_override(env, expected):
    assert Settings.from_env(env).simulation_enabled is expected


def test_bad_boolean_rejected():
    with pytest.raises(ValueError, match="PAYMENT_SIMULATION"):
        Settings.from_env({"PAYMENT_SIMULATION": "maybe"})


@pytest.mark.parametrize("name", ["DB_STATEMENT_TIMEOUT_MS", "DB_CONNECT_TIMEOUT_S", "NOTIFIER_TIMEOUT_S"])
def test_non_positive_timeouts_rejected(name):
    with pytest.raises(ValueError, match=name):
        Settings.from_env({name: "0"})


def test_values_read_from_env():
    settings = Settings.from_env(
        {
            "DATABASE_URL": "postgres://u:p@h/db",
            "DB_STATEMENT_TIMEOUT_MS": "250",
            "DB_CONNECT_TIMEOUT_S": "2",
            "RESEND_API_KEY": "  re_abc  ",
            "RESEND_FROM_EMAIL": "Me <me@example.dev>",
            "NOTIFIER_TIMEOUT_S": "2.5",
        }
    )
    assert settings.database_url == "postgres://u:p@h/db"
    assert settings.db_statement_timeout_ms == 250
    assert settings.db_connect_timeout_s == 2
    assert settings.resend_api_key == "re_abc"
    assert settings.resend_from_email == "Me <me@example.dev>"
    assert settings.notifier_timeout_s == 2.5


def test_blank_api_key_is_none():
    assert Settings.from_env({"RESEND_API_KEY": "   "}).resend_api_key is None
