"""Tests for the Resend email notifier - verifies NO PII in logs."""

from unittest.mock import MagicMock

import pytest
import requests

from helpers import LogRecorder
from proposely.config import Settings
from proposely.notifications.resend_client import (
    RESEND_API_URL,
    NotifierError,
    ResendNotifier,
)

TO = "creator@example.com"
TEXT = "Congrats! Alex accepted your proposal. Date: TBD, Vibe: dinner."


def _response(status: int, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def _notifier(session, api_key="re_test_key"):
    return ResendNotifier(api_key, "Valentine <v@example.dev>", timeout=3, session=session)


def test_posts_payload_with_bearer_and_timeout():
    session = MagicMock()
    session.post.return_value = _response(200, {"id": "email_123"})

    message_id = _notifier(session).send_email(to=TO, subject="Hi", text=TEXT)

    assert message_id == "email_123"
    args, kwargs = session.post.call_args
    assert args[0] == RESEND_API_URL
    assert kwargs["json"] == {
        "from": "Valentine <v@example.dev>",
        "to": [TO],
        "subject": "Hi",
        "text": TEXT,
    }
    assert kwargs["headers"]["Authorization"] == "Bearer re_test_key"
    assert kwargs["timeout"] == 3


def test_is_configured():
    assert _notifier(MagicMock()).is_configured()
    assert not _notifier(MagicMock(), api_key=None).is_configured()
    assert not _notifier(MagicMock(), api_key="").is_configured()


def test_unconfigured_send_never_hits_network():
    session = MagicMock()
    with pytest.raises(NotifierError):
        _notifier(session, api_key=None).send_email(to=TO, subject="s", text=TEXT)
    session.post.assert_not_called()


def test_from_settings():
    settings = Settings(resend_api_key="re_x", resend_from_email="Me <me@x.dev>", notifier_timeout_s=4)
    notifier = ResendNotifier.from_settings(settings)
    assert notifier.is_configured()


@pytest.mark.parametrize(
    "side_effect",
    [requests.exceptions.Timeout("slow"), requests.exceptions.ConnectionError("down")],
)
def test_transport_errors_become_notifier_error(side_effect):
    session = MagicMock()
    session.post.side_effect = side_effect
    with pytest.raises(NotifierError):
        _notifier(session).send_email(to=TO, subject="s", text=TEXT)


@pytest.mark.parametrize(
    "resp",
    [
        _response(422, {"message": f"invalid to: {TO}"}),
        _response(500, {}),
        _response(200, {}),
        _response(200, ValueError("not json")),
    ],
)
def test_bad_responses_become_notifier_error(resp):
    session = MagicMock()
    session.post.return_value = resp
    with pytest.raises(NotifierError):
        _notifier(session).send_email(to=TO, subject="s", text=TEXT)


class TestNoPiiLeakage:
    def test_success_logs_no_pii(self, monkeypatch):
        recorder = LogRecorder()
        monkeypatch.setattr("proposely.notifications.resend_client.logger", recorder)
        session = MagicMock()
        session.post.return_value = _response(200, {"id": "email_123"})

        _notifier(session).send_email(to=TO, subject="s", text=TEXT)

        logged = recorder.get_all_logged_content()
        assert TO not in logged
        assert "creator" not in logged
        assert TEXT not in logged
        assert "re_test_key" not in logged
        assert "to_hash" in logged
        assert "text_len" in logged

    def test_rejection_logs_no_pii(self, monkeypatch):
        recorder = LogRecorder()
        monkeypatch.setattr("proposely.notifications.resend_client.logger", recorder)
        session = MagicMock()
        session.post.return_value = _response(422, {"message": f"invalid to: {TO}"})

        with pytest.raises(NotifierError):
            _notifier(session).send_email(to=TO, subject="s", text=TEXT)

        logged = recorder.get_all_logged_content()
        assert TO not in logged
        assert "422" in logged
