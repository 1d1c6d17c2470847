"""Unit tests for structlog configuration."""

import json

import pytest
import structlog

from infrastructure.logging import REDACTED, configure_logging, redact_credentials


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_redacts_credential_keys():
    event = redact_credentials(
        None,
        "info",
        {"event": "login_failed", "email": "a@example.com", "password": "hunter2"},
    )

    assert event == {
        "event": "login_failed",
        "email": "a@example.com",
        "password": REDACTED,
    }


def test_leaves_other_keys_alone():
    event = {"event": "api_key_created", "api_key_id": "01HX", "prefix": "pcls_ab"}

    assert redact_credentials(None, "info", dict(event)) == event


def test_json_output_without_tty(monkeypatch, capsys):
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setattr("sys.stdout.isatty", lambda: False)
    configure_logging()

    structlog.get_logger().info("user_registered", user_id="01HX", token="abc")

    line = json.loads(capsys.readouterr().out.strip())
    assert line["event"] == "user_registered"
    assert line["level"] == "info"
    assert line["token"] == REDACTED
    assert "timestamp" in line


def test_debug_events_filtered_by_default(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdout.isatty", lambda: False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    configure_logging(debug=False)

    structlog.get_logger().debug("noisy")

    assert capsys.readouterr().out == ""


def test_bound_context_is_redacted(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdout.isatty", lambda: False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    configure_logging()

    structlog.contextvars.bind_contextvars(authorization="Bearer abc", request_id="r1")
    try:
        structlog.get_logger().info("request_received")
    finally:
        structlog.contextvars.clear_contextvars()

    line = json.loads(capsys.readouterr().out.strip())
    assert line["authorization"] == REDACTED
    assert line["request_id"] == "r1"
