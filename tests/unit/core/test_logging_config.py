from __future__ import annotations

import json
import logging

import pytest

from state_managers import ConfigurationError, StateManager, configure_logging
from state_managers.core.logging import LogContext, build_log_event
from state_managers.core.logging_config import PACKAGE_LOGGER, JsonFormatter


@pytest.fixture
def package_logger(monkeypatch):
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved_level = logger.level
    installed: list[logging.Handler] = []
    monkeypatch.setattr(logger, "handlers", installed)
    monkeypatch.setattr(logger, "propagate", True)
    logger.setLevel(logging.NOTSET)
    yield logger
    for handler in installed:
        handler.close()
    logger.setLevel(saved_level)


def test_build_log_event_includes_context_and_fields():
    payload = build_log_event(
        "state.transition.committed",
        LogContext(manager="Color", context=None, state="blue"),
        source="red",
    )
    assert payload["event"] == "state.transition.committed"
    assert payload["manager"] == "Color"
    assert payload["state"] == "blue"
    assert payload["source"] == "red"
    assert "timestamp" in payload


def test_json_formatter_flattens_structured_event():
    record = logging.LogRecord("state_managers", logging.INFO, __file__, 1, "state.test", None, None)
    record.event = build_log_event("state.test", LogContext(manager="Color", state="red"), target="blue")

    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "state.test"
    assert payload["level"] == "INFO"
    assert payload["event"] == "state.test"
    assert payload["manager"] == "Color"
    assert payload["state"] == "red"
    assert payload["target"] == "blue"


def test_json_formatter_keeps_plain_event_name():
    record = logging.LogRecord("state_managers", logging.WARNING, __file__, 1, "events.test", None, None)
    record.event = "events.test"

    payload = json.loads(JsonFormatter().format(record))
    assert payload["event"] == "events.test"


def test_configure_logging_installs_package_handler_once(package_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("LOG_FORMAT", "json")
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.delenv("ENV", raising=False)

    assert configure_logging() is package_logger
    configure_logging()

    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.WARNING
    assert package_logger.propagate is False
    assert isinstance(package_logger.handlers[0].formatter, JsonFormatter)


def test_configure_logging_raises_production_floor(package_logger, monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("LOG_FILE", raising=False)

    configure_logging()
    assert package_logger.level == logging.INFO


def test_configure_logging_writes_log_file(package_logger, monkeypatch, tmp_path):
    log_file = tmp_path / "managers.log"
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("LOG_FORMAT", "text")
    monkeypatch.setenv("LOG_FILE", str(log_file))
    monkeypatch.delenv("ENV", raising=False)

    configure_logging()
    logging.getLogger("state_managers.test").info("state.test")
    for handler in package_logger.handlers:
        handler.flush()

    assert len(package_logger.handlers) == 2
    assert "state.test" in log_file.read_text()


def test_configure_logging_rejects_bad_level(package_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warn")
    with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
        configure_logging()
    assert package_logger.handlers == []


def test_suspended_transition_is_logged(caplog):
    machine = StateManager(
        name="Door",
        initial_state="closed",
        states=[{"name": "closed", "transitions": {"to": {"states": []}}}, {"name": "open"}],
        on_suspense=lambda event: None,
    )
    with caplog.at_level(logging.INFO, logger="state_managers"):
        machine.current = "open"

    records = [record for record in caplog.records if record.getMessage() == "state.transition.suspended"]
    assert len(records) == 1
    assert records[0].event["manager"] == "Door"
    assert records[0].event["suspense"] == {"name": "open", "subject": "Door", "previous": "closed"}
