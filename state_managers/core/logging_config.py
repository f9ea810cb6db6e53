"""Opt-in structured logging for the state managers package."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from state_managers.core.config import get_config, validate_logging_config

PACKAGE_LOGGER = "state_managers"
TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON line per record, with the structured event fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event = getattr(record, "event", None)
        if isinstance(event, dict):
            # build_log_event payloads: manager, context, state and per-event fields.
            payload.update({key: value for key, value in event.items() if key not in payload})
        elif event is not None:
            payload["event"] = event
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging() -> logging.Logger:
    """Attach handlers to the package logger once and return it.

    Records stop at the package logger so a host application's root handlers
    do not print them a second time.
    """
    config = get_config()
    validate_logging_config(config)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return package_logger

    level = getattr(logging, config.LOG_LEVEL)
    # Transition chatter is debug-level; keep it out of production logs.
    if config.is_production:
        level = max(level, logging.INFO)
    package_logger.setLevel(level)

    formatter: logging.Formatter = JsonFormatter() if config.LOG_FORMAT == "json" else logging.Formatter(TEXT_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.LOG_FILE:
        handlers.append(logging.FileHandler(config.LOG_FILE))
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.propagate = False
    return package_logger
