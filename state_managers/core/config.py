"""Configuration module for the state managers package."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import find_dotenv, load_dotenv

from state_managers.core.exceptions import ConfigurationError

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
LOG_FORMATS = {"json", "text"}


def _as_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from exc


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    ENV: str
    LOG_LEVEL: str
    LOG_FILE: str
    LOG_FORMAT: str
    MAX_CHAINED_TRANSITIONS: int

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    load_dotenv(find_dotenv(usecwd=True))
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()

    config = Config(
        ENV=resolved_env,
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        LOG_FILE=os.getenv("LOG_FILE", "").strip(),
        LOG_FORMAT=os.getenv("LOG_FORMAT", "json").strip().lower(),
        MAX_CHAINED_TRANSITIONS=_as_int("MAX_CHAINED_TRANSITIONS", "100"),
    )
    _validate_config(config)
    return config


def _validate_config(config: Config) -> None:
    if config.MAX_CHAINED_TRANSITIONS < 1:
        raise ConfigurationError("MAX_CHAINED_TRANSITIONS must be >= 1.")


def validate_logging_config(config: Config) -> None:
    """Check the settings read by ``configure_logging``."""
    if config.LOG_LEVEL not in LOG_LEVELS:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.LOG_FORMAT not in LOG_FORMATS:
        raise ConfigurationError("LOG_FORMAT must be either json or text.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
