from __future__ import annotations

import pytest

from state_managers.core.config import get_config


@pytest.fixture(autouse=True)
def fresh_config():
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def color_states():
    return [{"name": "red"}, {"name": "blue"}]


@pytest.fixture
def volume_states():
    return [
        {"name": "low", "matches": lambda value: value < 80},
        {"name": "high", "matches": lambda value: value >= 80},
    ]


@pytest.fixture
def text_format_states():
    return [
        {"name": "normal", "combination": ["normal"]},
        {"name": "bold", "combination": ["bold"]},
        {"name": "italic", "combination": ["italic"]},
        {"name": "bold-italic", "combination": ["bold", "italic"]},
    ]


@pytest.fixture
def recorder():
    """Callable that records the events it receives."""

    class _Recorder:
        def __init__(self) -> None:
            self.events: list = []

        def __call__(self, event) -> None:
            self.events.append(event)

        @property
        def names(self) -> list[str]:
            return [event.name for event in self.events]

    return _Recorder()
