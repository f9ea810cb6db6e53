"""Option schemas for the data state manager."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from state_managers.schemas.common import BaseManagerOptions, BaseStateOption


class DataStateOption(BaseStateOption):
    matches: Callable[[Any], bool]


class DataStateManagerOptions(BaseManagerOptions):
    name: str = "DataStateManager"
    initial_data: Any
    states: list[DataStateOption] | None = None
    contexts: dict[str, list[DataStateOption]] | None = None
    on_update: Callable[[Any], Any] | None = None
