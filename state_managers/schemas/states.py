"""Option schemas for the plain state manager."""

from __future__ import annotations

from pydantic import Field

from state_managers.schemas.common import BaseManagerOptions, BaseStateOption


class StateOption(BaseStateOption):
    pass


class StateManagerOptions(BaseManagerOptions):
    initial_state: str = Field(min_length=1)
    states: list[StateOption] | None = None
    contexts: dict[str, list[StateOption]] | None = None
