"""Option schemas for the collection state manager."""

from __future__ import annotations

from pydantic import Field, model_validator

from state_managers.schemas.common import BaseManagerOptions, BaseStateOption


class CollectionStateOption(BaseStateOption):
    combination: list[str]


class CollectionStateManagerOptions(BaseManagerOptions):
    name: str = "CollectionStateManager"
    states: list[CollectionStateOption] | None = None
    contexts: dict[str, list[CollectionStateOption]] | None = None
    ordered: bool = False
    size: int | None = Field(default=None, ge=1)
    initial_combination: list[str] | None = None

    @model_validator(mode="after")
    def check_combinations(self) -> "CollectionStateManagerOptions":
        if self.initial_state is None and self.initial_combination is None:
            raise ValueError("Options must have initial_state or initial_combination.")
        if self.size is not None:
            for state in self.resolve_states():
                if len(state.combination) != self.size:
                    raise ValueError(
                        f"Combination of state {state.name} must have {self.size} items, "
                        f"got {len(state.combination)}."
                    )
        return self
