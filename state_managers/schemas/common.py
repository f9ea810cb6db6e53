"""Shared pydantic building blocks for manager options."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from state_managers.core.exceptions import ConfigurationError

OptionsT = TypeVar("OptionsT", bound=BaseModel)


class GuardBlock(BaseModel):
    """Allow-list of states plus observers for one transition direction."""

    model_config = ConfigDict(extra="forbid")

    states: list[str] = Field(default_factory=list)
    observers: list[Callable[..., Any]] = Field(default_factory=list)


class StateTransitions(BaseModel):
    """Directional guard for one state.

    ``to`` lists the states this state may leave for; its observers run before
    the transition commits. ``from`` lists origins whose arrival runs the
    ``from`` observers after the commit.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    from_: GuardBlock | None = Field(default=None, alias="from")
    to: GuardBlock | None = None


class BaseStateOption(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    observers: list[Callable[..., Any]] = Field(default_factory=list)
    transitions: StateTransitions | None = None


class BaseManagerOptions(BaseModel):
    """Options shared by every manager.

    Exactly one state source is accepted: a ``states`` list, or a ``contexts``
    mapping together with the ``context`` key that selects one of its lists.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = "StateManager"
    initial_state: str | None = None
    states: list[BaseStateOption] | None = None
    contexts: dict[str, list[BaseStateOption]] | None = None
    context: str | None = None
    save_history: bool = False
    on_suspense: Callable[..., Any] | None = None
    max_chained_transitions: int | None = Field(default=None, ge=1)

    def resolve_states(self) -> list[Any]:
        if self.states is not None:
            return list(self.states)
        if self.contexts is not None and self.context in self.contexts:
            return list(self.contexts[self.context])
        return []

    @property
    def state_names(self) -> list[str]:
        return [state.name for state in self.resolve_states()]

    @model_validator(mode="after")
    def check_state_source(self) -> "BaseManagerOptions":
        if self.states is not None and self.contexts is not None:
            raise ValueError("Options must have either states or contexts, not both.")
        if self.states is None:
            if self.contexts is None:
                raise ValueError("Options must have option states or contexts.")
            if self.context is None:
                raise ValueError("You can't provide contexts without specifying context.")
            if self.context not in self.contexts:
                raise ValueError(f"Context {self.context} is not listed in contexts.")

        names = self.state_names
        if not names:
            raise ValueError("At least one state must be declared.")
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"State names must be unique, duplicated: {', '.join(duplicates)}.")
        if self.initial_state is not None and self.initial_state not in names:
            raise ValueError(f"Initial state {self.initial_state} is not registered.")

        for state in self.resolve_states():
            if state.transitions is None:
                continue
            for block in (state.transitions.from_, state.transitions.to):
                if block is None:
                    continue
                unknown = [name for name in block.states if name not in names]
                if unknown:
                    raise ValueError(
                        f"Transitions of state {state.name} reference unknown states: {', '.join(unknown)}."
                    )
        return self


def parse_options(model_cls: type[OptionsT], options: dict[str, Any], default_name: str) -> OptionsT:
    """Validate manager options against a pydantic model."""
    payload = {"name": default_name, **options}
    try:
        return model_cls.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Failed to create {payload['name']}. {exc}") from exc
