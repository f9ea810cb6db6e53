"""State manager whose state is derived from a data value."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from state_managers.core.enums import TransitionOutcome
from state_managers.core.exceptions import ConfigurationError, InvalidTransitionError, UnknownStateError
from state_managers.core.logging import LogContext, build_log_event
from state_managers.events.emitter import ObserverHandle
from state_managers.events.state_events import NO_DETAIL, DataStateEvent, StateEvent
from state_managers.managers.state_manager import StateManager
from state_managers.managers.transitions import translate_transitions
from state_managers.schemas.common import parse_options
from state_managers.schemas.data_states import DataStateManagerOptions, DataStateOption

logger = logging.getLogger(__name__)

DataStateObserver = Callable[[DataStateEvent], Any]


@dataclass(frozen=True)
class DataTest:
    """Predicate deciding whether data belongs to ``state``."""

    state: str
    matches: Callable[[Any], bool]


def default_data_suspense_handler(event: DataStateEvent) -> Any:
    subject = event.subject
    raise InvalidTransitionError(
        f"Failed to transition {subject.name}. "
        f"Transition from {subject.current} to {event.name} is not allowed for data {event.data!r}.",
        event=event,
    )


class DataStateManager:
    """
    Wraps a StateManager and picks its state from the data it is given.

    States are tested in declaration order and the first state whose
    ``matches`` predicate accepts the data wins. Data that no state accepts
    leaves the current state as it is.
    """

    def __init__(self, **options: Any) -> None:
        parsed = parse_options(DataStateManagerOptions, options, default_name="DataStateManager")
        states: list[DataStateOption] = parsed.resolve_states()

        self.current_data: Any = parsed.initial_data
        self.on_update: Callable[[Any], Any] | None = parsed.on_update
        self.on_suspense: Callable[[DataStateEvent], Any] = parsed.on_suspense or default_data_suspense_handler
        self.tests: list[DataTest] = [DataTest(state=state.name, matches=state.matches) for state in states]
        self._observers: dict[ObserverHandle, DataStateObserver] = {}

        initial_state = parsed.initial_state or self._resolve_initial_state(parsed.name)
        state_manager_options: dict[str, Any] = {
            "name": parsed.name,
            "initial_state": initial_state,
            "save_history": parsed.save_history,
            "on_suspense": self._relay_suspense,
            "max_chained_transitions": parsed.max_chained_transitions,
        }
        state_manager_states = self.create_state_manager_states(states)
        if parsed.contexts is not None:
            state_manager_options["contexts"] = {parsed.context: state_manager_states}
            state_manager_options["context"] = parsed.context
        else:
            state_manager_options["states"] = state_manager_states

        self.state_manager = StateManager(**state_manager_options)

        for state in states:
            for observer in state.observers:
                self.add_observer(state.name, observer)

    def __repr__(self) -> str:
        return f"DataStateManager(name={self.name!r}, current={self.current!r}, data={self.current_data!r})"

    @property
    def name(self) -> str:
        return self.state_manager.name

    @property
    def current(self) -> str:
        return self.state_manager.current

    @current.setter
    def current(self, state: str) -> None:
        self.state_manager.current = state

    @property
    def previous(self) -> str | None:
        return self.state_manager.previous

    @property
    def history(self) -> list[str]:
        return self.state_manager.history

    @property
    def context(self) -> str | None:
        return self.state_manager.context

    @property
    def events(self) -> list[str]:
        return self.state_manager.events

    def _resolve_initial_state(self, name: str) -> str:
        for test in self.tests:
            if test.matches(self.current_data):
                return test.state
        raise ConfigurationError(
            f"Failed to create {name}. Initial data {self.current_data!r} does not match any state."
        )

    def create_event_observer(self, observer: DataStateObserver) -> Callable[[StateEvent], Any]:
        def state_observer(event: StateEvent) -> Any:
            return observer(DataStateEvent(event.name, self, self.current_data))

        return state_observer

    def create_state_manager_states(self, states: list[DataStateOption]) -> list[dict[str, Any]]:
        """Strip predicates and translate guard observers to data events."""
        return [
            {
                "name": state.name,
                "transitions": translate_transitions(state.transitions, self.create_event_observer),
            }
            for state in states
        ]

    def add_observer(self, state: str, observer: DataStateObserver) -> ObserverHandle:
        handle = self.state_manager.add_observer(state, self.create_event_observer(observer))
        self._observers[handle] = observer
        return handle

    def remove_observer(self, handle: ObserverHandle) -> bool:
        removed = self.state_manager.remove_observer(handle)
        self._observers.pop(handle, None)
        return removed

    def observers(self, state: str) -> list[DataStateObserver]:
        if not self.state_manager.event_is_registered(state):
            raise UnknownStateError(f"State {state} is not registered on {self.name}.")
        return [observer for handle, observer in self._observers.items() if handle.event == state]

    def update(self, data: Any) -> TransitionOutcome:
        """Store ``data`` and move to the first state that matches it."""
        if data == self.current_data:
            return TransitionOutcome.UNCHANGED

        self.current_data = data
        if self.on_update is not None:
            self.on_update(data)

        for test in self.tests:
            if test.matches(data):
                # Compare with queued targets too, not only the committed state.
                if test.state == self.state_manager.settled_state:
                    return TransitionOutcome.UNCHANGED
                return self.state_manager.transition(test.state, detail=data)

        logger.debug(
            "data_state.update.unmatched",
            extra={
                "event": build_log_event(
                    "data_state.update.unmatched",
                    LogContext(manager=self.name, context=self.context, state=self.current),
                    candidate=DataStateEvent(self.current, self, data).to_log_payload(),
                )
            },
        )
        return TransitionOutcome.UNCHANGED

    def _relay_suspense(self, event: StateEvent) -> Any:
        data = event.detail if event.detail is not NO_DETAIL else self.current_data
        return self.on_suspense(DataStateEvent(event.name, self, data))
