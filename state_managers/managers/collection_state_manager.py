"""State manager whose state is derived from a combination of items."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from state_managers.core.enums import TransitionOutcome
from state_managers.core.exceptions import (
    ConfigurationError,
    InvalidTransitionError,
    UnknownItemError,
    UnknownStateError,
    UnmatchedCombinationError,
)
from state_managers.core.logging import LogContext, build_log_event
from state_managers.events.emitter import ObserverHandle
from state_managers.events.state_events import NO_DETAIL, CollectionStateEvent, StateEvent
from state_managers.managers.matches import matches_combination
from state_managers.managers.state_manager import StateManager
from state_managers.managers.transitions import translate_transitions
from state_managers.schemas.collection_states import CollectionStateManagerOptions, CollectionStateOption
from state_managers.schemas.common import parse_options
from state_managers.utils.combinations import (
    create_collection,
    create_combinations,
    replace_first,
    shift,
    unshift,
)

logger = logging.getLogger(__name__)

CollectionStateObserver = Callable[[CollectionStateEvent], Any]


def default_collection_suspense_handler(event: CollectionStateEvent) -> Any:
    subject = event.subject
    combination = ", ".join(event.combination)
    if subject.in_suspense:
        raise UnmatchedCombinationError(
            f"Failed to set combination on {subject.name}. Combination [{combination}] does not match any state.",
            event=event,
        )
    raise InvalidTransitionError(
        f"Failed to transition {subject.name}. Transition from {subject.current} to {event.name} "
        f"is not allowed for combination [{combination}].",
        event=event,
    )


class CollectionStateManager:
    """
    Wraps a StateManager and picks its state from the selected items.

    Every state declares a combination of item names; the items of all
    combinations form the collection. A candidate combination selects the
    first declared state whose combination it matches: position by position
    when ``ordered``, as a set of equal length otherwise. A candidate that
    matches nothing puts the manager in suspense.
    """

    def __init__(self, **options: Any) -> None:
        parsed = parse_options(CollectionStateManagerOptions, options, default_name="CollectionStateManager")
        states: list[CollectionStateOption] = parsed.resolve_states()

        self.ordered: bool = parsed.ordered
        self.size: int | None = parsed.size
        self.fixed_size: bool = parsed.size is not None
        self.in_suspense = False
        self.on_suspense: Callable[[CollectionStateEvent], Any] = (
            parsed.on_suspense or default_collection_suspense_handler
        )
        self.combinations: dict[str, list[str]] = create_combinations(states)
        self.collection: frozenset[str] = create_collection(self.combinations)
        self._observers: dict[ObserverHandle, CollectionStateObserver] = {}

        initial_state = self._resolve_initial_state(parsed)
        self.current_combination: list[str] = list(
            parsed.initial_combination
            if parsed.initial_combination is not None
            else self.combinations[initial_state]
        )

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
        return (
            f"CollectionStateManager(name={self.name!r}, current={self.current!r}, "
            f"combination={self.current_combination!r})"
        )

    @property
    def name(self) -> str:
        return self.state_manager.name

    @property
    def current(self) -> str:
        return self.state_manager.current

    @current.setter
    def current(self, state: str) -> None:
        if state not in self.combinations:
            raise UnknownStateError(f"Failed to set state. State {state} is not registered on {self.name}.")
        combination = list(self.combinations[state])
        self.in_suspense = False
        self.state_manager.transition(
            state, on_commit=lambda: self._commit_combination(combination), detail=combination
        )

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

    def _resolve_initial_state(self, parsed: CollectionStateManagerOptions) -> str:
        if parsed.initial_combination is None:
            return parsed.initial_state
        matched = self.find_state(parsed.initial_combination)
        if matched is None:
            raise ConfigurationError(
                f"Failed to create {parsed.name}. "
                f"Initial combination [{', '.join(parsed.initial_combination)}] does not match any state."
            )
        if parsed.initial_state is not None and parsed.initial_state != matched:
            raise ConfigurationError(
                f"Failed to create {parsed.name}. "
                f"Initial combination matches {matched}, not initial state {parsed.initial_state}."
            )
        return matched

    def create_event_observer(self, observer: CollectionStateObserver) -> Callable[[StateEvent], Any]:
        def state_observer(event: StateEvent) -> Any:
            return observer(CollectionStateEvent(event.name, self, list(self.current_combination)))

        return state_observer

    def create_state_manager_states(self, states: list[CollectionStateOption]) -> list[dict[str, Any]]:
        return [
            {
                "name": state.name,
                "transitions": translate_transitions(state.transitions, self.create_event_observer),
            }
            for state in states
        ]

    def add_observer(self, state: str, observer: CollectionStateObserver) -> ObserverHandle:
        handle = self.state_manager.add_observer(state, self.create_event_observer(observer))
        self._observers[handle] = observer
        return handle

    def remove_observer(self, handle: ObserverHandle) -> bool:
        removed = self.state_manager.remove_observer(handle)
        self._observers.pop(handle, None)
        return removed

    def observers(self, state: str) -> list[CollectionStateObserver]:
        if state not in self.combinations:
            raise UnknownStateError(f"State {state} is not registered on {self.name}.")
        return [observer for handle, observer in self._observers.items() if handle.event == state]

    def matches_combination(self, combination: Sequence[str], target: Sequence[str]) -> bool:
        return matches_combination(combination, target, ordered=self.ordered)

    def find_state(self, combination: Sequence[str]) -> str | None:
        """First declared state whose combination matches ``combination``."""
        for state, state_combination in self.combinations.items():
            if self.matches_combination(combination, state_combination):
                return state
        return None

    def set_combination(self, combination: Sequence[str]) -> TransitionOutcome:
        candidate = list(combination)
        state = self.find_state(candidate)

        if state is None:
            self.in_suspense = True
            event = CollectionStateEvent(self.current, self, candidate)
            logger.info(
                "collection_state.combination.unmatched",
                extra={
                    "event": build_log_event(
                        "collection_state.combination.unmatched",
                        LogContext(manager=self.name, context=self.context, state=self.current),
                        suspense=event.to_log_payload(),
                    )
                },
            )
            self.on_suspense(event)
            return TransitionOutcome.SUSPENDED

        self.in_suspense = False
        return self.state_manager.transition(
            state, on_commit=lambda: self._commit_combination(candidate), detail=candidate
        )

    def _commit_combination(self, combination: list[str]) -> None:
        self.current_combination = combination

    def _relay_suspense(self, event: StateEvent) -> Any:
        combination = event.detail if event.detail is not NO_DETAIL else self.current_combination
        return self.on_suspense(CollectionStateEvent(event.name, self, list(combination)))

    def _check_item(self, item: str, action: str) -> None:
        if item not in self.collection:
            raise UnknownItemError(f"Failed to {action} on {self.name}. Item {item} is not in the collection.")

    def append_item(self, item: str) -> TransitionOutcome:
        self._check_item(item, "append item")
        return self.set_combination([*self.current_combination, item])

    def prepend_item(self, item: str) -> TransitionOutcome:
        self._check_item(item, "prepend item")
        return self.set_combination([item, *self.current_combination])

    def remove_item(self, item: str) -> TransitionOutcome:
        self._check_item(item, "remove item")
        return self.set_combination([current for current in self.current_combination if current != item])

    def replace_item(self, old_item: str, new_item: str) -> TransitionOutcome:
        self._check_item(old_item, "replace item")
        self._check_item(new_item, "replace item")
        items = replace_first(self.current_combination, old_item, new_item)
        if items is None:
            return TransitionOutcome.UNCHANGED
        return self.set_combination(items)

    def pop_item(self) -> TransitionOutcome:
        return self.set_combination(self.current_combination[:-1])

    def shift_items(self, item: str | None = None) -> TransitionOutcome:
        """Drop the last item, optionally adding ``item`` in front."""
        if item is not None:
            self._check_item(item, "shift items")
        return self.set_combination(shift(self.current_combination, item))

    def unshift_items(self, item: str | None = None) -> TransitionOutcome:
        """Drop the first item, optionally adding ``item`` at the end."""
        if item is not None:
            self._check_item(item, "unshift items")
        return self.set_combination(unshift(self.current_combination, item))
