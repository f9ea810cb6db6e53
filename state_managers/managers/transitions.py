"""Canonical helpers shared by the state managers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from state_managers.core.exceptions import InvalidTransitionError
from state_managers.events.state_events import StateEvent
from state_managers.schemas.common import BaseStateOption, StateTransitions


def get_event_names(states: Iterable[BaseStateOption]) -> list[str]:
    return [state.name for state in states]


def create_state_transitions(states: Iterable[BaseStateOption]) -> dict[str, StateTransitions]:
    """Map each guarded state to its transitions block; unguarded states are left out."""
    return {state.name: state.transitions for state in states if state.transitions is not None}


def transition_allowed(transitions: StateTransitions | None, target: str) -> bool:
    if transitions is None:
        return True
    return transitions.to is not None and target in transitions.to.states


def default_suspense_handler(event: StateEvent) -> Any:
    """Reject the transition described by ``event``."""
    subject = getattr(event.subject, "name", "StateManager")
    raise InvalidTransitionError(
        f"Failed to transition {subject}. Transition from {event.previous} to {event.name} is not allowed.",
        event=event,
    )


def translate_transitions(
    transitions: StateTransitions | None, translate: Callable[[Callable[..., Any]], Callable[..., Any]]
) -> dict[str, Any] | None:
    """Copy a transitions block, passing each guard observer through ``translate``."""
    if transitions is None:
        return None
    translated: dict[str, Any] = {}
    for key, block in (("from", transitions.from_), ("to", transitions.to)):
        if block is not None:
            translated[key] = {
                "states": list(block.states),
                "observers": [translate(observer) for observer in block.observers],
            }
    return translated
