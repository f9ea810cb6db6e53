"""Finite state machine with guarded transitions, observers and suspense."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from state_managers.core.config import get_config
from state_managers.core.enums import TransitionOutcome
from state_managers.core.exceptions import ReentrantTransitionError, UnknownEventError, UnknownStateError
from state_managers.core.logging import LogContext, build_log_event
from state_managers.events.emitter import Event, EventEmitter, ObserverHandle, dispatch_all
from state_managers.events.state_events import NO_DETAIL, StateEvent
from state_managers.managers.transitions import (
    create_state_transitions,
    default_suspense_handler,
    get_event_names,
    transition_allowed,
)
from state_managers.schemas.common import parse_options
from state_managers.schemas.states import StateManagerOptions

logger = logging.getLogger(__name__)

StateObserver = Callable[[StateEvent], Any]
CommitHook = Callable[[], None]


class StateManager:
    """
    In-memory state machine over a fixed set of named states.

    A transition runs in this order: the ``to`` guard of the current state is
    checked and its observers run, the new state is committed, the ``from``
    observers of the new state run, and finally every observer registered on
    the new state is notified. A rejected transition goes to the suspense
    handler and leaves the manager untouched.

    Transitions requested while another one is running (typically from inside
    an observer) are queued and run, in order, once the running transition
    has finished notifying its observers.
    """

    def __init__(self, **options: Any) -> None:
        parsed = parse_options(StateManagerOptions, options, default_name="StateManager")
        states = parsed.resolve_states()

        self.name: str = parsed.name
        self.context: str | None = parsed.context if parsed.contexts is not None else None
        self.save_history: bool = parsed.save_history
        self.previous: str | None = None
        self.history: list[str] = []
        self.on_suspense: Callable[[StateEvent], Any] = parsed.on_suspense or default_suspense_handler
        self.transitions = create_state_transitions(states)
        self.event_manager = EventEmitter(self, get_event_names(states))
        self._state_observers: dict[ObserverHandle, StateObserver] = {}
        self._current: str = parsed.initial_state
        self._transitioning = False
        self._pending: deque[tuple[str, CommitHook | None, Any]] = deque()
        self._in_flight: str | None = None
        self._max_chained_transitions: int = (
            parsed.max_chained_transitions or get_config().MAX_CHAINED_TRANSITIONS
        )

        for state in states:
            for observer in state.observers:
                self.add_observer(state.name, observer)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, current={self._current!r})"

    @property
    def current(self) -> str:
        return self._current

    @current.setter
    def current(self, state: str) -> None:
        self.transition(state)

    @property
    def is_transitioning(self) -> bool:
        return self._transitioning

    @property
    def settled_state(self) -> str:
        """State reached once the running and queued transitions commit."""
        if self._pending:
            return self._pending[-1][0]
        if self._in_flight is not None:
            return self._in_flight
        return self._current

    @property
    def events(self) -> list[str]:
        return self.event_manager.events

    def event_is_registered(self, state: str) -> bool:
        return self.event_manager.event_is_registered(state)

    def create_event_observer(self, observer: StateObserver) -> Callable[[Event], Any]:
        """Adapt a state observer to the emitter's plain event."""

        def event_observer(event: Event) -> Any:
            return observer(StateEvent(event.name, self))

        return event_observer

    def add_observer(self, state: str, observer: StateObserver) -> ObserverHandle:
        try:
            handle = self.event_manager.add_observer(state, self.create_event_observer(observer))
        except UnknownEventError as exc:
            raise UnknownStateError(
                f"Failed to add observer on {self.name}. State {state} is not registered."
            ) from exc
        self._state_observers[handle] = observer
        return handle

    def remove_observer(self, handle: ObserverHandle) -> bool:
        try:
            removed = self.event_manager.remove_observer(handle)
        except UnknownEventError as exc:
            raise UnknownStateError(
                f"Failed to remove observer from {self.name}. State {handle.event} is not registered."
            ) from exc
        self._state_observers.pop(handle, None)
        return removed

    def observers(self, state: str) -> list[StateObserver]:
        if not self.event_is_registered(state):
            raise UnknownStateError(f"State {state} is not registered on {self.name}.")
        return [observer for handle, observer in self._state_observers.items() if handle.event == state]

    def transition(
        self, target: str, on_commit: CommitHook | None = None, detail: Any = NO_DETAIL
    ) -> TransitionOutcome:
        """Move to ``target``; see the class docstring for ordering.

        ``on_commit`` runs right after the new state is committed and before
        any post-commit observer, so wrappers can commit their own payload
        together with the state. ``detail`` is handed to the suspense handler
        on the event if the transition is rejected.
        """
        if not self.event_is_registered(target):
            raise UnknownStateError(f"Failed to set state on {self.name}. State {target} is not registered.")

        if self._transitioning:
            self._pending.append((target, on_commit, detail))
            logger.debug(
                "state.transition.queued",
                extra={"event": build_log_event("state.transition.queued", self._log_context(), target=target)},
            )
            return TransitionOutcome.QUEUED

        self._transitioning = True
        try:
            outcome = self._apply(target, on_commit, detail)
            chained = 0
            while self._pending:
                chained += 1
                if chained > self._max_chained_transitions:
                    raise ReentrantTransitionError(
                        f"{self.name} exceeded {self._max_chained_transitions} chained transitions."
                    )
                queued_target, queued_commit, queued_detail = self._pending.popleft()
                self._apply(queued_target, queued_commit, queued_detail)
        finally:
            self._transitioning = False
            self._in_flight = None
            self._pending.clear()
        return outcome

    def _apply(self, target: str, on_commit: CommitHook | None, detail: Any) -> TransitionOutcome:
        origin = self._current
        self._in_flight = target
        guard = self.transitions.get(origin)

        if not transition_allowed(guard, target):
            event = StateEvent(target, self, previous=origin, detail=detail)
            self._in_flight = origin
            logger.info(
                "state.transition.suspended",
                extra={
                    "event": build_log_event(
                        "state.transition.suspended", self._log_context(), suspense=event.to_log_payload()
                    )
                },
            )
            self.on_suspense(event)
            return TransitionOutcome.SUSPENDED

        if guard is not None and guard.to is not None:
            dispatch_all(guard.to.observers, StateEvent(target, self))

        self.previous = origin
        self._current = target
        if self.save_history:
            self.history.append(origin)
        if on_commit is not None:
            on_commit()

        logger.debug(
            "state.transition.committed",
            extra={
                "event": build_log_event(
                    "state.transition.committed", self._log_context(), source=origin, target=target
                )
            },
        )

        new_guard = self.transitions.get(target)
        if new_guard is not None and new_guard.from_ is not None and origin in new_guard.from_.states:
            dispatch_all(new_guard.from_.observers, StateEvent(origin, self))

        self.event_manager.emit(target)
        return TransitionOutcome.COMMITTED

    def _log_context(self) -> LogContext:
        return LogContext(manager=self.name, context=self.context, state=self._current)
