"""Synchronous named-event emitter used by the state managers."""

from __future__ import annotations

import asyncio
import inspect
import itertools
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from state_managers.core.exceptions import UnknownEventError

logger = logging.getLogger(__name__)

Observer = Callable[[Any], Any]

_handle_ids = itertools.count(1)
_background_tasks: set[asyncio.Task] = set()


@dataclass(frozen=True)
class Event:
    """Plain event passed to emitter observers."""

    name: str
    subject: Any


@dataclass(frozen=True)
class ObserverHandle:
    """Opaque token identifying one observer registration."""

    event: str
    id: int


def _schedule(awaitable: Awaitable[Any], observer: Observer) -> None:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.warning(
            "events.observer.async_without_loop",
            extra={"event": "events.observer.async_without_loop", "observer": repr(observer)},
        )
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        return

    task = asyncio.ensure_future(awaitable, loop=loop)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


def dispatch(observer: Observer, event: Any) -> None:
    """Invoke an observer; awaitable results are scheduled, never awaited."""
    result = observer(event)
    if inspect.isawaitable(result):
        _schedule(result, observer)


def dispatch_all(observers: Iterable[Observer], event: Any) -> int:
    count = 0
    for observer in list(observers):
        dispatch(observer, event)
        count += 1
    return count


class EventEmitter:
    """Associates a fixed set of event names with ordered observer lists."""

    def __init__(self, subject: Any, events: Iterable[str]) -> None:
        self.subject = subject
        self._observers: dict[str, dict[int, Observer]] = {name: {} for name in events}

    @property
    def events(self) -> list[str]:
        return list(self._observers)

    def event_is_registered(self, event: str) -> bool:
        return event in self._observers

    def _registrations(self, event: str) -> dict[int, Observer]:
        try:
            return self._observers[event]
        except KeyError as exc:
            raise UnknownEventError(f"Event {event} is not registered.") from exc

    def add_observer(self, event: str, observer: Observer) -> ObserverHandle:
        registrations = self._registrations(event)
        handle = ObserverHandle(event=event, id=next(_handle_ids))
        registrations[handle.id] = observer
        return handle

    def remove_observer(self, handle: ObserverHandle) -> bool:
        registrations = self._registrations(handle.event)
        return registrations.pop(handle.id, None) is not None

    def observers(self, event: str) -> list[Observer]:
        return list(self._registrations(event).values())

    def emit(self, event: str) -> int:
        """Notify every observer registered for ``event`` in registration order."""
        observers = self.observers(event)
        return dispatch_all(observers, Event(event, self.subject))
