from state_managers.events.emitter import Event, EventEmitter, ObserverHandle, dispatch, dispatch_all
from state_managers.events.state_events import NO_DETAIL, CollectionStateEvent, DataStateEvent, StateEvent

__all__ = [
    "NO_DETAIL",
    "CollectionStateEvent",
    "DataStateEvent",
    "Event",
    "EventEmitter",
    "ObserverHandle",
    "StateEvent",
    "dispatch",
    "dispatch_all",
]
