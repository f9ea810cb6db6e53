"""
state_managers
~~~~~~~~~~~~~~

Synchronous finite state machines with observers, transition guards and
suspense handling, plus two derived managers:

    from state_managers import StateManager, DataStateManager, CollectionStateManager
"""

from state_managers.core.config import Config, get_config
from state_managers.core.enums import TransitionOutcome
from state_managers.core.exceptions import (
    ConfigurationError,
    InvalidTransitionError,
    NotFoundError,
    ReentrantTransitionError,
    StateManagerException,
    UnknownEventError,
    UnknownItemError,
    UnknownStateError,
    UnmatchedCombinationError,
)
from state_managers.core.logging_config import configure_logging
from state_managers.events import (
    NO_DETAIL,
    CollectionStateEvent,
    DataStateEvent,
    EventEmitter,
    ObserverHandle,
    StateEvent,
)
from state_managers.managers import CollectionStateManager, DataStateManager, DataTest, StateManager

__all__ = [
    "NO_DETAIL",
    "CollectionStateEvent",
    "CollectionStateManager",
    "Config",
    "ConfigurationError",
    "DataStateEvent",
    "DataStateManager",
    "DataTest",
    "EventEmitter",
    "InvalidTransitionError",
    "NotFoundError",
    "ObserverHandle",
    "ReentrantTransitionError",
    "StateEvent",
    "StateManager",
    "StateManagerException",
    "TransitionOutcome",
    "UnknownEventError",
    "UnknownItemError",
    "UnknownStateError",
    "UnmatchedCombinationError",
    "configure_logging",
    "get_config",
]
