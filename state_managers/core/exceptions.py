"""Custom exceptions for the state managers package."""

from __future__ import annotations

from typing import Any


class StateManagerException(Exception):
    """Base exception for state managers."""

    pass


class ConfigurationError(StateManagerException):
    """Raised when manager options or runtime configuration are invalid."""

    pass


class NotFoundError(StateManagerException):
    """Raised when a named state, item or event is not registered."""

    pass


class UnknownStateError(NotFoundError):
    """Raised when a state name is not registered on a manager."""

    pass


class UnknownItemError(NotFoundError):
    """Raised when an item is not part of a collection."""

    pass


class UnknownEventError(NotFoundError):
    """Raised when an event name is not known to an emitter."""

    pass


class InvalidTransitionError(StateManagerException, ValueError):
    """Raised by the default suspense handler when a transition is not allowed."""

    def __init__(self, message: str, event: Any = None) -> None:
        super().__init__(message)
        self.event = event


class UnmatchedCombinationError(InvalidTransitionError):
    """Raised when a combination does not match any collection state."""

    pass


class ReentrantTransitionError(StateManagerException):
    """Raised when observers keep requesting transitions past the configured bound."""

    pass
