"""Enums for the state managers package."""

from enum import Enum


class TransitionOutcome(Enum):
    """
    Result of a mutating operation on a manager.

    COMMITTED and SUSPENDED describe a transition that ran. QUEUED means the
    request arrived while the manager was already transitioning and will run
    once the current dispatch completes. UNCHANGED means no transition was
    attempted at all.
    """

    COMMITTED = "committed"
    SUSPENDED = "suspended"
    QUEUED = "queued"
    UNCHANGED = "unchanged"
