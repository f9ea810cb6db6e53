"""Event records handed to state manager observers and suspense handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class _NoDetail:
    def __repr__(self) -> str:
        return "NO_DETAIL"


# Marks a transition request that carried no detail; `None` is a valid detail.
NO_DETAIL: Any = _NoDetail()


@dataclass(frozen=True)
class StateEvent:
    """Event for a plain state manager.

    ``name`` is the state involved: the entered state for state observers,
    the destination for ``to`` observers, the origin for ``from`` observers
    and the rejected target for suspense handlers. ``detail`` is whatever the
    caller attached to the rejected transition request, or ``NO_DETAIL``.
    """

    name: str
    subject: Any
    previous: str | None = None
    detail: Any = NO_DETAIL

    def to_log_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "subject": getattr(self.subject, "name", None),
            "previous": self.previous,
        }


@dataclass(frozen=True)
class DataStateEvent:
    """Event for a data state manager, carrying its current data."""

    name: str
    subject: Any
    data: Any = None

    def to_log_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "subject": getattr(self.subject, "name", None),
            "data": repr(self.data),
        }


@dataclass(frozen=True)
class CollectionStateEvent:
    """Event for a collection state manager, carrying a combination."""

    name: str
    subject: Any
    combination: list[str] = field(default_factory=list)

    def to_log_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "subject": getattr(self.subject, "name", None),
            "combination": list(self.combination),
        }
