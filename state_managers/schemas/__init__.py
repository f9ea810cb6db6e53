"""Pydantic schema package for manager options."""

from state_managers.schemas.collection_states import CollectionStateManagerOptions, CollectionStateOption
from state_managers.schemas.common import GuardBlock, StateTransitions, parse_options
from state_managers.schemas.data_states import DataStateManagerOptions, DataStateOption
from state_managers.schemas.states import StateManagerOptions, StateOption

__all__ = [
    "CollectionStateManagerOptions",
    "CollectionStateOption",
    "DataStateManagerOptions",
    "DataStateOption",
    "GuardBlock",
    "StateManagerOptions",
    "StateOption",
    "StateTransitions",
    "parse_options",
]
