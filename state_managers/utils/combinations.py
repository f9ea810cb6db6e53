"""Helpers that build and edit item combinations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from state_managers.schemas.collection_states import CollectionStateOption


def create_combinations(states: Iterable[CollectionStateOption]) -> dict[str, list[str]]:
    return {state.name: list(state.combination) for state in states}


def create_collection(combinations: Mapping[str, Sequence[str]]) -> frozenset[str]:
    """Every item that appears in at least one combination."""
    return frozenset(item for combination in combinations.values() for item in combination)


def replace_first(items: Sequence[str], old_item: str, new_item: str) -> list[str] | None:
    """Replace the first ``old_item``; ``None`` when it is not present."""
    if old_item not in items:
        return None
    replaced = list(items)
    replaced[replaced.index(old_item)] = new_item
    return replaced


def shift(items: Sequence[str], item: str | None = None) -> list[str]:
    """Drop the trailing item and optionally put ``item`` in front."""
    partial = list(items[:-1])
    return [item, *partial] if item is not None else partial


def unshift(items: Sequence[str], item: str | None = None) -> list[str]:
    """Drop the leading item and optionally put ``item`` at the end."""
    partial = list(items[1:])
    return [*partial, item] if item is not None else partial
