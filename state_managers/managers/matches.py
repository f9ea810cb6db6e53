"""Combination matching rules for collection states."""

from __future__ import annotations

from collections.abc import Sequence


def matches_combination_with_order(combination: Sequence[str], target: Sequence[str]) -> bool:
    return all(item == target_item for item, target_item in zip(combination, target))


def matches_combination_without_order(combination: Sequence[str], target: Sequence[str]) -> bool:
    # Membership only: duplicates in the candidate are not counted.
    return all(item in target for item in combination)


def matches_combination(combination: Sequence[str], target: Sequence[str], ordered: bool = False) -> bool:
    """Length must match first; the two helpers above compare items only."""
    if len(combination) != len(target):
        return False
    if ordered:
        return matches_combination_with_order(combination, target)
    return matches_combination_without_order(combination, target)
