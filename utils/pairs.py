"""Helpers for unordered pairs."""
from __future__ import annotations

from typing import Hashable, Iterable, TypeVar

T = TypeVar("T", bound=Hashable)


def reduce_reverse_pairs(pairs: Iterable[tuple[T, T]]) -> set[tuple[T, T]]:
    """Keep one orientation of every pair.

    The first orientation seen wins, so callers that need a stable choice
    should pass the pairs in a stable order.
    """

    collected: set[tuple[T, T]] = set()
    for left, right in pairs:
        if (right, left) in collected:
            continue
        collected.add((left, right))
    return collected


def is_identity_outcome(outcome: tuple[T, T], left: T, right: T) -> bool:
    """True when ``outcome`` is the unchanged ``(left, right)`` pair, either way round."""

    return outcome == (left, right) or outcome == (right, left)
