"""Reaction search and selection.

A reaction pools the elements of two compounds of weight ``W`` and deals
them back out into two new compounds, each again weighing exactly ``W``.
The search enumerates every such redistribution, the selector draws one
uniformly.
"""
from __future__ import annotations

import logging
import random

from utils.pairs import reduce_reverse_pairs

from .compound import Compound
from .element_counts import ElementCounts

LOGGER = logging.getLogger(__name__)

Outcome = tuple[ElementCounts, ElementCounts]

_EMPTY = ElementCounts()


def search_partitions(total: ElementCounts, target_weight: int) -> set[Outcome]:
    """Every split of ``total`` into two halves weighing ``target_weight`` each.

    Returns an empty set when no exact split exists.
    """

    def recurse(remaining: ElementCounts, left: ElementCounts, right: ElementCounts) -> set[Outcome]:
        # Weight only grows as units are placed, so an overweight side is final.
        if left.weight > target_weight or right.weight > target_weight:
            return set()
        element = remaining.first_present()
        if element is None:
            if left.weight == target_weight and right.weight == target_weight:
                return {(left, right)}
            return set()
        rest = remaining.remove_unit(element)
        outcomes = recurse(rest, left.add_unit(element), right)
        outcomes |= recurse(rest, left, right.add_unit(element))
        return outcomes

    outcomes = recurse(total.clean(), _EMPTY, _EMPTY)
    LOGGER.debug(
        "Found %d partitions of %d units (weight %d) into halves of %d",
        len(outcomes),
        total.units,
        total.weight,
        target_weight,
    )
    return outcomes


def _check_same_weight(left: Compound, right: Compound) -> None:
    if left.target_weight != right.target_weight:
        raise ValueError(
            f"Cannot react compounds of different weights: {left.target_weight} and {right.target_weight}"
        )


def reaction_search(left: Compound, right: Compound) -> set[Outcome]:
    """All redistributions of the combined elements of ``left`` and ``right``.

    Includes the identity pair and its mirror.
    """

    _check_same_weight(left, right)
    return search_partitions(left.counts + right.counts, left.target_weight)


def _outcome_key(outcome: Outcome) -> tuple[list[tuple[int, int]], list[tuple[int, int]]]:
    left, right = outcome
    return (
        [(element.weight, count) for element, count in left.sorted_items()],
        [(element.weight, count) for element, count in right.sorted_items()],
    )


def react(left: Compound, right: Compound, rng: random.Random | None = None) -> None:
    """React two compounds in place.

    One outcome is drawn uniformly from :func:`reaction_search`, which may be
    the unchanged pair. ``rng`` defaults to the module-level generator.
    """

    outcomes = reaction_search(left, right)
    if not outcomes:
        raise RuntimeError(
            f"No reaction outcome for {left!r} and {right!r}; "
            "there should be at least the current state and its mirror"
        )
    ordered = sorted(outcomes, key=_outcome_key)
    chooser = rng if rng is not None else random
    left_counts, right_counts = chooser.choice(ordered)
    LOGGER.debug("Reacting %s + %s, drawn from %d outcomes", left, right, len(ordered))
    left.replace_counts(left_counts)
    right.replace_counts(right_counts)


def set_of_possible_reactions(left: Compound, right: Compound) -> set[tuple[Compound, Compound]]:
    """Every outcome of reacting ``left`` with ``right`` as compound pairs.

    Mirror pairs are reduced to one orientation: the one whose display
    strings sort first. The identity outcome is still included.
    """

    weight = left.target_weight
    pairs = [
        (Compound(left_counts, target_weight=weight), Compound(right_counts, target_weight=weight))
        for left_counts, right_counts in reaction_search(left, right)
    ]
    pairs.sort(key=lambda pair: (str(pair[0]), str(pair[1])))
    return reduce_reverse_pairs(pairs)
