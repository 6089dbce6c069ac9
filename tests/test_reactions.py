import logging
import random
from collections import Counter

import pytest

import alchemy.reactions as reactions
from alchemy import (
    Compound,
    Element,
    ElementCounts,
    react,
    reaction_search,
    search_partitions,
    set_of_possible_reactions,
)

_PAIRS = [("2ae", "a3b"), ("a3b", "2abc"), ("be", "cd"), ("7a", "be"), ("3ad", "2abc"), ("7a", "7a")]


def _counts(text: str) -> ElementCounts:
    return Compound.parse(text).counts


def _pair(left: str, right: str) -> tuple[Compound, Compound]:
    return Compound.parse(left), Compound.parse(right)


def test_list_possible_reactions():
    outcomes = reaction_search(*_pair("2ae", "a3b"))
    assert (_counts("2ae"), _counts("a3b")) in outcomes
    assert (_counts("be"), _counts("3a2b")) in outcomes
    assert (_counts("2ae"), _counts("3a2b")) not in outcomes
    assert (_counts("a2c"), _counts("cd")) not in outcomes


def test_search_finds_every_exact_split():
    outcomes = reaction_search(*_pair("2ae", "a3b"))
    assert outcomes == {
        (_counts("2ae"), _counts("a3b")),
        (_counts("a3b"), _counts("2ae")),
        (_counts("be"), _counts("3a2b")),
        (_counts("3a2b"), _counts("be")),
    }


@pytest.mark.parametrize("left_text, right_text", _PAIRS)
def test_outcomes_include_identity_and_mirror(left_text, right_text):
    left, right = _pair(left_text, right_text)
    outcomes = reaction_search(left, right)
    assert (left.counts, right.counts) in outcomes
    assert (right.counts, left.counts) in outcomes


@pytest.mark.parametrize("left_text, right_text", _PAIRS)
def test_outcomes_conserve_mass(left_text, right_text):
    left, right = _pair(left_text, right_text)
    for new_left, new_right in reaction_search(left, right):
        assert new_left.weight == new_right.weight == 7
        for element in Element:
            assert new_left.count(element) + new_right.count(element) == left.count(element) + right.count(
                element
            )


def test_identical_single_element_compounds_have_one_outcome():
    outcomes = reaction_search(*_pair("7a", "7a"))
    assert outcomes == {(_counts("7a"), _counts("7a"))}


def test_impossible_partitions_give_empty_set():
    # Can't be divided into two
    assert search_partitions(ElementCounts({Element.C: 5, Element.E: 1}), 10) == set()
    # Exceeds desired weight
    assert search_partitions(ElementCounts({Element.A: 4, Element.B: 2}), 2) == set()
    # Under desired weight
    assert search_partitions(ElementCounts({Element.A: 3, Element.B: 2, Element.C: 1}), 11) == set()
    # Odd total
    assert search_partitions(ElementCounts({Element.A: 1}), 1) == set()


def test_search_ignores_zero_entries_in_total():
    total = ElementCounts({Element.B: 1, Element.C: 1, Element.D: 1, Element.E: 1, Element.A: 0})
    assert search_partitions(total, 7) == {
        (_counts("be"), _counts("cd")),
        (_counts("cd"), _counts("be")),
    }


def test_search_logs_partition_count(caplog):
    caplog.set_level(logging.DEBUG, logger="alchemy.reactions")
    reaction_search(*_pair("be", "cd"))
    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Found 2 partitions of 4 units") for message in messages)


def test_set_of_possible_reactions_reduces_mirrors():
    possible = set_of_possible_reactions(*_pair("2ae", "a3b"))
    assert possible == {
        (Compound.parse("2ae"), Compound.parse("a3b")),
        (Compound.parse("3a2b"), Compound.parse("be")),
    }


@pytest.mark.parametrize("left_text, right_text", _PAIRS)
def test_set_of_possible_reactions_is_symmetric(left_text, right_text):
    left, right = _pair(left_text, right_text)
    forward = set_of_possible_reactions(left, right)
    backward = set_of_possible_reactions(right, left)
    assert forward == backward
    for new_left, new_right in forward:
        if new_left != new_right:
            assert (new_right, new_left) not in forward


def test_set_of_possible_reactions_does_not_mutate():
    left, right = _pair("2ae", "a3b")
    set_of_possible_reactions(left, right)
    assert (str(left), str(right)) == ("2ae", "a3b")


def test_compound_reaction_validity():
    compound_a = Compound.from_counts(1, 3, 0, 0, 0)
    compound_b = Compound.from_counts(2, 1, 1, 0, 0)
    compound_c = Compound.from_counts(0, 1, 0, 0, 1)
    compound_d = Compound.from_counts(0, 0, 1, 1, 0)
    rng = random.Random(11)
    compounds = [compound_a, compound_b, compound_c, compound_d]
    total = sum((compound.counts for compound in compounds), ElementCounts())

    for left, right in [(0, 1), (2, 3), (0, 2), (1, 3), (0, 3), (1, 2)]:
        before = (compounds[left].counts, compounds[right].counts)
        possible = reaction_search(compounds[left], compounds[right])
        react(compounds[left], compounds[right], rng)
        assert (compounds[left].counts, compounds[right].counts) in possible
        assert before in possible
        assert all(compound.weight == 7 for compound in compounds)

    assert sum((compound.counts for compound in compounds), ElementCounts()) == total


def test_react_is_reproducible_with_a_seed():
    results = []
    for _ in range(2):
        rng = random.Random(2024)
        left, right = _pair("3ad", "2abc")
        for _ in range(5):
            react(left, right, rng)
        results.append((str(left), str(right)))
    assert results[0] == results[1]


def test_react_draws_outcomes_uniformly():
    rng = random.Random(1234)
    trials = 4000
    observed: Counter[tuple[str, str]] = Counter()
    for _ in range(trials):
        left, right = _pair("2ae", "a3b")
        react(left, right, rng)
        observed[(str(left), str(right))] += 1
    assert set(observed) == {("2ae", "a3b"), ("a3b", "2ae"), ("be", "3a2b"), ("3a2b", "be")}
    for count in observed.values():
        assert count / trials == pytest.approx(0.25, abs=0.05)


def test_mismatched_weights_are_rejected():
    light = Compound.parse("2ae")
    heavy = Compound.parse("2e", target_weight=10)
    with pytest.raises(ValueError):
        reaction_search(light, heavy)
    with pytest.raises(ValueError):
        react(light, heavy)
    with pytest.raises(ValueError):
        set_of_possible_reactions(light, heavy)
    assert str(light) == "2ae"


def test_react_fails_loudly_without_outcomes(monkeypatch):
    monkeypatch.setattr(reactions, "reaction_search", lambda left, right: set())
    left, right = _pair("be", "cd")
    with pytest.raises(RuntimeError):
        react(left, right)
    assert (str(left), str(right)) == ("be", "cd")
