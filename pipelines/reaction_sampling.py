"""Reaction sampling – repeated reactions of one pair against the uniform expectation."""
from __future__ import annotations

import logging
import random
import statistics
import sys
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
import pandas as pd

from alchemy import COMPOUND_WEIGHT, Compound, CompoundError, react, reaction_search

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


@dataclass
class OutcomeShare:
    left: str
    right: str
    count: int
    share: float
    expected_share: float

    def to_dict(self) -> dict[str, Any]:
        return self.__dict__.copy()


def _parse_compound(text: str, weight: int) -> Compound:
    try:
        return Compound.parse(text, target_weight=weight)
    except CompoundError as exc:
        raise click.ClickException(str(exc)) from exc


def _sample_outcomes(left: Compound, right: Compound, trials: int, rng: random.Random) -> Counter[tuple[str, str]]:
    """React fresh copies of the pair ``trials`` times and count the results."""

    observed: Counter[tuple[str, str]] = Counter()
    for _ in range(trials):
        left_copy, right_copy = left.copy(), right.copy()
        react(left_copy, right_copy, rng)
        observed[(str(left_copy), str(right_copy))] += 1
    return observed


def _outcome_shares(left: Compound, right: Compound, observed: Counter[tuple[str, str]]) -> list[OutcomeShare]:
    possible = sorted((str(a), str(b)) for a, b in _possible_pairs(left, right))
    trials = sum(observed.values()) or 1
    expected = 1.0 / len(possible) if possible else 0.0
    return [
        OutcomeShare(
            left=pair[0],
            right=pair[1],
            count=observed.get(pair, 0),
            share=observed.get(pair, 0) / trials,
            expected_share=expected,
        )
        for pair in possible
    ]


def _possible_pairs(left: Compound, right: Compound) -> list[tuple[Compound, Compound]]:
    weight = left.target_weight
    return [
        (Compound(a, target_weight=weight), Compound(b, target_weight=weight))
        for a, b in reaction_search(left, right)
    ]


def _summarize_shares(shares: list[OutcomeShare]) -> float:
    if not shares:
        LOGGER.warning("Pair has no possible outcomes")
        return 0.0
    deviations = [abs(item.share - item.expected_share) for item in shares]
    worst = max(deviations)
    LOGGER.info(
        "Outcomes: %d, expected share %.4f, mean |deviation| %.4f, max |deviation| %.4f",
        len(shares),
        shares[0].expected_share,
        statistics.fmean(deviations),
        worst,
    )
    unseen = [f"{item.left}+{item.right}" for item in shares if item.count == 0]
    if unseen:
        LOGGER.warning("Outcomes never drawn: %s", unseen)
    return worst


def _write_output(shares: list[OutcomeShare], output: Path | None) -> None:
    frame = pd.DataFrame(
        [share.to_dict() for share in shares],
        columns=["left", "right", "count", "share", "expected_share"],
    )
    if output is None:
        frame.to_csv(sys.stdout, index=False)
        return
    suffix = output.suffix.lower()
    output.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        frame.to_csv(output, index=False)
    elif suffix in {".parquet", ".pq"}:
        frame.to_parquet(output, index=False)
    else:
        raise click.ClickException(f"Unsupported output format: {suffix}")


@click.command()
@click.option("--left", "left_text", required=True, help="Left compound, e.g. 2ae.")
@click.option("--right", "right_text", required=True, help="Right compound, e.g. a3b.")
@click.option("--weight", type=int, default=COMPOUND_WEIGHT, show_default=True, help="Compound weight.")
@click.option("--trials", type=click.IntRange(min=1), default=10_000, show_default=True)
@click.option("--seed", type=int, default=None, help="Seed for reproducible draws.")
@click.option("--output", "output_path", default=None, type=click.Path(dir_okay=False))
@click.option("--verbose/--quiet", default=False, show_default=True)
def main(
    left_text: str,
    right_text: str,
    weight: int,
    trials: int,
    seed: int | None,
    output_path: str | None,
    verbose: bool,
) -> None:
    """Sample reactions of one pair and compare outcome shares to uniform."""

    _configure_logging(verbose)
    left = _parse_compound(left_text, weight)
    right = _parse_compound(right_text, weight)
    LOGGER.info("Sampling %d reactions of %s + %s", trials, left, right)

    rng = random.Random(seed)
    observed = _sample_outcomes(left, right, trials, rng)
    shares = _outcome_shares(left, right, observed)
    _summarize_shares(shares)

    output = Path(output_path) if output_path else None
    _write_output(shares, output)
    if output is not None:
        LOGGER.info("Wrote %d outcome shares to %s", len(shares), output)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
