"""Reaction table – every possible reaction between the rule compounds."""
from __future__ import annotations

import json
import logging
import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import click
import pandas as pd

from alchemy import COMPOUND_WEIGHT, CompoundError, set_of_possible_reactions
from rules.reaction_rules import (
    DEFAULT_RULES_PATH,
    ReactionRule,
    RuleError,
    get_reactive_compounds,
    load_reaction_rules,
)
from utils.pairs import is_identity_outcome

LOGGER = logging.getLogger(__name__)

LAYOUTS = ("wide", "long")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


@dataclass
class ReactionCell:
    row_compound: str
    col_compound: str
    reactive: bool
    outcomes: list[str] = field(default_factory=list)

    @property
    def outcome_count(self) -> int:
        return len(self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_compound": self.row_compound,
            "col_compound": self.col_compound,
            "reactive": self.reactive,
            "outcome_count": self.outcome_count,
            "outcomes": json.dumps(self.outcomes),
        }


def _format_outcomes(row_rule: ReactionRule, col_rule: ReactionRule) -> list[str]:
    row_compound = row_rule.compound
    col_compound = col_rule.compound
    outcomes = [
        f"{left}+{right}"
        for left, right in set_of_possible_reactions(row_compound, col_compound)
        if not is_identity_outcome((left, right), row_compound, col_compound)
    ]
    return sorted(outcomes)


def _build_reaction_cells(rules: list[ReactionRule], *, anarchy: bool = False) -> list[ReactionCell]:
    """One cell per (row rule, column rule); the row rule's conditions gate reactivity."""

    cells: list[ReactionCell] = []
    for row_rule in rules:
        reactive_compounds = get_reactive_compounds(rules, row_rule.stir_method, row_rule.heat)
        for col_rule in rules:
            reactive = anarchy or col_rule.compound in reactive_compounds
            outcomes = _format_outcomes(row_rule, col_rule) if reactive else []
            cells.append(
                ReactionCell(
                    row_compound=str(row_rule.compound),
                    col_compound=str(col_rule.compound),
                    reactive=reactive,
                    outcomes=outcomes,
                )
            )
    return cells


def _wide_frame(rules: list[ReactionRule], cells: Iterable[ReactionCell]) -> pd.DataFrame:
    columns = [str(rule.compound) for rule in rules]
    lookup = {(cell.row_compound, cell.col_compound): cell for cell in cells}
    rows = []
    for row_name in columns:
        row: dict[str, str] = {"": row_name}
        for col_name in columns:
            cell = lookup.get((row_name, col_name))
            row[col_name] = ", ".join(cell.outcomes) if cell and cell.reactive else ""
        rows.append(row)
    return pd.DataFrame(rows, columns=["", *columns])


def _long_frame(cells: Iterable[ReactionCell]) -> pd.DataFrame:
    return pd.DataFrame(
        [cell.to_dict() for cell in cells],
        columns=["row_compound", "col_compound", "reactive", "outcome_count", "outcomes"],
    )


def _write_output(frame: pd.DataFrame, output: Path | None) -> None:
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


def _summarize_cells(cells: list[ReactionCell]) -> None:
    if not cells:
        LOGGER.warning("No reaction rules loaded; table is empty")
        return
    reactive = [cell for cell in cells if cell.reactive]
    LOGGER.info("Reactive cells: %d of %d", len(reactive), len(cells))
    productive = Counter(
        {f"{cell.row_compound}+{cell.col_compound}": cell.outcome_count for cell in reactive if cell.outcomes}
    )
    if not productive:
        LOGGER.info("No pair produces anything but itself")
        return
    LOGGER.info("Most productive pairs (top %d): %s", min(5, len(productive)), productive.most_common(5))
    inert = sum(1 for cell in reactive if not cell.outcomes)
    if inert:
        LOGGER.info("Reactive pairs with no visible outcome: %d", inert)


@click.command()
@click.option(
    "--rules",
    "rules_path",
    default=str(DEFAULT_RULES_PATH),
    show_default=True,
    type=click.Path(exists=True, dir_okay=False),
)
@click.option("--output", "output_path", default=None, type=click.Path(dir_okay=False))
@click.option("--layout", type=click.Choice(LAYOUTS), default="wide", show_default=True)
@click.option("--weight", type=int, default=COMPOUND_WEIGHT, show_default=True, help="Compound weight.")
@click.option("--anarchy", "-a", is_flag=True, help="Ignore heat and stir requirements.")
@click.option("--verbose/--quiet", default=False, show_default=True)
def main(
    rules_path: str,
    output_path: str | None,
    layout: str,
    weight: int,
    anarchy: bool,
    verbose: bool,
) -> None:
    """List the possible reactions between every pair of rule compounds."""

    _configure_logging(verbose)
    LOGGER.info("Loading reaction rules from %s", rules_path)
    try:
        rules = load_reaction_rules(rules_path, target_weight=weight)
    except (CompoundError, RuleError, json.JSONDecodeError) as exc:
        raise click.ClickException(f"Invalid reaction rules in {rules_path}: {exc}") from exc
    LOGGER.info("Building %dx%d reaction table", len(rules), len(rules))

    cells = _build_reaction_cells(rules, anarchy=anarchy)
    _summarize_cells(cells)

    frame = _wide_frame(rules, cells) if layout == "wide" else _long_frame(cells)
    output = Path(output_path) if output_path else None
    _write_output(frame, output)
    if output is not None:
        LOGGER.info("Wrote %s table to %s", layout, output)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
