#!/usr/bin/env python3
"""Visual diagnostics for a reaction table."""
from __future__ import annotations

import argparse
import json
import math
from pathlib import Path
from typing import Iterable, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

plt.switch_backend("Agg")

_REQUIRED_COLUMNS = ("row_compound", "col_compound", "reactive", "outcome_count")


# --------- Parsing helpers -------------------------------------------------

def _load_json_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError:
            return [item.strip() for item in text.split(",") if item.strip()]
        if isinstance(loaded, list):
            return [str(item) for item in loaded]
        return [str(loaded)]
    return [str(value)]


# --------- Metric helpers --------------------------------------------------

def _shannon_entropy(counts: Iterable[int]) -> float:
    total = float(sum(max(int(c), 0) for c in counts))
    if total <= 0:
        return 0.0
    entropy = 0.0
    for count in counts:
        if count <= 0:
            continue
        p = float(count) / total
        entropy -= p * math.log(p, 2)
    return entropy


# --------- Data wrangling --------------------------------------------------

def load_table(path: Path) -> pd.DataFrame:
    if path.suffix.lower() in {".parquet", ".pq"}:
        table = pd.read_parquet(path)
    else:
        table = pd.read_csv(path)
    missing = [column for column in _REQUIRED_COLUMNS if column not in table.columns]
    if missing:
        raise ValueError(f"reaction table must include {missing}; write it with --layout long")
    table["reactive"] = table["reactive"].astype(bool)
    table["outcome_count"] = table["outcome_count"].fillna(0).astype(int)
    if "outcomes" in table.columns:
        table["outcomes_list"] = table["outcomes"].apply(_load_json_list)
    else:
        table["outcomes_list"] = [[] for _ in range(len(table))]
    return table


def outcome_matrix(table: pd.DataFrame) -> pd.DataFrame:
    """Outcome counts pivoted to rows x columns; non-reactive cells are NaN."""

    order = list(dict.fromkeys(table["row_compound"]))
    cells = table.drop_duplicates(["row_compound", "col_compound"])
    values = cells["outcome_count"].where(cells["reactive"])
    pivot = cells.assign(value=values).pivot(index="row_compound", columns="col_compound", values="value")
    return pivot.reindex(index=order, columns=order)


def productivity(table: pd.DataFrame) -> pd.Series:
    reactive = table[table["reactive"]]
    totals = reactive.groupby("row_compound", sort=False)["outcome_count"].sum()
    order = list(dict.fromkeys(table["row_compound"]))
    return totals.reindex(order, fill_value=0)


# --------- Plot helpers ----------------------------------------------------

def ensure_outdir(outdir: Path) -> None:
    outdir.mkdir(parents=True, exist_ok=True)


def savefig(path: Path) -> None:
    plt.tight_layout()
    plt.savefig(path, dpi=180)
    plt.close()


def fig_outcome_heatmap(matrix: pd.DataFrame, outdir: Path) -> Path:
    plt.figure()
    data = np.ma.masked_invalid(matrix.to_numpy(dtype=float))
    plt.imshow(data, cmap="viridis")
    plt.colorbar(label="Distinct outcomes")
    plt.xticks(range(len(matrix.columns)), matrix.columns, rotation=45, ha="right")
    plt.yticks(range(len(matrix.index)), matrix.index)
    plt.xlabel("Column compound")
    plt.ylabel("Row compound")
    plt.title("Non-identity reaction outcomes per pair")
    path = outdir / "01_outcome_heatmap.png"
    savefig(path)
    return path


def fig_productivity_bar(totals: pd.Series, outdir: Path) -> Path:
    plt.figure()
    plt.bar(range(len(totals)), totals.values)
    plt.xticks(range(len(totals)), totals.index, rotation=45, ha="right")
    plt.ylabel("Outcomes across reactive partners")
    plt.title("Reaction productivity by compound")
    path = outdir / "02_productivity.png"
    savefig(path)
    return path


def fig_outcome_count_hist(table: pd.DataFrame, outdir: Path) -> Optional[Path]:
    counts = table.loc[table["reactive"], "outcome_count"]
    if counts.empty:
        return None
    plt.figure()
    bins = np.arange(0, counts.max() + 2) - 0.5
    plt.hist(counts, bins=bins)
    plt.xlabel("Distinct outcomes per reactive pair")
    plt.ylabel("Count of pairs")
    plt.title("Distribution of outcome counts")
    path = outdir / "03_outcome_count_hist.png"
    savefig(path)
    return path


# --------- CLI -------------------------------------------------------------

def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Visualize a reaction table")
    parser.add_argument(
        "--table",
        type=Path,
        required=True,
        help="Path to a reaction table written by pipelines.reaction_table --layout long",
    )
    parser.add_argument(
        "--outdir",
        type=Path,
        default=Path("reaction_figs"),
        help="Output directory for generated figures",
    )
    return parser


def main() -> None:
    parser = build_argument_parser()
    args = parser.parse_args()

    table = load_table(args.table)
    matrix = outcome_matrix(table)
    totals = productivity(table)

    ensure_outdir(args.outdir)

    reactive_share = float(table["reactive"].mean()) if len(table) else 0.0
    print("\n=== Reaction table summary ===")
    print(f"Compounds: {len(matrix.index)}")
    print(f"Cells: {len(table)} (reactive share {reactive_share:.2f})")
    print(f"Total outcomes: {int(totals.sum())}")
    print(f"Productivity entropy (bits): {_shannon_entropy(totals.values):.3f}")
    if len(totals):
        print(f"Most productive: {totals.idxmax()} ({int(totals.max())} outcomes)")

    outputs: list[Path] = []
    outputs.append(fig_outcome_heatmap(matrix, args.outdir))
    outputs.append(fig_productivity_bar(totals, args.outdir))
    out_hist = fig_outcome_count_hist(table, args.outdir)
    if out_hist:
        outputs.append(out_hist)

    print("\nWrote figures:")
    for path in outputs:
        print(f" - {path}")


if __name__ == "__main__":
    main()
