import json
import math

import pandas as pd
import pytest

from dashboards.reaction_landscape import (
    _load_json_list,
    _shannon_entropy,
    fig_outcome_count_hist,
    fig_outcome_heatmap,
    fig_productivity_bar,
    load_table,
    outcome_matrix,
    productivity,
)


def _table(tmp_path):
    records = [
        {"row_compound": "2ae", "col_compound": "2ae", "reactive": True, "outcome_count": 0, "outcomes": "[]"},
        {
            "row_compound": "2ae",
            "col_compound": "a3b",
            "reactive": True,
            "outcome_count": 1,
            "outcomes": json.dumps(["3a2b+be"]),
        },
        {"row_compound": "a3b", "col_compound": "2ae", "reactive": False, "outcome_count": 0, "outcomes": "[]"},
        {"row_compound": "a3b", "col_compound": "a3b", "reactive": True, "outcome_count": 0, "outcomes": "[]"},
    ]
    path = tmp_path / "table.csv"
    pd.DataFrame(records).to_csv(path, index=False)
    return load_table(path)


def test_shannon_entropy_of_uniform_counts():
    assert _shannon_entropy([1, 1, 1, 1]) == pytest.approx(2.0)
    assert _shannon_entropy([5, 0]) == 0.0
    assert _shannon_entropy([]) == 0.0


def test_load_json_list_accepts_loose_input():
    assert _load_json_list('["be+cd"]') == ["be+cd"]
    assert _load_json_list("be+cd, 7a+7a") == ["be+cd", "7a+7a"]
    assert _load_json_list(None) == []


def test_load_table_requires_long_layout(tmp_path):
    path = tmp_path / "wide.csv"
    pd.DataFrame([{"": "2ae", "2ae": ""}]).to_csv(path, index=False)
    with pytest.raises(ValueError):
        load_table(path)


def test_outcome_matrix_masks_unreactive_cells(tmp_path):
    matrix = outcome_matrix(_table(tmp_path))
    assert list(matrix.index) == ["2ae", "a3b"]
    assert list(matrix.columns) == ["2ae", "a3b"]
    assert matrix.loc["2ae", "a3b"] == 1
    assert math.isnan(matrix.loc["a3b", "2ae"])


def test_productivity_sums_reactive_outcomes(tmp_path):
    totals = productivity(_table(tmp_path))
    assert totals.to_dict() == {"2ae": 1, "a3b": 0}


def test_figures_are_written(tmp_path):
    table = _table(tmp_path)
    outdir = tmp_path / "figs"
    outdir.mkdir()
    paths = [
        fig_outcome_heatmap(outcome_matrix(table), outdir),
        fig_productivity_bar(productivity(table), outdir),
        fig_outcome_count_hist(table, outdir),
    ]
    for path in paths:
        assert path is not None and path.exists()
