"""
Report sink: chart files and console summary.
"""

import numpy as np

from gapminder_ml.columns import Dataset, ScalarColumn
from gapminder_ml.correlation import CorrelationMatrix, correlation_matrix
from gapminder_ml.report import (
    GDP_CHART,
    HEATMAP_CHART,
    LIFE_EXP_CHART,
    POP_CHART,
    SCATTER_CHART,
    YEAR_CHART,
    distribution_series,
    plot_correlation_heatmap,
    plot_distribution,
    plot_scatter,
    plot_year_counts,
    print_summary,
    save_charts,
)


def make_dataset():
    return Dataset(
        [
            ScalarColumn("year", [1952.0, 1952.0, 1957.0, 1962.0]),
            ScalarColumn("life_exp", [40.0, 45.0, 50.0, np.nan]),
            ScalarColumn("pop", [1e6, 2e6, 3e6, 4e6]),
            ScalarColumn("gdp_percap", [500.0, 800.0, 1200.0, 2000.0]),
        ]
    )


def test_distribution_series():
    series = distribution_series(make_dataset())
    years, counts = series["year_counts"]
    np.testing.assert_array_equal(years, [1952.0, 1957.0, 1962.0])
    np.testing.assert_array_equal(counts, [2, 1, 1])
    assert len(series["life_exp"]) == 4


def test_save_charts_writes_fixed_names(tmp_path):
    dataset = make_dataset()
    matrix = correlation_matrix(dataset, ["year", "life_exp", "pop", "gdp_percap"])

    paths = save_charts(dataset, matrix, tmp_path / "out")

    expected = {LIFE_EXP_CHART, GDP_CHART, POP_CHART, YEAR_CHART, SCATTER_CHART, HEATMAP_CHART}
    assert {p.name for p in paths.values()} == expected
    for path in paths.values():
        assert path.exists()
        assert path.stat().st_size > 0


def test_print_summary(capsys):
    print_summary("Regression metrics", {"RMSE": 1.23456, "rows": 10})
    out = capsys.readouterr().out
    assert "=== Regression metrics ===" in out
    assert "RMSE: 1.2346" in out
    assert "rows: 10" in out


def test_heatmap_with_undefined_cells(tmp_path):
    matrix = CorrelationMatrix(("a", "b"), [[1.0, np.nan], [np.nan, 1.0]], (("a", "b"),))
    path = plot_correlation_heatmap(matrix, tmp_path / "heatmap.png")
    assert path.exists()
    assert path.stat().st_size > 0


def test_public_report_functions_are_documented():
    for func in (plot_distribution, plot_year_counts, plot_scatter, plot_correlation_heatmap):
        assert func.__doc__
