"""
Console and chart output for the Gapminder analysis.

Charts are rendered with the non-interactive Agg backend and written to
fixed file names, so re-running the analysis overwrites the same files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import seaborn as sns  # noqa: E402

from .columns import Dataset  # noqa: E402
from .correlation import CorrelationMatrix  # noqa: E402
from .statistics import year_counts  # noqa: E402


logger = logging.getLogger(__name__)

sns.set(style="whitegrid")

LIFE_EXP_CHART = "life_exp_dist.png"
GDP_CHART = "gdp_per_capita_dist.png"
POP_CHART = "pop_dist.png"
YEAR_CHART = "year_dist.png"
SCATTER_CHART = "gdp_vs_life_exp.png"
HEATMAP_CHART = "correlation_heatmap.png"

FIGSIZE = (6, 4)


def print_summary(title: str, values: Mapping[str, Any]) -> None:
    """Print key/value pairs under a banner."""
    print(f"\n=== {title} ===")
    for key, value in values.items():
        if isinstance(value, float):
            print(f"{key}: {value:,.4f}")
        else:
            print(f"{key}: {value}")


def distribution_series(dataset: Dataset) -> dict[str, Any]:
    """
    The arrays behind the distribution charts:
    life expectancy, GDP per capita, population and (years, counts).
    """
    return {
        "life_exp": np.asarray(dataset.get_scalar("life_exp")),
        "gdp_percap": np.asarray(dataset.get_scalar("gdp_percap")),
        "pop": np.asarray(dataset.get_scalar("pop")),
        "year_counts": year_counts(dataset.get_scalar("year")),
    }


def _save(fig: plt.Figure, path: Path) -> Path:
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    logger.info("Saved %s", path)
    return path


def plot_distribution(values: np.ndarray, title: str, xlabel: str, path: Path) -> Path:
    """Histogram of the finite entries of `values`, saved to `path`."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    finite = values[np.isfinite(values)]
    sns.histplot(finite, bins=30, ax=ax)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel("Frequency")
    return _save(fig, path)


def plot_year_counts(years: np.ndarray, counts: np.ndarray, path: Path) -> Path:
    """Bar chart of row counts per year."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    ax.bar(years, counts, width=0.8)
    ax.set_title("Observations per year")
    ax.set_xlabel("Year")
    ax.set_ylabel("Count")
    return _save(fig, path)


def plot_scatter(x: np.ndarray, y: np.ndarray, path: Path) -> Path:
    """Scatter plot of GDP per capita (x) against life expectancy (y)."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    ax.scatter(x, y, s=10, alpha=0.6)
    ax.set_xlabel("GDP per capita")
    ax.set_ylabel("Life expectancy")
    ax.set_title("GDP per capita vs. life expectancy")
    return _save(fig, path)


def plot_correlation_heatmap(matrix: CorrelationMatrix, path: Path) -> Path:
    """
    Annotated coolwarm heatmap of `matrix`, centred on 0.

    Undefined (NaN) cells are left blank. Cell values are printed only for
    matrices of at most 12 labels.
    """
    n = len(matrix.labels)
    size = max(6, 0.5 * n)
    fig, ax = plt.subplots(figsize=(size, size * 0.8))
    sns.heatmap(
        matrix.to_frame(),
        annot=n <= 12,
        fmt=".2f",
        cmap="coolwarm",
        center=0,
        vmin=-1,
        vmax=1,
        ax=ax,
    )
    ax.set_title("Correlation matrix")
    return _save(fig, path)


def save_charts(
    dataset: Dataset, matrix: CorrelationMatrix, output_dir: Path | str
) -> dict[str, Path]:
    """Write every chart into `output_dir` and return their paths by name."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    series = distribution_series(dataset)
    years, counts = series["year_counts"]

    return {
        "life_exp": plot_distribution(
            series["life_exp"], "Life expectancy distribution", "Life expectancy",
            output_dir / LIFE_EXP_CHART,
        ),
        "gdp_percap": plot_distribution(
            series["gdp_percap"], "GDP per capita distribution", "GDP per capita",
            output_dir / GDP_CHART,
        ),
        "pop": plot_distribution(
            series["pop"], "Population distribution", "Population",
            output_dir / POP_CHART,
        ),
        "year": plot_year_counts(years, counts, output_dir / YEAR_CHART),
        "scatter": plot_scatter(
            series["gdp_percap"], series["life_exp"], output_dir / SCATTER_CHART
        ),
        "heatmap": plot_correlation_heatmap(matrix, output_dir / HEATMAP_CHART),
    }
