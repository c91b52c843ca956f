"""
Descriptive statistics over scalar columns.

A value is invalid when it is NaN (or infinite); for the columns listed in
`POSITIVE_ONLY_COLUMNS` values <= 0 are invalid too. Means are computed over
valid entries only. Dispersion is computed over the imputed series, where
each invalid entry is replaced by the column's own valid mean so the series
keeps its length and stays row-aligned with every other column.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from .columns import Dataset, ScalarColumn


logger = logging.getLogger(__name__)

POSITIVE_ONLY_COLUMNS: frozenset[str] = frozenset({"year"})


@dataclass(frozen=True)
class ColumnSummary:
    name: str
    count: int
    valid_count: int
    mean: float
    stddev: float

    def as_dict(self) -> dict[str, float | int]:
        return {
            "count": self.count,
            "valid_count": self.valid_count,
            "mean": self.mean,
            "stddev": self.stddev,
        }


def _positive_only(column: ScalarColumn, positive_only: bool | None) -> bool:
    if positive_only is None:
        return column.name in POSITIVE_ONLY_COLUMNS
    return positive_only


def valid_mask(column: ScalarColumn, positive_only: bool | None = None) -> np.ndarray:
    """Boolean mask of valid entries."""
    values = column.values
    mask = np.isfinite(values)
    if _positive_only(column, positive_only):
        mask &= values > 0
    return mask


def valid_mean(column: ScalarColumn, positive_only: bool | None = None) -> float:
    valid = column.values[valid_mask(column, positive_only)]
    if valid.size == 0:
        return float("nan")
    return float(valid.mean())


def impute(column: ScalarColumn, positive_only: bool | None = None) -> ScalarColumn:
    """Return a same-length column with invalid entries set to the valid mean."""
    mask = valid_mask(column, positive_only)
    fill = valid_mean(column, positive_only)
    values = np.where(mask, column.values, fill)
    return ScalarColumn(column.name, values)


def describe(column: ScalarColumn, positive_only: bool | None = None) -> ColumnSummary:
    """
    Summarize a scalar column.

    - `mean`: arithmetic mean of the valid entries
    - `stddev`: sample standard deviation (ddof=1) of the imputed series;
      0.0 for a single row
    - `valid_count`: number of valid entries

    A column with no valid entries gets NaN mean and stddev.
    """
    mask = valid_mask(column, positive_only)
    valid_count = int(mask.sum())
    count = len(column)

    if valid_count == 0:
        logger.warning("Column %s has no valid values; mean and stddev are undefined", column.name)
        return ColumnSummary(column.name, count, 0, float("nan"), float("nan"))

    if valid_count < count:
        logger.debug(
            "Column %s: imputing %d invalid values with the valid mean",
            column.name,
            count - valid_count,
        )

    cleaned = impute(column, positive_only).values
    mean = float(column.values[mask].mean())
    stddev = float(np.std(cleaned, ddof=1)) if count > 1 else 0.0
    return ColumnSummary(column.name, count, valid_count, mean, stddev)


def clean_dataset(dataset: Dataset, names: Iterable[str]) -> Dataset:
    """Return a new Dataset whose named scalar columns are imputed."""
    return dataset.with_columns(*(impute(dataset.scalar_column(name)) for name in names))


def distinct_count(values: Sequence[Any] | np.ndarray) -> int:
    """Number of unique values (NaN counts as a single value)."""
    return int(pd.Series(values, dtype=object).nunique(dropna=False))


def year_counts(values: Sequence[float] | np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Sorted distinct years and how many rows carry each one."""
    counts = pd.Series(np.asarray(values, dtype=float)).value_counts(dropna=True).sort_index()
    return counts.index.to_numpy(dtype=float), counts.to_numpy(dtype=int)


def dataset_overview(dataset: Dataset, numeric_columns: Sequence[str] = ("year", "pop", "gdp_percap")) -> dict[str, Any]:
    """
    Printable key/value overview of a freshly loaded dataset:
    row/column counts, distinct countries and continents, and mean/stddev of
    the given numeric columns.
    """
    overview: dict[str, Any] = {
        "rows": dataset.n_rows,
        "columns": len(dataset.column_names),
    }
    for name in ("country", "continent"):
        if name in dataset:
            overview[f"distinct_{name}"] = distinct_count(dataset.get_categorical(name))

    for name in numeric_columns:
        summary = describe(dataset.scalar_column(name))
        overview[f"{name}_mean"] = summary.mean
        overview[f"{name}_stddev"] = summary.stddev
    return overview
