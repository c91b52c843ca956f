"""
Pairwise Pearson correlation across scalar and vector columns.

Every requested column is flattened to one numeric series:

- scalar column -> its values
- vector column -> its components in row-major order (row 0's components,
  then row 1's, ...)

Pairing rules:

- scalar x vector of width w: the scalar is repeated w times per row so that
  each component is paired with the scalar value of its own row
- vector x vector of unequal width: the pair is undefined. The cell is NaN
  and listed in `CorrelationMatrix.undefined_pairs`, or a
  `LengthMismatchError` is raised with `on_mismatch="raise"`
- a constant series (zero variance) correlates 0.0 with everything,
  itself included
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

import numpy as np
import pandas as pd

from .columns import SCALAR, VECTOR, Dataset
from .encoding import EncodingMap, encoded_name
from .errors import ColumnTypeMismatchError, LengthMismatchError


logger = logging.getLogger(__name__)

DEGENERATE_CORRELATION = 0.0


@dataclass(frozen=True)
class CorrelationMatrix:
    labels: tuple[str, ...]
    values: np.ndarray
    undefined_pairs: tuple[tuple[str, str], ...] = field(default=())

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=float)
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    def __getitem__(self, pair: tuple[str, str]) -> float:
        i = self.labels.index(pair[0])
        j = self.labels.index(pair[1])
        return float(self.values[i, j])

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.values, index=list(self.labels), columns=list(self.labels))


def pearson(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """
    Pearson correlation of two equally long series.

    Positions where either value is NaN or infinite are skipped. Fewer than two complete
    pairs, or zero variance in either series, yields `DEGENERATE_CORRELATION`.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise LengthMismatchError(f"Cannot correlate series of length {a.size} and {b.size}")

    mask = np.isfinite(a) & np.isfinite(b)
    if mask.sum() < 2:
        return DEGENERATE_CORRELATION
    x = pd.Series(a[mask])
    y = pd.Series(b[mask])
    if x.nunique() < 2 or y.nunique() < 2:
        return DEGENERATE_CORRELATION

    r = x.corr(y)
    if not np.isfinite(r):
        return DEGENERATE_CORRELATION
    return float(np.clip(r, -1.0, 1.0))


def flatten(dataset: Dataset, name: str, repeat: int = 1) -> np.ndarray:
    """
    Flatten a column to one series. `repeat` repeats each scalar row value so
    it lines up with a vector of that width.
    """
    column = dataset.column(name)
    if column.kind == SCALAR:
        return np.repeat(column.values, repeat)
    elif column.kind == VECTOR:
        return column.values.reshape(-1)
    raise ColumnTypeMismatchError(name, expected="scalar or vector", actual=column.kind)


def _pair_correlation(dataset: Dataset, left: str, right: str) -> float:
    a = dataset.column(left)
    b = dataset.column(right)

    if a.kind == VECTOR and b.kind == VECTOR and a.width != b.width:
        raise LengthMismatchError(
            f"Cannot pair vector column {left!r} (width {a.width}) "
            f"with vector column {right!r} (width {b.width})"
        )

    width = max(a.width if a.kind == VECTOR else 1, b.width if b.kind == VECTOR else 1)
    series_a = flatten(dataset, left, repeat=width if a.kind == SCALAR else 1)
    series_b = flatten(dataset, right, repeat=width if b.kind == SCALAR else 1)
    return pearson(series_a, series_b)


def correlation_matrix(
    dataset: Dataset, column_names: Sequence[str], on_mismatch: str = "nan"
) -> CorrelationMatrix:
    """
    Symmetric correlation matrix over `column_names`, in request order.

    `on_mismatch` controls unequal-width vector pairs: "nan" marks the cell
    NaN and records the pair, "raise" propagates the `LengthMismatchError`.
    """
    if on_mismatch not in ("nan", "raise"):
        raise ValueError(f"on_mismatch must be 'nan' or 'raise', got {on_mismatch!r}")

    names = tuple(column_names)
    # raises on unknown or categorical columns
    for name in names:
        flatten(dataset, name)

    n = len(names)
    matrix = np.zeros((n, n), dtype=float)
    undefined: list[tuple[str, str]] = []

    for i in range(n):
        for j in range(i, n):
            try:
                value = _pair_correlation(dataset, names[i], names[j])
            except LengthMismatchError:
                if on_mismatch == "raise":
                    raise
                value = float("nan")
                undefined.append((names[i], names[j]))
            matrix[i, j] = matrix[j, i] = value

    if undefined:
        logger.warning(
            "%d column pairs have mismatched vector widths and are left undefined",
            len(undefined),
        )
    return CorrelationMatrix(names, matrix, tuple(undefined))


def component_correlation_matrix(
    dataset: Dataset,
    column_names: Sequence[str],
    encoding_maps: Mapping[str, EncodingMap] | None = None,
) -> CorrelationMatrix:
    """
    Correlation matrix over every scalar-equivalent dimension: each vector
    column is expanded into its components, labelled `<column>=<category>`
    when an encoding map for it is supplied.
    """
    maps_by_output = {encoded_name(m.column): m for m in (encoding_maps or {}).values()}

    labels: list[str] = []
    series: list[np.ndarray] = []
    for name in column_names:
        column = dataset.column(name)
        if column.kind == SCALAR:
            labels.append(name)
            series.append(column.values)
        elif column.kind == VECTOR:
            if name in maps_by_output:
                component_labels = maps_by_output[name].component_labels()
            else:
                component_labels = column.component_labels()
            labels.extend(component_labels)
            series.extend(column.values[:, k] for k in range(column.width))
        else:
            raise ColumnTypeMismatchError(name, expected="scalar or vector", actual=column.kind)

    n = len(series)
    matrix = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(i, n):
            matrix[i, j] = matrix[j, i] = pearson(series[i], series[j])
    return CorrelationMatrix(tuple(labels), matrix)
