"""
In-memory column store for the Gapminder analysis pipeline.

A `Dataset` is an ordered collection of named columns sharing one row count.
Columns come in three tagged variants:

- `ScalarColumn`: one float per row
- `VectorColumn`: a fixed-width float vector per row (produced by encoding)
- `CategoricalColumn`: one string per row (raw input, before encoding)

Datasets and columns are immutable: the underlying numpy arrays are marked
read-only and every transform returns a new `Dataset`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Union

import numpy as np
import pandas as pd

from .errors import ColumnNotFoundError, ColumnTypeMismatchError, LengthMismatchError


SCALAR = "scalar"
VECTOR = "vector"
CATEGORICAL = "categorical"


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class ScalarColumn:
    name: str
    values: np.ndarray

    kind = SCALAR

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=float).reshape(-1)
        object.__setattr__(self, "values", _frozen(values))

    @property
    def width(self) -> int:
        return 1

    def __len__(self) -> int:
        return len(self.values)

    def take(self, indices: np.ndarray) -> "ScalarColumn":
        return ScalarColumn(self.name, self.values[indices])


@dataclass(frozen=True)
class VectorColumn:
    name: str
    values: np.ndarray
    labels: tuple[str, ...] = field(default=())

    kind = VECTOR

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=float)
        if values.ndim == 1 and len(values):
            values = values.reshape(len(values), 1)
        elif values.ndim == 1:
            # zero rows: the width comes from the labels
            values = values.reshape(0, len(self.labels))
        if values.ndim != 2:
            raise ValueError(f"Vector column {self.name!r} must be 2-dimensional")
        if self.labels and len(self.labels) != values.shape[1]:
            raise LengthMismatchError(
                f"Vector column {self.name!r} has width {values.shape[1]} "
                f"but {len(self.labels)} component labels"
            )
        object.__setattr__(self, "values", _frozen(values))
        object.__setattr__(self, "labels", tuple(self.labels))

    @property
    def width(self) -> int:
        return self.values.shape[1]

    def __len__(self) -> int:
        return self.values.shape[0]

    def component_labels(self) -> tuple[str, ...]:
        """Labels for each vector component, `name[i]` when none were given."""
        if self.labels:
            return self.labels
        return tuple(f"{self.name}[{i}]" for i in range(self.width))

    def take(self, indices: np.ndarray) -> "VectorColumn":
        return VectorColumn(self.name, self.values[indices], self.labels)


@dataclass(frozen=True)
class CategoricalColumn:
    name: str
    values: np.ndarray

    kind = CATEGORICAL

    def __post_init__(self) -> None:
        values = np.array([str(v) for v in self.values], dtype=object)
        object.__setattr__(self, "values", _frozen(values))

    @property
    def width(self) -> int:
        return 1

    def __len__(self) -> int:
        return len(self.values)

    def take(self, indices: np.ndarray) -> "CategoricalColumn":
        return CategoricalColumn(self.name, self.values[indices])


Column = Union[ScalarColumn, VectorColumn, CategoricalColumn]


@dataclass(frozen=True)
class ColumnSpec:
    """One entry of `Dataset.schema()`."""

    name: str
    kind: str
    width: int


class Dataset:
    """Ordered, immutable collection of equally long columns."""

    def __init__(self, columns: Iterable[Column], n_rows: int | None = None) -> None:
        columns = list(columns)
        if n_rows is None:
            n_rows = len(columns[0]) if columns else 0

        self._columns: dict[str, Column] = {}
        for column in columns:
            if column.name in self._columns:
                raise ValueError(f"Duplicate column name {column.name!r}")
            if len(column) != n_rows:
                raise LengthMismatchError(
                    f"Column {column.name!r} has {len(column)} rows, "
                    f"dataset has {n_rows}"
                )
            self._columns[column.name] = column
        self._n_rows = n_rows

    @property
    def n_rows(self) -> int:
        return self._n_rows

    def __len__(self) -> int:
        return self._n_rows

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(self._columns)

    def column(self, name: str) -> Column:
        try:
            return self._columns[name]
        except KeyError:
            raise ColumnNotFoundError(name, self.column_names) from None

    def _typed(self, name: str, kind: str) -> Column:
        column = self.column(name)
        if column.kind != kind:
            raise ColumnTypeMismatchError(name, expected=kind, actual=column.kind)
        return column

    def scalar_column(self, name: str) -> ScalarColumn:
        return self._typed(name, SCALAR)

    def vector_column(self, name: str) -> VectorColumn:
        return self._typed(name, VECTOR)

    def get_scalar(self, name: str) -> np.ndarray:
        return self._typed(name, SCALAR).values

    def get_vector(self, name: str) -> np.ndarray:
        return self._typed(name, VECTOR).values

    def get_categorical(self, name: str) -> np.ndarray:
        return self._typed(name, CATEGORICAL).values

    def schema(self) -> list[ColumnSpec]:
        return [ColumnSpec(c.name, c.kind, c.width) for c in self._columns.values()]

    def with_columns(self, *columns: Column) -> "Dataset":
        """Return a new Dataset with `columns` replacing or appended to ours."""
        merged = dict(self._columns)
        for column in columns:
            merged[column.name] = column
        return Dataset(merged.values(), n_rows=self._n_rows)

    def take(self, indices: Sequence[int] | np.ndarray) -> "Dataset":
        """Return a new Dataset holding only the given rows, in the given order."""
        indices = np.asarray(indices, dtype=int)
        return Dataset(
            (c.take(indices) for c in self._columns.values()), n_rows=len(indices)
        )

    def to_frame(self) -> pd.DataFrame:
        """Scalar and categorical columns as a DataFrame (vectors are skipped)."""
        data = {
            c.name: c.values
            for c in self._columns.values()
            if c.kind in (SCALAR, CATEGORICAL)
        }
        return pd.DataFrame(data, index=pd.RangeIndex(self._n_rows))

    def __repr__(self) -> str:
        cols = ", ".join(f"{s.name}:{s.kind}[{s.width}]" for s in self.schema())
        return f"Dataset(n_rows={self._n_rows}, columns=[{cols}])"
