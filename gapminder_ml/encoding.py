"""
One-hot encoding of categorical columns and feature concatenation.

Encoding is a pure transform: `fit_transform` returns a new Dataset plus the
`EncodingMap`s it built, and never mutates its input. Maps are built over
every row supplied, so encoding must run before the train/test split for
both partitions to share one feature width.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from .columns import SCALAR, VECTOR, Dataset, VectorColumn
from .errors import ColumnTypeMismatchError, UnknownCategoryError


logger = logging.getLogger(__name__)

ENCODED_SUFFIX = "_encoded"
FEATURES_COLUMN = "features"


def encoded_name(name: str) -> str:
    """Name of the one-hot column built from categorical column `name`."""
    return f"{name}{ENCODED_SUFFIX}"


@dataclass(frozen=True)
class EncodingMap:
    """Bijection category -> vector index, in first-seen order."""

    column: str
    categories: tuple[str, ...]

    @classmethod
    def from_values(cls, column: str, values: Iterable[str]) -> "EncodingMap":
        categories = pd.unique(pd.Series(list(values), dtype=object))
        return cls(column, tuple(str(c) for c in categories))

    @property
    def width(self) -> int:
        return len(self.categories)

    @property
    def index(self) -> dict[str, int]:
        return {category: i for i, category in enumerate(self.categories)}

    def index_of(self, value: str) -> int:
        try:
            return self.index[value]
        except KeyError:
            raise UnknownCategoryError(self.column, value) from None

    def transform(self, values: Sequence[str] | np.ndarray) -> np.ndarray:
        """One-hot matrix of shape (len(values), width)."""
        lookup = self.index
        codes = np.empty(len(values), dtype=int)
        for row, value in enumerate(values):
            try:
                codes[row] = lookup[value]
            except KeyError:
                raise UnknownCategoryError(self.column, value) from None
        return np.eye(self.width, dtype=float)[codes]

    def component_labels(self) -> tuple[str, ...]:
        return tuple(f"{self.column}={category}" for category in self.categories)


def apply_encoding(dataset: Dataset, maps: Sequence[EncodingMap]) -> Dataset:
    """Encode `dataset` with already-built maps (unseen values raise)."""
    encoded = []
    for encoding in maps:
        values = dataset.get_categorical(encoding.column)
        encoded.append(
            VectorColumn(
                encoded_name(encoding.column),
                encoding.transform(values),
                encoding.component_labels(),
            )
        )
    return dataset.with_columns(*encoded)


def concatenate_features(
    dataset: Dataset, names: Sequence[str], output: str = FEATURES_COLUMN
) -> Dataset:
    """
    Horizontally concatenate vector and scalar columns, in the order given,
    into one vector column. Model weights line up positionally with it.
    """
    blocks = []
    labels: list[str] = []
    for name in names:
        column = dataset.column(name)
        if column.kind == VECTOR:
            blocks.append(column.values)
            labels.extend(column.component_labels())
        elif column.kind == SCALAR:
            blocks.append(column.values.reshape(-1, 1))
            labels.append(name)
        else:
            raise ColumnTypeMismatchError(name, expected="scalar or vector", actual=column.kind)

    if blocks:
        matrix = np.hstack(blocks)
    else:
        matrix = np.zeros((dataset.n_rows, 0))
    return dataset.with_columns(VectorColumn(output, matrix, tuple(labels)))


def fit_transform(
    dataset: Dataset,
    categorical_columns: Sequence[str],
    numeric_columns: Sequence[str] = (),
    features_column: str | None = FEATURES_COLUMN,
) -> tuple[Dataset, dict[str, EncodingMap]]:
    """
    One-hot encode `categorical_columns` over every row of `dataset`.

    Each categorical column `c` gains a vector column `c_encoded`; all other
    columns pass through. When `features_column` is set, a vector column is
    appended holding the encoded columns followed by `numeric_columns`:

        [<c1>_encoded, <c2>_encoded, ..., <n1>, <n2>, ...]
    """
    maps = {
        name: EncodingMap.from_values(name, dataset.get_categorical(name))
        for name in categorical_columns
    }
    for encoding in maps.values():
        logger.info("Encoding %s into %d categories", encoding.column, encoding.width)

    expanded = apply_encoding(dataset, list(maps.values()))

    if features_column:
        order = [encoded_name(name) for name in categorical_columns] + list(numeric_columns)
        expanded = concatenate_features(expanded, order, features_column)
        logger.info(
            "Feature column %s has width %d",
            features_column,
            expanded.vector_column(features_column).width,
        )
    return expanded, maps
