"""
Data loading utilities for the Gapminder analysis project.

This module is intentionally self-contained so it can be reused by:
- the batch analysis script (`analyze_gapminder.py`)
- the test-suite, which builds small in-memory frames
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .columns import CATEGORICAL, SCALAR, CategoricalColumn, Dataset, ScalarColumn
from .config import DEFAULT_DATA_PATH


logger = logging.getLogger(__name__)

# Columns are bound by position, in this order.
GAPMINDER_SCHEMA: tuple[tuple[str, str], ...] = (
    ("country", CATEGORICAL),
    ("continent", CATEGORICAL),
    ("year", SCALAR),
    ("life_exp", SCALAR),
    ("pop", SCALAR),
    ("gdp_percap", SCALAR),
)


def get_default_data_path() -> Path:
    """Return the default path to the Gapminder CSV."""
    return DEFAULT_DATA_PATH


def load_raw_gapminder_data(
    path: Path | str, schema: tuple[tuple[str, str], ...] = GAPMINDER_SCHEMA
) -> pd.DataFrame:
    """
    Load the raw Gapminder CSV as strings.

    The file has one header row which is skipped: columns are renamed to the
    schema names by position, so `lifeExp` / `gdpPercap` style headers work
    as well as snake_case ones. Extra trailing columns are ignored.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found at {path}.")

    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    if df.shape[1] < len(schema):
        raise ValueError(
            f"{path} has {df.shape[1]} columns, expected at least {len(schema)} "
            f"({', '.join(name for name, _ in schema)})"
        )
    df = df.iloc[:, : len(schema)].copy()
    df.columns = [name for name, _ in schema]
    return df


def frame_to_dataset(
    df: pd.DataFrame, schema: tuple[tuple[str, str], ...] = GAPMINDER_SCHEMA
) -> Dataset:
    """
    Convert a DataFrame into a typed `Dataset` following `schema`.

    Scalar columns are coerced with `pd.to_numeric(errors="coerce")`, so empty
    or malformed cells become NaN. Categorical columns keep their string
    value; missing cells become the empty string.
    """
    columns = []
    for name, kind in schema:
        if kind == SCALAR:
            values = pd.to_numeric(df[name], errors="coerce").astype(float)
            n_missing = int(values.isna().sum())
            if n_missing:
                logger.info("Column %s: %d empty or invalid values parsed as NaN", name, n_missing)
            columns.append(ScalarColumn(name, values.to_numpy()))
        elif kind == CATEGORICAL:
            values = df[name].fillna("").astype(str).str.strip()
            columns.append(CategoricalColumn(name, values.to_numpy()))
        else:
            raise ValueError(f"Unsupported column kind {kind!r} for {name!r}")
    return Dataset(columns, n_rows=len(df))


def load_dataset(
    path: Path | str | None = None,
    schema: tuple[tuple[str, str], ...] = GAPMINDER_SCHEMA,
) -> Dataset:
    """
    End-to-end loading:

    1. Read the raw CSV
    2. Bind columns to the schema by position
    3. Parse numeric columns, keeping invalid cells as NaN
    """
    if path is None:
        path = DEFAULT_DATA_PATH
    df_raw = load_raw_gapminder_data(path, schema)
    dataset = frame_to_dataset(df_raw, schema)
    logger.info("Loaded %d rows x %d columns from %s", dataset.n_rows, len(schema), path)
    return dataset
