"""
CSV loading against the positional Gapminder schema.
"""

import math

import pandas as pd
import pytest

from gapminder_ml.columns import CATEGORICAL, SCALAR
from gapminder_ml.data import GAPMINDER_SCHEMA, frame_to_dataset, load_dataset


def test_loads_all_rows_with_schema_names(gapminder_csv, gapminder_frame):
    dataset = load_dataset(gapminder_csv)

    assert dataset.n_rows == len(gapminder_frame)
    assert [(s.name, s.kind) for s in dataset.schema()] == list(GAPMINDER_SCHEMA)
    assert dataset.get_scalar("life_exp")[0] == pytest.approx(gapminder_frame["lifeExp"].iloc[0])
    assert dataset.get_categorical("country")[0] == "Afghanistan"


def test_schema_kinds():
    kinds = dict(GAPMINDER_SCHEMA)
    assert kinds["country"] == CATEGORICAL
    assert kinds["continent"] == CATEGORICAL
    assert all(kinds[n] == SCALAR for n in ("year", "life_exp", "pop", "gdp_percap"))


def test_invalid_numeric_cells_become_nan(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        "country,continent,year,lifeExp,pop,gdpPercap\n"
        "Chad,Africa,1952,,abc,800.5\n"
        "Chad,Africa,n/a,40.1,2000000,810.0\n"
        ",Africa,1962,41.0,2100000,820.0\n"
    )
    dataset = load_dataset(path)

    assert math.isnan(dataset.get_scalar("life_exp")[0])
    assert math.isnan(dataset.get_scalar("pop")[0])
    assert math.isnan(dataset.get_scalar("year")[1])
    assert dataset.get_scalar("gdp_percap")[2] == pytest.approx(820.0)
    assert dataset.get_categorical("country")[2] == ""


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset(tmp_path / "nope.csv")


def test_too_few_columns_raises(tmp_path):
    path = tmp_path / "narrow.csv"
    path.write_text("country,continent,year\nChad,Africa,1952\n")
    with pytest.raises(ValueError):
        load_dataset(path)


def test_frame_to_dataset_binds_by_schema_name():
    frame = pd.DataFrame(
        {
            "country": ["A"],
            "continent": ["B"],
            "year": ["1952"],
            "life_exp": ["50.5"],
            "pop": ["1000"],
            "gdp_percap": ["12.5"],
        }
    )
    dataset = frame_to_dataset(frame)
    assert dataset.get_scalar("year")[0] == 1952.0
    assert dataset.get_scalar("gdp_percap")[0] == 12.5
