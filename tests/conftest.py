"""
Shared fixtures for the gapminder_ml test-suite.
"""

import numpy as np
import pandas as pd
import pytest

from gapminder_ml.columns import CategoricalColumn, Dataset, ScalarColumn, VectorColumn


# ═══════════════════════════════════════════════════════════════
# BUILDERS
# ═══════════════════════════════════════════════════════════════

COUNTRIES = {
    "Afghanistan": "Asia",
    "Japan": "Asia",
    "France": "Europe",
    "Norway": "Europe",
    "Kenya": "Africa",
}


def make_frame(years=range(1952, 2012, 5), seed=0):
    """A small Gapminder-shaped frame: one row per country and year."""
    rng = np.random.default_rng(seed)
    rows = []
    for country, continent in COUNTRIES.items():
        base_gdp = rng.uniform(500, 30000)
        for year in years:
            gdp = base_gdp * (1 + 0.02) ** (year - 1952)
            pop = rng.uniform(1e6, 1e8)
            life_exp = 40 + 0.25 * (year - 1952) + 0.0008 * gdp + rng.normal(0, 0.5)
            rows.append(
                {
                    "country": country,
                    "continent": continent,
                    "year": float(year),
                    "lifeExp": life_exp,
                    "pop": pop,
                    "gdpPercap": gdp,
                }
            )
    return pd.DataFrame(rows)


# ═══════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════

@pytest.fixture
def gapminder_frame():
    return make_frame()


@pytest.fixture
def gapminder_csv(tmp_path, gapminder_frame):
    path = tmp_path / "gapminder.csv"
    gapminder_frame.to_csv(path, index=False)
    return path


@pytest.fixture
def mixed_dataset():
    """Four rows with scalar, vector and categorical columns."""
    return Dataset(
        [
            CategoricalColumn("continent", ["Asia", "Europe", "Asia", "Europe"]),
            ScalarColumn("year", [1952.0, 1957.0, 1962.0, 1967.0]),
            ScalarColumn("life_exp", [40.0, 45.0, 50.0, 55.0]),
            VectorColumn("continent_encoded", [[1, 0], [0, 1], [1, 0], [0, 1]], ("Asia", "Europe")),
        ]
    )
