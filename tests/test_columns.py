"""
Column store: typed access, schema and immutability.
"""

import numpy as np
import pytest

from gapminder_ml.columns import (
    CATEGORICAL,
    SCALAR,
    VECTOR,
    CategoricalColumn,
    ColumnSpec,
    Dataset,
    ScalarColumn,
    VectorColumn,
)
from gapminder_ml.errors import (
    AnalysisError,
    ColumnNotFoundError,
    ColumnTypeMismatchError,
    LengthMismatchError,
)


class TestTypedAccess:

    def test_get_scalar_returns_values(self, mixed_dataset):
        np.testing.assert_array_equal(mixed_dataset.get_scalar("year"), [1952, 1957, 1962, 1967])

    def test_get_vector_returns_rows(self, mixed_dataset):
        vec = mixed_dataset.get_vector("continent_encoded")
        assert vec.shape == (4, 2)
        np.testing.assert_array_equal(vec[1], [0, 1])

    def test_missing_column_raises(self, mixed_dataset):
        with pytest.raises(ColumnNotFoundError) as excinfo:
            mixed_dataset.get_scalar("gdp_percap")
        assert "gdp_percap" in str(excinfo.value)
        assert isinstance(excinfo.value, LookupError)
        assert isinstance(excinfo.value, AnalysisError)

    def test_scalar_as_vector_raises_type_mismatch(self, mixed_dataset):
        with pytest.raises(ColumnTypeMismatchError):
            mixed_dataset.get_vector("year")

    def test_vector_as_scalar_raises_type_mismatch(self, mixed_dataset):
        with pytest.raises(ColumnTypeMismatchError) as excinfo:
            mixed_dataset.get_scalar("continent_encoded")
        assert excinfo.value.expected == SCALAR
        assert excinfo.value.actual == VECTOR

    def test_categorical_access(self, mixed_dataset):
        assert list(mixed_dataset.get_categorical("continent")) == ["Asia", "Europe", "Asia", "Europe"]
        with pytest.raises(ColumnTypeMismatchError):
            mixed_dataset.get_scalar("continent")


class TestSchema:

    def test_schema_order_and_widths(self, mixed_dataset):
        assert mixed_dataset.schema() == [
            ColumnSpec("continent", CATEGORICAL, 1),
            ColumnSpec("year", SCALAR, 1),
            ColumnSpec("life_exp", SCALAR, 1),
            ColumnSpec("continent_encoded", VECTOR, 2),
        ]

    def test_row_count_must_match(self):
        with pytest.raises(LengthMismatchError):
            Dataset([ScalarColumn("a", [1, 2, 3]), ScalarColumn("b", [1, 2])])

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError):
            Dataset([ScalarColumn("a", [1, 2]), ScalarColumn("a", [3, 4])])

    def test_vector_labels_must_match_width(self):
        with pytest.raises(LengthMismatchError):
            VectorColumn("v", [[1, 0], [0, 1]], ("only-one",))


class TestImmutability:

    def test_values_are_read_only(self, mixed_dataset):
        values = mixed_dataset.get_scalar("year")
        with pytest.raises(ValueError):
            values[0] = 0.0

    def test_column_copies_input(self):
        source = np.array([1.0, 2.0])
        column = ScalarColumn("a", source)
        source[0] = 99.0
        assert column.values[0] == 1.0

    def test_with_columns_returns_new_dataset(self, mixed_dataset):
        extended = mixed_dataset.with_columns(ScalarColumn("pop", [1, 2, 3, 4]))
        assert "pop" in extended
        assert "pop" not in mixed_dataset

    def test_take_selects_rows_across_columns(self, mixed_dataset):
        subset = mixed_dataset.take([3, 0])
        assert subset.n_rows == 2
        np.testing.assert_array_equal(subset.get_scalar("year"), [1967, 1952])
        np.testing.assert_array_equal(subset.get_vector("continent_encoded"), [[0, 1], [1, 0]])
        assert list(subset.get_categorical("continent")) == ["Europe", "Asia"]

    def test_take_empty_keeps_vector_width(self, mixed_dataset):
        empty = mixed_dataset.take([])
        assert empty.n_rows == 0
        assert empty.get_vector("continent_encoded").shape == (0, 2)

    def test_to_frame_skips_vectors(self, mixed_dataset):
        frame = mixed_dataset.to_frame()
        assert list(frame.columns) == ["continent", "year", "life_exp"]


def test_categorical_values_are_strings():
    column = CategoricalColumn("c", ["a", 1])
    assert list(column.values) == ["a", "1"]
