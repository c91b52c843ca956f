"""
Error taxonomy for the Gapminder analysis pipeline.

Every error is fatal to the current analysis run. Each class also derives from
the closest built-in exception so callers can catch either.
"""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for all pipeline errors."""


class ColumnNotFoundError(AnalysisError, LookupError):
    def __init__(self, name: str, available: tuple[str, ...] = ()) -> None:
        self.name = name
        self.available = tuple(available)
        msg = f"Column {name!r} not found"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)


class ColumnTypeMismatchError(AnalysisError, TypeError):
    def __init__(self, name: str, expected: str, actual: str) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Column {name!r} is a {actual} column, expected a {expected} column"
        )


class UnknownCategoryError(AnalysisError, LookupError):
    def __init__(self, column: str, value: str) -> None:
        self.column = column
        self.value = value
        super().__init__(f"Unknown category {value!r} for column {column!r}")


class LengthMismatchError(AnalysisError, ValueError):
    """Two series (or a column and its dataset) disagree on length."""


class SingularFeatureMatrixError(AnalysisError, ValueError):
    """The feature matrix cannot produce a finite least-squares solution."""


class EmptyTrainSetError(AnalysisError, ValueError):
    """No labelled rows are available to fit the model."""


class EmptyTestSetError(AnalysisError, ValueError):
    """No labelled rows are available to evaluate the model."""


__all__ = [
    "AnalysisError",
    "ColumnNotFoundError",
    "ColumnTypeMismatchError",
    "UnknownCategoryError",
    "LengthMismatchError",
    "SingularFeatureMatrixError",
    "EmptyTrainSetError",
    "EmptyTestSetError",
]
