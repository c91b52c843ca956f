"""
Train/test splitting, linear regression fitting and evaluation.

The regressor is fitted as an sklearn Pipeline (imputation, scaling, ridge
least squares) and then folded back into a plain weight vector and bias over
the raw feature space. The resulting `Model` is immutable and independent of
sklearn at prediction time.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from sklearn.impute import SimpleImputer
from sklearn.linear_model import LinearRegression, Ridge
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from sklearn.model_selection import train_test_split as sk_train_test_split
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from .columns import Dataset
from .errors import EmptyTestSetError, EmptyTrainSetError, SingularFeatureMatrixError


logger = logging.getLogger(__name__)

DEFAULT_ALPHA = 1e-3
DEGENERATE_R2 = 0.0


@dataclass(frozen=True)
class Model:
    weights: np.ndarray
    bias: float
    feature_column: str
    label_column: str
    feature_names: Tuple[str, ...] = ()
    # per-feature train means substituted for NaN inputs; empty means no imputation
    fill_values: np.ndarray = ()

    def __post_init__(self) -> None:
        weights = np.array(self.weights, dtype=float).reshape(-1)
        weights.setflags(write=False)
        fill_values = np.array(self.fill_values, dtype=float).reshape(-1)
        if fill_values.size not in (0, weights.size):
            raise ValueError(
                f"Expected {weights.size} fill values, got {fill_values.size}"
            )
        fill_values.setflags(write=False)
        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "bias", float(self.bias))
        object.__setattr__(self, "feature_names", tuple(self.feature_names))
        object.__setattr__(self, "fill_values", fill_values)

    @property
    def n_features(self) -> int:
        return self.weights.size

    def coefficients(self) -> dict[str, float]:
        """Weights keyed by feature label."""
        names = self.feature_names or tuple(f"x{i}" for i in range(self.n_features))
        return dict(zip(names, self.weights.tolist()))


@dataclass(frozen=True)
class RegressionMetrics:
    rmse: float
    mae: float
    r2: float
    n: int
    r2_degenerate: bool = False

    def as_dict(self) -> dict[str, float]:
        return {"RMSE": self.rmse, "MAE": self.mae, "R2": self.r2}


def build_regression_pipeline(alpha: float = DEFAULT_ALPHA) -> Pipeline:
    """
    Regression pipeline:
    - Mean imputation (all-NaN columns are kept so weights stay aligned)
    - Standard scaling
    - Ridge least squares, or ordinary least squares when `alpha == 0`
    """
    model = Ridge(alpha=alpha) if alpha > 0 else LinearRegression()
    return Pipeline(
        steps=[
            ("imputer", SimpleImputer(strategy="mean", keep_empty_features=True)),
            ("scaler", StandardScaler()),
            ("model", model),
        ]
    )


def train_test_split(
    dataset: Dataset, fraction: float = 0.2, seed: int = 42
) -> tuple[Dataset, Dataset]:
    """
    Partition rows into (train, test).

    The test partition holds `floor(fraction * n_rows)` rows, the remainder
    goes to train. The same seed always yields the same partition. Both
    partitions keep the original row order.
    """
    if not 0.0 <= fraction < 1.0:
        raise ValueError(f"fraction must be in [0, 1), got {fraction}")

    n_rows = dataset.n_rows
    # 0.29 * 100 == 28.999999999999996
    n_test = int(math.floor(fraction * n_rows + 1e-9))
    indices = np.arange(n_rows)

    if n_test == 0:
        logger.warning("Test partition is empty (%d rows, fraction %.3f)", n_rows, fraction)
        return dataset.take(indices), dataset.take(indices[:0])

    train_idx, test_idx = sk_train_test_split(indices, test_size=n_test, random_state=seed)
    return dataset.take(np.sort(train_idx)), dataset.take(np.sort(test_idx))


def _labelled_rows(
    dataset: Dataset, feature_column: str, label_column: str
) -> tuple[np.ndarray, np.ndarray]:
    X = dataset.get_vector(feature_column)
    y = dataset.get_scalar(label_column)
    mask = np.isfinite(y)
    if not mask.all():
        logger.info("Dropping %d rows with a missing %s", int((~mask).sum()), label_column)
    return X[mask], y[mask]


def fit(
    train: Dataset,
    feature_column: str = "features",
    label_column: str = "life_exp",
    alpha: float = DEFAULT_ALPHA,
) -> Model:
    """
    Fit a linear model `label ~ features . weights + bias` on `train`.

    Ridge regularisation (`alpha > 0`) tolerates collinear one-hot columns.
    With `alpha == 0` a rank-deficient design raises
    `SingularFeatureMatrixError`.
    """
    X, y = _labelled_rows(train, feature_column, label_column)
    if len(y) == 0:
        raise EmptyTrainSetError(
            f"No rows with a valid {label_column!r} label to fit on"
        )

    pipeline = build_regression_pipeline(alpha)
    if alpha == 0:
        # the rank check needs the scaled design the solver will see
        Z = pipeline[:-1].fit_transform(X)
        if Z.shape[1] and np.linalg.matrix_rank(Z) < Z.shape[1]:
            raise SingularFeatureMatrixError(
                f"Feature column {feature_column!r} is rank deficient "
                f"(rank {np.linalg.matrix_rank(Z)} < {Z.shape[1]}); use alpha > 0"
            )

    pipeline.fit(X, y)

    imputer: SimpleImputer = pipeline.named_steps["imputer"]
    scaler: StandardScaler = pipeline.named_steps["scaler"]
    regressor = pipeline.named_steps["model"]
    # all-NaN train columns are kept as zeros by the imputer
    fill_values = np.nan_to_num(np.asarray(imputer.statistics_, dtype=float), nan=0.0)
    weights = np.asarray(regressor.coef_, dtype=float) / scaler.scale_
    bias = float(regressor.intercept_) - float(np.dot(weights, scaler.mean_))

    if not (np.all(np.isfinite(weights)) and math.isfinite(bias)):
        raise SingularFeatureMatrixError(
            f"Least squares on {feature_column!r} produced non-finite weights"
        )

    feature_names = train.vector_column(feature_column).component_labels()
    logger.info("Fitted %d weights on %d rows (alpha=%g)", weights.size, len(y), alpha)
    return Model(weights, bias, feature_column, label_column, feature_names, fill_values)


def _apply(model: Model, X: np.ndarray, feature_column: str) -> np.ndarray:
    if X.shape[1] != model.n_features:
        raise ValueError(
            f"Model expects {model.n_features} features, "
            f"{feature_column!r} has {X.shape[1]}"
        )
    if model.fill_values.size:
        X = np.where(np.isnan(X), model.fill_values, X)
    return X @ model.weights + model.bias


def predict(model: Model, dataset: Dataset) -> np.ndarray:
    """
    Predicted labels for every row of `dataset`.

    Missing feature values are replaced by the means seen during `fit`.
    """
    return _apply(model, dataset.get_vector(model.feature_column), model.feature_column)


def _r2_with_policy(y_true: np.ndarray, y_pred: np.ndarray) -> tuple[float, bool]:
    """R² and whether it is degenerate (constant y_true, reported as DEGENERATE_R2)."""
    if np.all(y_true == y_true[0]):
        return DEGENERATE_R2, True
    return float(r2_score(y_true, y_pred)), False


def evaluate(
    model: Model,
    test: Dataset,
    feature_column: str | None = None,
    label_column: str | None = None,
) -> RegressionMetrics:
    """
    RMSE, MAE and R² of `model` on `test`.

    When every test label is identical R² is undefined: it is reported as
    `DEGENERATE_R2` with `r2_degenerate=True`.
    """
    feature_column = feature_column or model.feature_column
    label_column = label_column or model.label_column

    X, y_true = _labelled_rows(test, feature_column, label_column)
    if len(y_true) == 0:
        raise EmptyTestSetError(
            f"Test partition has no rows with a valid {label_column!r} label"
        )

    y_pred = _apply(model, X, feature_column)

    rmse = float(np.sqrt(mean_squared_error(y_true, y_pred)))
    mae = float(mean_absolute_error(y_true, y_pred))
    r2, degenerate = _r2_with_policy(y_true, y_pred)
    if degenerate:
        logger.warning("Constant %s in the test set; R2 reported as %s", label_column, DEGENERATE_R2)

    return RegressionMetrics(rmse=rmse, mae=mae, r2=r2, n=len(y_true), r2_degenerate=degenerate)
