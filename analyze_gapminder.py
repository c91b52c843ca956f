"""
Batch analysis script for the Gapminder country-year dataset.

This script:
- Loads the CSV (country, continent, year, life_exp, pop, gdp_percap)
- Prints descriptive statistics (counts, means, standard deviations)
- One-hot encodes country and continent and builds the feature column
- Computes the correlation matrix over the encoded and numeric columns
- Splits 80/20, fits a linear regression for life expectancy and prints
  RMSE, MAE and R²
- Writes distribution charts, the scatter plot and the correlation heatmap,
  plus `summary.json`, under the output directory

Run with:
    python analyze_gapminder.py --data dataset.csv --output-dir reports
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from gapminder_ml.config import AnalysisConfig, configure_logging
from gapminder_ml.correlation import correlation_matrix
from gapminder_ml.data import load_dataset
from gapminder_ml.encoding import encoded_name, fit_transform
from gapminder_ml.errors import AnalysisError
from gapminder_ml.models import evaluate, fit, train_test_split
from gapminder_ml.report import print_summary, save_charts
from gapminder_ml.statistics import clean_dataset, dataset_overview, describe
from gapminder_ml.utils import get_output_dir, save_json


logger = logging.getLogger("gapminder_ml")

SUMMARY_FILE = "summary.json"


def run_analysis(config: AnalysisConfig) -> dict[str, Any]:
    """Run the whole pipeline and write its artefacts. Returns every result."""
    dataset = load_dataset(config.data_path)

    # 1. Descriptive statistics
    print("Computing descriptive statistics...")
    overview = dataset_overview(dataset, config.numeric_feature_columns)
    summaries = {
        name: describe(dataset.scalar_column(name))
        for name in config.numeric_feature_columns + (config.label_column,)
    }

    # 2. Encoding (before the split, so train and test share one feature width)
    print("Encoding categorical columns...")
    cleaned = clean_dataset(dataset, config.numeric_feature_columns)
    expanded, encoding_maps = fit_transform(
        cleaned,
        config.categorical_columns,
        config.numeric_feature_columns,
        config.features_column,
    )

    # 3. Correlation
    print("Computing correlation matrix...")
    corr_columns = (
        [encoded_name(c) for c in config.categorical_columns]
        + list(config.numeric_feature_columns)
        + [config.label_column]
    )
    matrix = correlation_matrix(expanded, corr_columns)

    # 4. Regression
    print("Training regression model...")
    train, test = train_test_split(expanded, config.test_fraction, config.seed)
    model = fit(train, config.features_column, config.label_column, alpha=config.alpha)
    metrics = evaluate(model, test, config.features_column, config.label_column)

    # 5. Artefacts
    output_dir = get_output_dir(config.output_dir)
    charts = save_charts(cleaned, matrix, output_dir)
    save_json(
        {
            "overview": overview,
            "columns": {name: s.as_dict() for name, s in summaries.items()},
            "encodings": {name: list(m.categories) for name, m in encoding_maps.items()},
            "split": {"train_rows": train.n_rows, "test_rows": test.n_rows, "seed": config.seed},
            "metrics": metrics.as_dict(),
            "r2_degenerate": metrics.r2_degenerate,
            "model": {"bias": model.bias, "coefficients": model.coefficients()},
            "correlation": {
                "labels": list(matrix.labels),
                "values": matrix.values,
                "undefined_pairs": [list(p) for p in matrix.undefined_pairs],
            },
        },
        output_dir / SUMMARY_FILE,
    )

    return {
        "dataset": dataset,
        "expanded": expanded,
        "overview": overview,
        "summaries": summaries,
        "encoding_maps": encoding_maps,
        "correlation": matrix,
        "train": train,
        "test": test,
        "model": model,
        "metrics": metrics,
        "charts": charts,
        "output_dir": output_dir,
    }


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Exploratory statistics, correlation matrix and a life-expectancy "
            "regression over the Gapminder country-year CSV."
        ),
    )
    parser.add_argument("--data", type=Path, default=None, help="Input CSV (default: dataset.csv).")
    parser.add_argument(
        "--output-dir", type=Path, default=None, help="Directory for charts and summaries (default: reports)."
    )
    parser.add_argument("--test-fraction", type=float, default=None, help="Share of rows held out for testing (default: 0.2).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the split (default: 42).")
    parser.add_argument("--alpha", type=float, default=None, help="Ridge regularisation strength; 0 for plain least squares.")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO).")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the analysis and print its results."""
    args = parse_args(argv)
    try:
        config = AnalysisConfig.from_env().override(
            data_path=args.data,
            output_dir=args.output_dir,
            test_fraction=args.test_fraction,
            seed=args.seed,
            alpha=args.alpha,
            log_level=args.log_level.upper() if args.log_level else None,
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    configure_logging(config.log_level)

    try:
        results = run_analysis(config)
    except (AnalysisError, FileNotFoundError) as exc:
        logger.error("Analysis aborted: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print_summary("Dataset overview", results["overview"])
    print_summary("Regression metrics", results["metrics"].as_dict())
    if results["metrics"].r2_degenerate:
        print("(R2 is degenerate: every test label is identical)")

    print("\n=== Analysis complete ===")
    print(f"Charts and summary saved under: {results['output_dir'].resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
