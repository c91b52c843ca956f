"""
Analysis package for the Gapminder country-year dataset.

This package exposes reusable components for:
- Typed column storage (`gapminder_ml.columns`)
- CSV loading against an explicit schema (`gapminder_ml.data`)
- One-hot encoding and feature concatenation (`gapminder_ml.encoding`)
- Descriptive statistics and imputation (`gapminder_ml.statistics`)
- Correlation matrices over mixed scalar/vector columns (`gapminder_ml.correlation`)
- Train/test splitting, regression and metrics (`gapminder_ml.models`)
- Charts and console output (`gapminder_ml.report`)
- Configuration and artefact persistence (`gapminder_ml.config`, `gapminder_ml.utils`)
"""

from . import columns, config, correlation, data, encoding, errors, models, statistics, utils  # noqa: F401

__version__ = "0.1.0"
