"""
Run configuration for the Gapminder analysis.

Defaults live on `AnalysisConfig`; `AnalysisConfig.from_env()` applies
environment overrides and the CLI applies its flags on top of that.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path


# Project root is the parent of this `gapminder_ml` package directory
ROOT_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_PATH = ROOT_DIR / "dataset.csv"
DEFAULT_OUTPUT_DIR = ROOT_DIR / "reports"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class AnalysisConfig:
    data_path: Path = DEFAULT_DATA_PATH
    output_dir: Path = DEFAULT_OUTPUT_DIR
    test_fraction: float = 0.2
    seed: int = 42
    alpha: float = 1e-3
    categorical_columns: tuple[str, ...] = ("country", "continent")
    numeric_feature_columns: tuple[str, ...] = ("year", "pop", "gdp_percap")
    label_column: str = "life_exp"
    features_column: str = "features"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        object.__setattr__(self, "data_path", Path(self.data_path))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        if not 0.0 <= self.test_fraction < 1.0:
            raise ValueError(
                f"test_fraction must be in [0, 1), got {self.test_fraction}"
            )
        if self.alpha < 0:
            raise ValueError(f"alpha must be non-negative, got {self.alpha}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "AnalysisConfig":
        """Build a config from `GAPMINDER_*` / `LOG_LEVEL` environment variables."""
        env = os.environ if environ is None else environ
        base = cls()
        return cls(
            data_path=Path(env.get("GAPMINDER_DATA_PATH", base.data_path)),
            output_dir=Path(env.get("GAPMINDER_OUTPUT_DIR", base.output_dir)),
            test_fraction=float(env.get("GAPMINDER_TEST_FRACTION", base.test_fraction)),
            seed=int(env.get("GAPMINDER_SEED", base.seed)),
            alpha=float(env.get("GAPMINDER_ALPHA", base.alpha)),
            log_level=env.get("LOG_LEVEL", base.log_level).upper(),
        )

    def override(self, **changes) -> "AnalysisConfig":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI; unknown level names fall back to INFO."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


__all__ = [
    "ROOT_DIR",
    "DEFAULT_DATA_PATH",
    "DEFAULT_OUTPUT_DIR",
    "AnalysisConfig",
    "configure_logging",
]
