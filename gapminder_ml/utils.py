"""
Utility functions for the output directory and the JSON run summary.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np

from .config import DEFAULT_OUTPUT_DIR


def get_output_dir(path: Path | str | None = None) -> Path:
    """Return (and create) the directory charts and summaries are written to."""
    output_dir = Path(path) if path is not None else DEFAULT_OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def _to_builtin(obj: Any) -> Any:
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def save_json(data: Any, path: Path | str) -> None:
    """Save a Python object as JSON (UTF-8, pretty-printed); numpy values become builtins."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=_to_builtin)
