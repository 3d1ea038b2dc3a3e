from __future__ import annotations

"""Configuration loading and validation for EraQuiz.

This module loads YAML configuration, applies defaults, and validates
that enumerations and numeric settings are sane for the CLI.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml


ALLOWED_STORAGE_BACKENDS = {"memory", "parquet"}


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(2)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        cfg = _load_yaml(Path(path))
    else:
        default_path = Path(__file__).with_name("defaults.yml")
        cfg = _load_yaml(default_path)
    return cfg


def _positive_int(section: Dict[str, Any], key: str, default: int) -> None:
    try:
        value = int(section.get(key, default))
    except (TypeError, ValueError):
        value = default
    if value <= 0:
        print(f"WARNING: {key} must be > 0, using {default}.")
        value = default
    section[key] = value


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    for section in ("quiz", "estimator", "candidates", "storage"):
        # an empty YAML key loads as None
        cfg[section] = cfg.get(section) or {}
    cfg.setdefault("explain", False)

    quiz = cfg["quiz"]
    est = cfg["estimator"]
    cands = cfg["candidates"]
    storage = cfg["storage"]

    quiz.setdefault("figures_per_session", 40)
    quiz.setdefault("min_figures", 5)

    est.setdefault("earliest_hint_year", 1920)
    est.setdefault("floor_year", 1950)
    est.setdefault("padding_years", 3)
    est.setdefault("min_span_years", 5)

    cands.setdefault("path", "./data/popular_people.json")
    cands.setdefault("image_base_url", "https://image.tmdb.org/t/p/w500")

    storage.setdefault("backend", "parquet")
    storage.setdefault("data_dir", "./.eraquiz/sessions")

    _positive_int(quiz, "figures_per_session", 40)
    _positive_int(quiz, "min_figures", 5)
    _positive_int(est, "min_span_years", 5)

    if int(quiz["figures_per_session"]) < int(quiz["min_figures"]):
        print(
            f"WARNING: figures_per_session ({quiz['figures_per_session']}) is below "
            f"min_figures ({quiz['min_figures']}); raising it."
        )
        quiz["figures_per_session"] = int(quiz["min_figures"])

    for key in ("earliest_hint_year", "floor_year", "padding_years"):
        est[key] = int(est[key])

    backend = storage.get("backend")
    if backend not in ALLOWED_STORAGE_BACKENDS:
        print(f"WARNING: Unsupported storage backend '{backend}', using 'parquet'.")
        storage["backend"] = "parquet"

    cfg["explain"] = bool(cfg.get("explain", False))
    return cfg
