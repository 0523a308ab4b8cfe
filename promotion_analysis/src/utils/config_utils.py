"""YAML-backed configuration for the analysis runners.

The YAML file has a single ``analysis`` block whose keys mirror the fields of
:class:`AnalysisConfig`; a flat file without the block is accepted too.
Unknown keys are ignored, and a missing or unreadable file yields the
defaults with a warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..analysis.inference import DEFAULT_LOGIT_PREDICTORS
from ..data.load import DEFAULT_DATA_DIR, DEFAULT_FILENAME

DEFAULT_CONFIG_PATH = Path("promotion_analysis/configs/analysis.yaml")
DEFAULT_OUTPUT_DIR = Path("promotion_analysis/outputs")

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Settings shared by the descriptive, inference and plotting steps."""

    data_path: Path = DEFAULT_DATA_DIR / DEFAULT_FILENAME
    output_dir: Path = DEFAULT_OUTPUT_DIR

    percent_digits: int = 1
    mean_digits: int = 2
    include_missing_groups: bool = False

    alpha: float = 0.05
    chi_square_correction: bool = True
    t_test_equal_var: bool = False

    logit_outcome: str = "is_promoted"
    logit_predictors: List[str] = field(default_factory=lambda: list(DEFAULT_LOGIT_PREDICTORS))
    logit_max_iter: int = 100

    synthetic_rows: int = 2000
    synthetic_seed: int = 42

    @property
    def table_dir(self) -> Path:
        return self.output_dir / "tables"

    @property
    def figure_dir(self) -> Path:
        return self.output_dir / "figures"

    @property
    def log_dir(self) -> Path:
        return self.output_dir / "logs"


def _as_bool(x: Any, default: bool = False) -> bool:
    if x is None:
        return default
    if isinstance(x, bool):
        return x
    if isinstance(x, (int, float)):
        return bool(x)
    if isinstance(x, str):
        return x.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return default


_CASTS = {
    "data_path": Path,
    "output_dir": Path,
    "percent_digits": int,
    "mean_digits": int,
    "alpha": float,
    "logit_outcome": str,
    "logit_max_iter": int,
    "synthetic_rows": int,
    "synthetic_seed": int,
}
_BOOL_KEYS = {"include_missing_groups", "chi_square_correction", "t_test_equal_var"}


def config_from_dict(values: Dict[str, Any]) -> AnalysisConfig:
    """Build an :class:`AnalysisConfig` from a plain mapping (unknown keys ignored)."""
    valid = {f.name for f in fields(AnalysisConfig)}
    kwargs: Dict[str, Any] = {}
    for key, value in values.items():
        if key not in valid or value is None:
            continue
        if key in _BOOL_KEYS:
            kwargs[key] = _as_bool(value)
        elif key == "logit_predictors":
            kwargs[key] = [str(v) for v in value]
        else:
            kwargs[key] = _CASTS[key](value)

    if not 0.0 < kwargs.get("alpha", 0.05) < 1.0:
        raise ValueError(f"alpha must lie in (0, 1); got {kwargs['alpha']}")
    return AnalysisConfig(**kwargs)


def load_analysis_config(
    config_path: Union[str, Path, None] = DEFAULT_CONFIG_PATH,
    log: Optional[logging.Logger] = None,
    **overrides: Any,
) -> AnalysisConfig:
    """Load :class:`AnalysisConfig` from YAML, then apply non-``None`` overrides."""
    log = log or logger
    cfg = AnalysisConfig()

    path = Path(config_path) if config_path is not None else None
    if path is None:
        pass
    elif not path.is_file():
        log.warning("Config file not found at %s; using AnalysisConfig defaults.", path)
    else:
        try:
            cfg_dict = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            if not isinstance(cfg_dict, dict):
                raise ValueError("top-level YAML value is not a mapping")
            block = cfg_dict.get("analysis", cfg_dict) or {}
            cfg = config_from_dict(block)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as exc:
            log.warning("Failed to read config %s (%s); using defaults.", path, exc)
            cfg = AnalysisConfig()

    updates = {k: v for k, v in overrides.items() if v is not None}
    if updates:
        cfg = replace(cfg, **updates)
    return cfg


__all__ = [
    "AnalysisConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_OUTPUT_DIR",
    "config_from_dict",
    "load_analysis_config",
]
