"""Argument parsing and I/O shared by the step runners."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import pandas as pd

from ..data.prepare import prepare_dataset
from ..exceptions import AnalysisError
from ..utils.config_utils import DEFAULT_CONFIG_PATH, AnalysisConfig, load_analysis_config


def build_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"YAML analysis config (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--data-path",
        type=Path,
        default=None,
        help="Employee CSV; overrides the config's data_path.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output root for tables/figures; overrides the config's output_dir.",
    )
    return parser


def resolve_config(args: argparse.Namespace, logger: logging.Logger) -> AnalysisConfig:
    cfg = load_analysis_config(
        args.config,
        logger,
        data_path=args.data_path,
        output_dir=args.output_dir,
    )
    cfg.table_dir.mkdir(parents=True, exist_ok=True)
    cfg.figure_dir.mkdir(parents=True, exist_ok=True)
    return cfg


def load_prepared_or_exit(cfg: AnalysisConfig, logger: logging.Logger) -> pd.DataFrame:
    """Load -> clean -> recode; log and exit(1) when the input is unusable."""
    try:
        return prepare_dataset(cfg.data_path)
    except AnalysisError as exc:
        logger.error("%s", exc)
        logger.error(
            "Run `python -m promotion_analysis.src.data.check_data --data-path %s` "
            "to verify the dataset, or use the launcher's --synthetic flag.",
            cfg.data_path,
        )
        sys.exit(1)


def save_table(table: pd.DataFrame, path: Path, logger: logging.Logger, *, index: bool = False) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=index)
    logger.info("Saved %s", path)
    return path


def save_json(payload: Any, path: Path, logger: logging.Logger) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Saved %s", path)
    return path


def parse_args(parser: argparse.ArgumentParser, argv: Optional[Sequence[str]]) -> argparse.Namespace:
    return parser.parse_args(list(argv) if argv is not None else None)


__all__ = [
    "build_parser",
    "resolve_config",
    "load_prepared_or_exit",
    "save_table",
    "save_json",
    "parse_args",
]
