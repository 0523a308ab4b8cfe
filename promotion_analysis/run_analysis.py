"""Run the full employee promotion analysis.

This launcher orchestrates:
1) Descriptive tables (frequencies, cross-tabulations, grouped summaries)
2) Hypothesis tests (chi-square, t-test, ANOVA + Tukey, logistic regression)
3) Report figures

Design goals
------------
- Robust to current working directory: you can run from repo root or from inside
  ``promotion_analysis``.
- Reproducible: synthetic demo data is seeded and all steps share one log file.

Usage
-----
From the repository root:

    python -m promotion_analysis.run_analysis --data-path path/to/employee_promotion.csv

Without the real dataset, generate a reproducible demo file first:

    python -m promotion_analysis.run_analysis --synthetic

The outputs are written to:
- ``promotion_analysis/outputs/tables``
- ``promotion_analysis/outputs/figures``
- ``promotion_analysis/outputs/logs/run_analysis.log``
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

PROJECT_ROOT = Path(__file__).resolve().parent
REPO_ROOT = PROJECT_ROOT.parent

# Needed when running from inside promotion_analysis/
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import argparse
import logging

import matplotlib

matplotlib.use("Agg")  # headless-safe

from promotion_analysis.src.data.check_data import dataset_status
from promotion_analysis.src.data.synthetic import write_synthetic_csv
from promotion_analysis.src.experiments import run_descriptives, run_inference, run_plots
from promotion_analysis.src.utils import configure_logging, set_global_seed
from promotion_analysis.src.utils.config_utils import DEFAULT_CONFIG_PATH, load_analysis_config

SYNTHETIC_FILENAME = "synthetic_employee_promotion.csv"


class StepFailed(RuntimeError):
    """Raised when a step fails and ``--keep-going`` is not set."""


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run all analysis steps (descriptives + inference + plots).")

    parser.add_argument("--data-path", type=Path, default=None, help="Employee CSV (default: from config)")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"YAML analysis config (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--output-dir", type=Path, default=None, help="Output root (default: from config)")

    parser.add_argument(
        "--synthetic",
        action="store_true",
        help="Generate a reproducible demo dataset under <output_dir>/data and analyse it",
    )
    parser.add_argument("--synthetic-rows", type=int, default=None, help="Rows in the demo dataset")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the demo dataset")

    parser.add_argument("--skip-descriptives", action="store_true", help="Skip descriptive tables")
    parser.add_argument("--skip-inference", action="store_true", help="Skip hypothesis tests")
    parser.add_argument("--skip-plots", action="store_true", help="Skip figure generation")

    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue even if a step fails (default: stop on first failure)",
    )

    return parser.parse_args(argv)


def _run_step(
    logger: logging.Logger,
    name: str,
    fn: Callable[[List[str]], None],
    step_argv: List[str],
    *,
    keep_going: bool,
) -> bool:
    logger.info("===== Running: %s =====", name)
    try:
        fn(step_argv)
        logger.info("✅ Completed: %s", name)
        return True
    except SystemExit as exc:
        logger.error("❌ %s exited with code %s", name, getattr(exc, "code", exc))
    except Exception as exc:  # pragma: no cover
        logger.exception("❌ %s failed: %s", name, exc)

    if keep_going:
        logger.warning("Continuing because --keep-going is set.")
        return False

    raise StepFailed(f"Step '{name}' failed")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    # User paths are relative to the caller's cwd; the defaults to the repo root.
    for name in ("data_path", "output_dir"):
        value = getattr(args, name)
        if value is not None:
            setattr(args, name, value.resolve())
    if args.config != DEFAULT_CONFIG_PATH:
        args.config = args.config.resolve()
    os.chdir(REPO_ROOT)

    cfg = load_analysis_config(
        args.config,
        data_path=args.data_path,
        output_dir=args.output_dir,
        synthetic_rows=args.synthetic_rows,
        synthetic_seed=args.seed,
    )
    logger = configure_logging(log_file=cfg.log_dir / "run_analysis.log")

    set_global_seed(cfg.synthetic_seed)

    data_path = cfg.data_path
    if args.synthetic:
        data_path = write_synthetic_csv(
            cfg.output_dir / "data" / SYNTHETIC_FILENAME,
            n_rows=cfg.synthetic_rows,
            seed=cfg.synthetic_seed,
        )

    exists, csv_path = dataset_status(Path(data_path))
    if not exists:
        logger.error("Dataset not found at %s", csv_path)
        logger.error("Pass --data-path to point to the employee CSV, or use --synthetic.")
        return 1
    logger.info("Using dataset at %s", csv_path)

    step_argv = [
        "--config",
        str(args.config),
        "--data-path",
        str(csv_path),
        "--output-dir",
        str(cfg.output_dir),
    ]

    steps = [
        ("Descriptive tables", run_descriptives, args.skip_descriptives),
        ("Hypothesis tests", run_inference, args.skip_inference),
        ("Figures", run_plots, args.skip_plots),
    ]

    ok = True
    try:
        for name, fn, skip in steps:
            if skip:
                logger.info("Skipping: %s", name)
                continue
            ok = _run_step(logger, name, fn, step_argv, keep_going=args.keep_going) and ok
    except StepFailed as exc:
        logger.error("%s; stopping.", exc)
        return 1

    logger.info("All done. Outputs under %s", cfg.output_dir)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
