"""CLI utility to verify dataset availability and basic schema.

Run from the project root:

.. code-block:: bash

    python -m promotion_analysis.src.data.check_data --data-path path/to/employee_promotion.csv

The dataset is only read, never modified.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Tuple

from ..exceptions import AnalysisError
from .load import DEFAULT_DATA_DIR, DEFAULT_FILENAME, load_employee_data
from .preprocess import clean_data, dataset_overview, missing_value_report

DEFAULT_DATA_PATH = DEFAULT_DATA_DIR / DEFAULT_FILENAME


def dataset_status(data_path: Path = DEFAULT_DATA_PATH) -> Tuple[bool, Path]:
    """Return whether the employee CSV exists."""
    return data_path.is_file(), data_path


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check dataset placement and schema.")
    parser.add_argument(
        "--data-path",
        type=Path,
        default=DEFAULT_DATA_PATH,
        help=f"Path to the employee CSV (default: {DEFAULT_DATA_PATH})",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    exists, csv_path = dataset_status(args.data_path)
    if not exists:
        print(
            "❌ Dataset is missing.\n"
            "   Expected the employee promotion CSV at:\n"
            f"   {csv_path}\n"
            "   (or run the launcher with --synthetic to generate demo data)"
        )
        return 1

    print(f"✅ Found dataset at: {csv_path}")

    try:
        df = clean_data(load_employee_data(csv_path))
    except AnalysisError as exc:
        print(f"❌ Failed to load dataset: {exc}")
        return 1

    print(f"Rows: {df.shape[0]} | Columns: {df.shape[1]}")
    print(dataset_overview(df).to_string())
    print("\nMissing values:")
    print(missing_value_report(df, log=False).to_string())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
