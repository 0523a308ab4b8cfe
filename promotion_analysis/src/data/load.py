"""Data loading for the employee promotion dataset.

The Kaggle *HR Analytics: Employee Promotion* CSV ships with a few untidy
headers (``awards_won?``, ``KPIs_met >80%``). The loader does not rename
anything; it only checks that every required column is present *after* name
normalization, so the raw file is accepted as-is and
:func:`~promotion_analysis.src.data.preprocess.clean_data` performs the rename.

Errors
------
- :class:`~promotion_analysis.src.exceptions.FileError` when the path is
  missing, not a file, undecodable or not parseable as a delimited table.
- :class:`~promotion_analysis.src.exceptions.SchemaError` when a required column
  is absent or a numeric field holds text.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import pandas as pd
from pandas.errors import EmptyDataError, ParserError

from ..exceptions import FileError, SchemaError
from .preprocess import clean_column_name
from .schema import NUMERIC_FIELDS, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path("promotion_analysis/data/raw")
DEFAULT_FILENAME = "employee_promotion.csv"


def _validate_schema(df: pd.DataFrame, required_columns: Sequence[str], source: Path) -> None:
    normalized = {clean_column_name(c): c for c in df.columns}

    missing = [c for c in required_columns if c not in normalized]
    if missing:
        raise SchemaError(
            f"{source} is missing required column(s) {missing}. "
            f"Found columns: {list(df.columns)}"
        )

    for col in NUMERIC_FIELDS:
        raw_col = normalized.get(col)
        if raw_col is None:
            continue
        s = df[raw_col]
        if pd.api.types.is_numeric_dtype(s) or pd.api.types.is_bool_dtype(s):
            continue
        # text columns: allow blanks, reject anything non-numeric
        stripped = s.astype("string").str.strip()
        present = s.notna() & (stripped != "")
        coerced = pd.to_numeric(stripped.where(present), errors="coerce")
        bad = present & coerced.isna()
        if bad.any():
            examples = s[bad].astype(str).unique()[:3].tolist()
            raise SchemaError(
                f"Column '{raw_col}' in {source} should be numeric but holds {examples}"
            )


def load_employee_data(
    path: Union[str, Path, None] = None,
    *,
    data_dir: Path = DEFAULT_DATA_DIR,
    filename: str = DEFAULT_FILENAME,
    required_columns: Optional[Sequence[str]] = None,
    sep: str = ",",
) -> pd.DataFrame:
    """Read the employee CSV into a DataFrame.

    Parameters
    ----------
    path:
        Explicit file path. When omitted, ``data_dir / filename`` is used.
    required_columns:
        Normalized column names that must be present (default:
        :data:`~promotion_analysis.src.data.schema.REQUIRED_COLUMNS`).
    sep:
        Field delimiter.
    """
    csv_path = Path(path) if path is not None else data_dir / filename
    required = list(REQUIRED_COLUMNS if required_columns is None else required_columns)

    if not csv_path.exists():
        raise FileError(f"Expected dataset at {csv_path}, but the path does not exist.")
    if not csv_path.is_file():
        raise FileError(f"{csv_path} is not a regular file.")

    try:
        df = pd.read_csv(csv_path, sep=sep)
    except EmptyDataError as exc:
        raise FileError(f"{csv_path} is empty.") from exc
    except (ParserError, UnicodeDecodeError) as exc:
        raise FileError(f"Failed to parse {csv_path}: {exc}") from exc
    except OSError as exc:
        raise FileError(f"Could not read {csv_path}: {exc}") from exc

    _validate_schema(df, required, csv_path)

    logger.info("Loaded %s: %d rows x %d columns", csv_path, df.shape[0], df.shape[1])
    return df


__all__ = ["load_employee_data", "DEFAULT_DATA_DIR", "DEFAULT_FILENAME"]
