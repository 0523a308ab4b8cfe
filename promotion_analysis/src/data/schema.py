"""Typed schema for the employee promotion dataset.

Generic operations (frequency tables, cross-tabs, hypothesis tests) look up
columns by name. Instead of accepting arbitrary strings, they resolve names
through :class:`EmployeeField`, a closed enumeration of the columns this
package knows about. :class:`EmployeeRecord` gives a named, typed view of one
row for code that works record-by-record.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from ..exceptions import SchemaError


class EmployeeField(str, Enum):
    """Column names accepted by table and test functions."""

    EMPLOYEE_ID = "employee_id"
    DEPARTMENT = "department"
    REGION = "region"
    EDUCATION = "education"
    GENDER = "gender"
    RECRUITMENT_CHANNEL = "recruitment_channel"
    NO_OF_TRAININGS = "no_of_trainings"
    AGE = "age"
    PREVIOUS_YEAR_RATING = "previous_year_rating"
    LENGTH_OF_SERVICE = "length_of_service"
    AWARDS_WON = "awards_won"
    AVG_TRAINING_SCORE = "avg_training_score"
    IS_PROMOTED = "is_promoted"
    # derived labels
    IS_PROMOTED_LABEL = "is_promoted_label"
    AWARDS_WON_LABEL = "awards_won_label"
    PERFORMANCE_CAT = "performance_cat"
    AGE_GROUP = "age_group"

    def __str__(self) -> str:
        return self.value


FieldLike = Union[EmployeeField, str]

IDENTIFIER_COLUMN = EmployeeField.EMPLOYEE_ID.value

REQUIRED_COLUMNS: List[str] = [
    EmployeeField.DEPARTMENT.value,
    EmployeeField.GENDER.value,
    EmployeeField.EDUCATION.value,
    EmployeeField.AGE.value,
    EmployeeField.LENGTH_OF_SERVICE.value,
    EmployeeField.NO_OF_TRAININGS.value,
    EmployeeField.AVG_TRAINING_SCORE.value,
    EmployeeField.PREVIOUS_YEAR_RATING.value,
    EmployeeField.AWARDS_WON.value,
    EmployeeField.IS_PROMOTED.value,
]

CATEGORICAL_FIELDS: List[str] = [
    EmployeeField.DEPARTMENT.value,
    EmployeeField.REGION.value,
    EmployeeField.EDUCATION.value,
    EmployeeField.GENDER.value,
    EmployeeField.RECRUITMENT_CHANNEL.value,
]

# Stored as pandas nullable integers after cleaning.
INTEGER_FIELDS: List[str] = [
    EmployeeField.NO_OF_TRAININGS.value,
    EmployeeField.AGE.value,
    EmployeeField.PREVIOUS_YEAR_RATING.value,
    EmployeeField.LENGTH_OF_SERVICE.value,
    EmployeeField.AWARDS_WON.value,
    EmployeeField.IS_PROMOTED.value,
]

FLOAT_FIELDS: List[str] = [EmployeeField.AVG_TRAINING_SCORE.value]

NUMERIC_FIELDS: List[str] = INTEGER_FIELDS + FLOAT_FIELDS

BINARY_FIELDS: List[str] = [
    EmployeeField.AWARDS_WON.value,
    EmployeeField.IS_PROMOTED.value,
]

DERIVED_FIELDS: List[str] = [
    EmployeeField.IS_PROMOTED_LABEL.value,
    EmployeeField.AWARDS_WON_LABEL.value,
    EmployeeField.PERFORMANCE_CAT.value,
    EmployeeField.AGE_GROUP.value,
]


def resolve_field(field: FieldLike) -> str:
    """Return the column name for ``field`` or raise :class:`SchemaError`."""
    if isinstance(field, EmployeeField):
        return field.value
    try:
        return EmployeeField(str(field)).value
    except ValueError:
        allowed = ", ".join(f.value for f in EmployeeField)
        raise SchemaError(f"Unknown field '{field}'. Allowed fields: {allowed}") from None


def resolve_fields(fields: Union[FieldLike, Sequence[FieldLike]]) -> List[str]:
    if isinstance(fields, (str, EmployeeField)):
        return [resolve_field(fields)]
    return [resolve_field(f) for f in fields]


def require_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    """Raise :class:`SchemaError` listing every column missing from ``df``."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaError(
            f"Missing required column(s): {missing}. "
            f"Available columns: {list(df.columns)}"
        )


def _is_missing(value: Any) -> bool:
    if value is None or value is pd.NA:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def _as_int(value: Any) -> Optional[int]:
    return None if _is_missing(value) else int(value)


def _as_float(value: Any) -> Optional[float]:
    return None if _is_missing(value) else float(value)


def _as_str(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    text = str(value)
    return text if text.strip() else None


def _as_bool(value: Any) -> Optional[bool]:
    if _is_missing(value):
        return None
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "t", "yes", "y"}
    return bool(int(value))


@dataclass(frozen=True)
class EmployeeRecord:
    """One employee row with named, typed fields."""

    department: Optional[str]
    gender: Optional[str]
    education: Optional[str]
    age: Optional[int]
    length_of_service: Optional[int]
    no_of_trainings: Optional[int]
    avg_training_score: Optional[float]
    previous_year_rating: Optional[int]
    awards_won: Optional[bool]
    is_promoted: Optional[bool]
    employee_id: Optional[int] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "EmployeeRecord":
        """Build a record from a cleaned row (e.g. ``DataFrame.iterrows``)."""
        return cls(
            department=_as_str(row.get("department")),
            gender=_as_str(row.get("gender")),
            education=_as_str(row.get("education")),
            age=_as_int(row.get("age")),
            length_of_service=_as_int(row.get("length_of_service")),
            no_of_trainings=_as_int(row.get("no_of_trainings")),
            avg_training_score=_as_float(row.get("avg_training_score")),
            previous_year_rating=_as_int(row.get("previous_year_rating")),
            awards_won=_as_bool(row.get("awards_won")),
            is_promoted=_as_bool(row.get("is_promoted")),
            employee_id=_as_int(row.get("employee_id")),
        )

    @property
    def performance_cat(self) -> Optional[str]:
        from .features import performance_category

        return performance_category(self.previous_year_rating)

    @property
    def is_promoted_label(self) -> Optional[str]:
        from .features import PROMOTION_LABELS, binary_label

        return binary_label(self.is_promoted, PROMOTION_LABELS)

    @property
    def awards_won_label(self) -> Optional[str]:
        from .features import AWARD_LABELS, binary_label

        return binary_label(self.awards_won, AWARD_LABELS)

    @property
    def age_group(self) -> Optional[str]:
        from .features import age_group

        return age_group(self.age)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def records_from_frame(df: pd.DataFrame) -> List[EmployeeRecord]:
    """Convert a cleaned dataset into a list of :class:`EmployeeRecord`."""
    require_columns(df, REQUIRED_COLUMNS)
    return [EmployeeRecord.from_mapping(row) for row in df.to_dict(orient="records")]


def records_to_frame(records: Iterable[EmployeeRecord]) -> pd.DataFrame:
    """Inverse of :func:`records_from_frame` (numeric fields as nullable dtypes)."""
    rows = [r.to_dict() for r in records]
    columns = [IDENTIFIER_COLUMN] + REQUIRED_COLUMNS
    df = pd.DataFrame(rows, columns=columns)
    for col in INTEGER_FIELDS + [IDENTIFIER_COLUMN]:
        df[col] = pd.array([_as_int(v) for v in df[col]], dtype="Int64")
    df["avg_training_score"] = pd.to_numeric(df["avg_training_score"], errors="coerce")
    return df


__all__ = [
    "EmployeeField",
    "FieldLike",
    "EmployeeRecord",
    "IDENTIFIER_COLUMN",
    "REQUIRED_COLUMNS",
    "CATEGORICAL_FIELDS",
    "INTEGER_FIELDS",
    "FLOAT_FIELDS",
    "NUMERIC_FIELDS",
    "BINARY_FIELDS",
    "DERIVED_FIELDS",
    "resolve_field",
    "resolve_fields",
    "require_columns",
    "records_from_frame",
    "records_to_frame",
]
