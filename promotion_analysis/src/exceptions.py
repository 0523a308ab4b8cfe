"""Error taxonomy shared by the loader, cleaner and statistical procedures.

All errors are terminal for the stage that raises them. Missing values inside
records are *not* errors: they propagate as NA through derived labels and
aggregates.
"""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for every error raised by this package."""


class FileError(AnalysisError, OSError):
    """Input file is missing, not a regular file, or cannot be parsed."""


class SchemaError(AnalysisError, ValueError):
    """An expected column is absent or holds values of the wrong type."""


class InsufficientDataError(AnalysisError, ValueError):
    """A statistical procedure lacks enough valid (non-missing) observations."""


__all__ = ["AnalysisError", "FileError", "SchemaError", "InsufficientDataError"]
