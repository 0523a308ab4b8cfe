"""Logging configuration for the analysis runners.

- Console logging on stderr, optional file logging under ``outputs/logs``.
- Re-configuring the same logger replaces its handlers instead of stacking them.
- Python warnings (e.g. pandas / statsmodels) are routed through logging.

Used by
-------
- ``promotion_analysis/run_analysis.py``
- ``promotion_analysis/src/experiments/*.py``
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"


def _resolve_log_path(log_file: Union[str, Path], logger_name: Optional[str]) -> Path:
    log_path = Path(log_file)
    if log_path.is_dir() or str(log_file).endswith(("/", "\\")):
        name = (logger_name or "root").replace("/", "_")
        log_path = log_path / f"{name}.log"
    return log_path


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    logger_name: Optional[str] = None,
    *,
    force: bool = True,
    capture_warnings: bool = True,
) -> logging.Logger:
    """Configure and return a logger.

    Parameters
    ----------
    level:
        Log level (default: INFO).
    log_file:
        Optional log file. A directory (existing, or a path ending in a
        separator) gets ``<logger_name or root>.log`` inside it.
    logger_name:
        Name of the logger to configure. ``None`` configures the root logger,
        which also covers the ``promotion_analysis.*`` module loggers.
    force:
        If True (default), replace existing handlers. If False and the logger
        already has handlers (e.g. set up by the launcher), keep them as-is.
    capture_warnings:
        If True (default), route Python warnings through logging.

    Returns
    -------
    logging.Logger
        Configured logger.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    if not force and logger.handlers:
        return logger

    if force:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    console_handler = logging.StreamHandler(stream=sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = _resolve_log_path(log_file, logger_name)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Named loggers stop at their own handlers; the root has nowhere to propagate.
    if logger_name is not None:
        logger.propagate = False

    if capture_warnings:
        logging.captureWarnings(True)

    return logger


__all__ = ["configure_logging", "DEFAULT_LOG_FORMAT"]
