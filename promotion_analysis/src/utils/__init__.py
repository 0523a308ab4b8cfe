"""Project-wide utilities (logging, seeds).

Kept free of imports from the data / analysis packages so that any of them
can use it. The YAML configuration lives in :mod:`.config_utils` and is
imported from there directly.
"""

from __future__ import annotations

from .logging_utils import DEFAULT_LOG_FORMAT, configure_logging
from .seed_utils import reproducible_numpy_rng, set_global_seed

__all__ = [
    "configure_logging",
    "DEFAULT_LOG_FORMAT",
    "set_global_seed",
    "reproducible_numpy_rng",
]
