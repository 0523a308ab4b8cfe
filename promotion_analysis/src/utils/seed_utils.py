"""Random seed helpers for the synthetic dataset generator.

Only the demo data in :mod:`promotion_analysis.src.data.synthetic` is random;
every analysis step is deterministic. Seeding keeps generated files identical
across runs so tables and figures can be compared.
"""

from __future__ import annotations

import os
import random
from typing import Optional

import numpy as np


def set_global_seed(seed: int = 42) -> None:
    """Seed Python's ``random`` and NumPy's legacy global RNG."""
    os.environ["PYTHONHASHSEED"] = str(int(seed))
    random.seed(int(seed))
    np.random.seed(int(seed))


def reproducible_numpy_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Return a dedicated NumPy Generator."""
    return np.random.default_rng(seed)


__all__ = ["set_global_seed", "reproducible_numpy_rng"]
