"""Source package for the employee promotion analysis.

Package layout
--------------
- data: loading, cleaning, recoding, synthetic demo data
- analysis: summary tables and hypothesis tests
- visualization: report figures and console rendering
- experiments: runnable steps (descriptives / inference / plots)
- utils: logging, seeds, configuration

This ``__init__`` stays lightweight so importing it does not pull in
statsmodels or matplotlib.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "data",
    "analysis",
    "visualization",
    "experiments",
    "utils",
    "exceptions",
]
