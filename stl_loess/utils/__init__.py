"""Utility functions for stl_loess."""

from __future__ import annotations

from stl_loess.utils.data import validate_input, validate_series
from stl_loess.utils.metrics import DecompositionMetrics
from stl_loess.utils.numeric import interpolate_between, moving_average, robustness_weights

__all__ = [
    # Data utilities
    "validate_input",
    "validate_series",
    # Numeric helpers
    "interpolate_between",
    "moving_average",
    "robustness_weights",
    # Metrics
    "DecompositionMetrics",
]
