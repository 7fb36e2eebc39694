"""Shared fixtures for the stl_loess test suite."""

from __future__ import annotations

import numpy as np
import pytest

# Series used by the original LOESS examples (4 cycles of 5)
EXAMPLE_SERIES = np.array([
    5, 6.0, 2.0, 4.5, 5,
    5, 6.5, 3.5, 4.0, 5,
    5, 5.5, 3.5, 5.0, 5,
    5, 6.5, 2.5, 4.5, 5,
])

PATTERN = np.array([1.0, 3.0, -2.0, 0.5])


@pytest.fixture
def example_series() -> np.ndarray:
    return EXAMPLE_SERIES.copy()


@pytest.fixture
def pattern() -> np.ndarray:
    return PATTERN.copy()


@pytest.fixture
def periodic_with_trend(pattern) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Noiseless series: linear trend plus a period-4 pattern, 12 cycles.

    Returns:
        Tuple of (data, true_trend, true_seasonal) where the seasonal part
        has zero mean over a cycle
    """
    n = 48
    t = np.arange(n, dtype=float)
    seasonal = np.tile(pattern - pattern.mean(), n // len(pattern))
    trend = 10.0 + 0.5 * t + pattern.mean()
    return trend + seasonal, trend, seasonal


@pytest.fixture
def noisy_monthly() -> np.ndarray:
    """Ten years of monthly data with trend, yearly cycle and noise."""
    rng = np.random.default_rng(42)
    t = np.arange(120, dtype=float)
    return 50.0 + 0.2 * t + 5.0 * np.sin(2 * np.pi * t / 12) + rng.normal(0, 0.3, len(t))
