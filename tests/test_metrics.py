"""Tests for decomposition quality metrics."""

from __future__ import annotations

import numpy as np
import pytest

from stl_loess.stl import decompose
from stl_loess.utils.metrics import DecompositionMetrics


def test_strength_bounds():
    rng = np.random.default_rng(0)
    resid = rng.normal(size=200)
    assert DecompositionMetrics.strength_of_trend(np.zeros(200), resid) == pytest.approx(0.0)
    assert DecompositionMetrics.strength_of_trend(np.linspace(0, 100, 200), resid) > 0.99


def test_strength_of_constant_is_zero():
    assert DecompositionMetrics.strength_of_seasonality(np.ones(10), np.zeros(10)) == 0.0


def test_strength_is_clipped_at_zero():
    # anti-correlated component shrinks var(S + R) below var(R)
    resid = np.array([1.0, -1.0, 1.0, -1.0])
    seasonal = -0.9 * resid
    assert DecompositionMetrics.strength_of_seasonality(seasonal, resid) == 0.0


def test_summary(noisy_monthly):
    result = decompose(noisy_monthly, 12, 35)
    summary = DecompositionMetrics.summary(result)

    assert set(summary) == {'trend_strength', 'seasonal_strength', 'resid_std', 'n_samples'}
    assert summary['n_samples'] == len(noisy_monthly)
    assert summary['trend_strength'] > 0.9
    assert summary['seasonal_strength'] > 0.9
    assert DecompositionMetrics.reconstruction_error(result) < 1e-10
