"""Tests for the moving average, interpolation and robustness weights."""

from __future__ import annotations

import numpy as np
import pytest

from stl_loess.utils.numeric import interpolate_between, moving_average, robustness_weights


def test_moving_average_small():
    np.testing.assert_allclose(moving_average(np.array([1.0, 2.0, 3.0, 4.0]), 2), [1.5, 2.5, 3.5])


@pytest.mark.parametrize("window", [1, 3, 12, 50])
def test_moving_average_matches_convolution(window):
    rng = np.random.default_rng(window)
    data = rng.normal(size=50)
    expected = np.convolve(data, np.ones(window) / window, mode="valid")
    result = moving_average(data, window)
    assert len(result) == len(data) - window + 1
    np.testing.assert_allclose(result, expected, atol=1e-12)


def test_triple_moving_average_restores_length():
    n, p = 30, 6
    extended = np.arange(n + 2 * p, dtype=float)
    passes = moving_average(moving_average(moving_average(extended, p), p), 3)
    assert len(passes) == n


def test_interpolate_between_fills_gap():
    values = np.array([0.0, -1.0, -1.0, -1.0, 8.0])
    interpolate_between(values, 0, 4)
    np.testing.assert_allclose(values, [0.0, 2.0, 4.0, 6.0, 8.0])


def test_interpolate_between_adjacent_is_noop():
    values = np.array([1.0, 5.0])
    interpolate_between(values, 0, 1)
    np.testing.assert_array_equal(values, [1.0, 5.0])


# =============================================================================
# Robustness weights
# =============================================================================


def test_robustness_weights_thresholds():
    resid = np.array([0.0, 0.0001, -1.0, 2.0, -3.0, 100.0])
    # |r| sorted: 0, 0.0001, 1, 2, 3, 100 -> mad6 = 6 * (1 + 2) = 18
    weights = robustness_weights(resid)
    assert weights[0] == 1.0
    assert weights[1] == 1.0
    assert weights[2] == pytest.approx((1 - (1 / 18) ** 2) ** 2)
    assert weights[5] == 0.0


def test_robustness_weights_monotone_and_bounded():
    rng = np.random.default_rng(0)
    resid = rng.normal(size=101)
    weights = robustness_weights(resid)

    order = np.argsort(np.abs(resid))
    assert np.all(np.diff(weights[order]) <= 0)

    a = np.abs(resid)
    ordered = np.sort(a)
    mad6 = 6 * (ordered[50] + ordered[50])
    mid = (a > 0.001 * mad6) & (a <= 0.999 * mad6)
    assert np.all((weights[mid] > 0) & (weights[mid] < 1))
    assert np.all(weights[a <= 0.001 * mad6] == 1.0)
    assert np.all(weights[a > 0.999 * mad6] == 0.0)


def test_robustness_weights_odd_length_uses_median():
    resid = np.array([1.0, 2.0, 3.0])
    weights = robustness_weights(resid)
    # mad6 = 6 * (2 + 2) = 24
    np.testing.assert_allclose(weights, (1 - (np.array([1, 2, 3]) / 24) ** 2) ** 2)


def test_robustness_weights_perfect_fit():
    weights = robustness_weights(np.zeros(8))
    np.testing.assert_array_equal(weights, np.ones(8))
