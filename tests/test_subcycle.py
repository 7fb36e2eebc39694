"""Tests for the subcycle (per-phase) seasonal smoother."""

from __future__ import annotations

import numpy as np
import pytest

from stl_loess.config import SmootherConfig
from stl_loess.errors import ConfigMismatchError, InsufficientDataError
from stl_loess.subcycle import SubcycleSmoother

SEASONAL = SmootherConfig(width=7, jump=1)


@pytest.mark.parametrize("size", [48, 50, 51])
def test_phase_lengths(size):
    smoother = SubcycleSmoother(SEASONAL, size, 4)
    lengths = [smoother.phase_length(p) for p in range(4)]
    assert sum(lengths) == size
    assert max(lengths) - min(lengths) <= 1
    assert smoother.extended_size == size + 8


@pytest.mark.parametrize("size", [48, 50, 51])
def test_constant_phases_extend_pattern(pattern, size):
    x = np.resize(pattern, size)
    smoother = SubcycleSmoother(SEASONAL, size, 4)
    extended = smoother.smooth(x)

    assert len(extended) == size + 8
    # one padding cycle at each end keeps the phase alignment
    expected = np.resize(pattern, size + 8)
    np.testing.assert_allclose(extended, expected, atol=1e-9)


def test_linear_phases_are_extrapolated():
    size, p = 40, 5
    t = np.arange(size, dtype=float)
    x = 2.0 * t
    extended = SubcycleSmoother(SmootherConfig(width=5, jump=1), size, p).smooth(x)
    # extended index k is time k - p
    np.testing.assert_allclose(extended, 2.0 * (np.arange(size + 2 * p) - p), atol=1e-8)


def test_weights_exclude_outlier(pattern):
    size = 48
    x = np.resize(pattern, size)
    x[21] += 100.0
    weights = np.ones(size)
    weights[21] = 0.0

    smoother = SubcycleSmoother(SEASONAL, size, 4)
    unweighted = smoother.smooth(x).copy()
    weighted = smoother.smooth(x, weights)

    k = 21 + 4
    assert weighted[k] == pytest.approx(pattern[21 % 4], abs=1e-9)
    assert abs(unweighted[k] - pattern[21 % 4]) > 1.0


def test_smooth_into_buffer(pattern):
    size = 24
    out = np.zeros(size + 8)
    result = SubcycleSmoother(SEASONAL, size, 4).smooth(np.resize(pattern, size), out=out)
    assert result is out


def test_wrong_input_length():
    smoother = SubcycleSmoother(SEASONAL, 24, 4)
    with pytest.raises(ConfigMismatchError):
        smoother.smooth(np.zeros(20))
    with pytest.raises(ConfigMismatchError):
        smoother.smooth(np.zeros(24), np.ones(10))
    with pytest.raises(ConfigMismatchError):
        smoother.smooth(np.zeros(24), out=np.zeros(24))


def test_series_shorter_than_cycle():
    with pytest.raises(InsufficientDataError):
        SubcycleSmoother(SEASONAL, 3, 4)


def test_zero_weight_phase_falls_back_to_nearest_value():
    size, p = 12, 3
    x = np.arange(size, dtype=float)
    weights = np.ones(size)
    weights[0::p] = 0.0

    extended = SubcycleSmoother(SmootherConfig(width=3, jump=1), size, p).smooth(x, weights)

    # phase 0 keeps its raw values and repeats them at both ends
    phase = extended[0::p]
    np.testing.assert_array_equal(phase, [0.0, 0.0, 3.0, 6.0, 9.0, 9.0])
    assert extended[0] == extended[p]
    assert phase[-1] == phase[-2]
