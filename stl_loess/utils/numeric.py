"""Numeric helpers shared by the smoothers and the STL loop.

This module provides the running-mean low-pass filter, the linear gap filler
used between sparsely computed smoothing points, and the bisquare robustness
weights computed from residuals.
"""

from __future__ import annotations

import numpy as np


def interpolate_between(values: np.ndarray, start: int, stop: int) -> None:
    """Linearly fill ``values[start+1:stop]`` from ``values[start]`` to ``values[stop]``.

    Args:
        values: Array modified in place
        start: Index of the left anchor
        stop: Index of the right anchor
    """
    gap = stop - start
    if gap <= 1:
        return
    slope = (values[stop] - values[start]) / gap
    values[start + 1 : stop] = values[start] + slope * np.arange(1, gap)


def moving_average(data: np.ndarray, window: int) -> np.ndarray:
    """Running mean over a fixed window.

    The sum is updated incrementally, so the cost is linear in the length of
    ``data`` regardless of the window.

    Args:
        data: Input values
        window: Window length, 1 <= window <= len(data)

    Returns:
        Array of ``len(data) - window + 1`` means

    Example:
        >>> moving_average(np.array([1.0, 2.0, 3.0, 4.0]), 2)
        array([1.5, 2.5, 3.5])
    """
    data = np.asarray(data, dtype=float)
    size = len(data) - window + 1
    out = np.empty(size)

    w = float(window)
    total = data[:window].sum()
    out[0] = total / w
    for i in range(1, size):
        total += data[i + window - 1] - data[i - 1]
        out[i] = total / w
    return out


def robustness_weights(resid: np.ndarray) -> np.ndarray:
    """Bisquare robustness weights from residuals (Cleveland et al., 1990).

    ``mad6`` is six times the sum of the two order statistics bracketing the
    median absolute residual. Residuals within 0.1% of ``mad6`` get weight 1,
    residuals beyond 99.9% of it get weight 0, and the rest get
    ``(1 - (r/mad6)^2)^2``.

    Args:
        resid: Residuals of the current fit

    Returns:
        Weights in [0, 1], same length as ``resid``
    """
    a = np.abs(np.asarray(resid, dtype=float))
    n = len(a)
    ordered = np.sort(a)

    # lower and upper median positions
    med0 = (n + 1) // 2 - 1
    med1 = n - med0 - 1
    mad6 = 6.0 * (ordered[med0] + ordered[med1])

    ceil = 0.999 * mad6
    flor = 0.001 * mad6

    weights = np.zeros(n)
    weights[a <= flor] = 1.0
    mid = (a > flor) & (a <= ceil)
    h = a[mid] / mad6
    weights[mid] = (1.0 - h * h) ** 2
    return weights
