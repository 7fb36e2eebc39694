"""
Local Weighted Regression (LOESS)

The smoothing primitive used by every stage of the decomposition. A regression
at abscissa ``x`` over the inclusive index window ``[left, right]`` is a
weighted sum of the window's values: tricube neighbourhood weights are
computed, optionally multiplied by external (robustness) weights, normalised,
and then corrected by a regression kernel so the sum reproduces a local line
(or parabola) rather than a local mean.

Classes:
    Kernel: Closed set of weight-update strategies (linear, quadratic)
    RegressionState: Reusable weight workspace bound to one series

Functions:
    local_weights: Tricube neighbourhood weights for one window
    regress: Local regression estimate at one abscissa
    smooth: Smooth a whole series (allocates its own workspace)
    smooth_with_state: Smooth a whole series with a caller-owned workspace
"""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from stl_loess.errors import (
    ConfigMismatchError,
    DegenerateBandwidthError,
    RegressionError,
    ZeroTotalWeightError,
)
from stl_loess.utils.numeric import interpolate_between

logger = logging.getLogger(__name__)


# =============================================================================
# Regression workspace
# =============================================================================


class RegressionState:
    """Weight workspace for repeated regressions over one series.

    The weight vector is reused by every call; only the entries of the most
    recently computed window are meaningful.

    Attributes:
        width: Smoothing width the workspace was built for
        x: Source series (held by reference, not copied)
        w: Weight vector, same length as ``x``
        external: Optional robustness weights, same length as ``x``
    """

    def __init__(self, width: int, x: np.ndarray, external: np.ndarray | None = None):
        self.width = int(width)
        self.x = np.asarray(x, dtype=float)
        self.w = np.zeros(len(self.x))
        self.external = None
        if external is not None:
            self.external = np.asarray(external, dtype=float)
            if len(self.external) != len(self.x):
                raise ConfigMismatchError(
                    f"External weights have {len(self.external)} elements, "
                    f"series has {len(self.x)}"
                )

    def __len__(self) -> int:
        return len(self.x)

    def window_weights(self, left: int, right: int) -> np.ndarray:
        """View of the weights of the window ``[left, right]``."""
        return self.w[left : right + 1]


def local_weights(state: RegressionState, x: float, left: int, right: int) -> None:
    """Compute normalised tricube weights for the window ``[left, right]``.

    Distances within 1e-5 of the bandwidth from ``x`` get full weight and
    distances beyond 0.99999 of it get none, which keeps the tricube clear of
    underflow at both ends.

    Args:
        state: Workspace whose ``w[left:right+1]`` is overwritten
        x: Abscissa the regression is evaluated at
        left: First index of the window
        right: Last index of the window (inclusive)

    Raises:
        DegenerateBandwidthError: If the bandwidth is not positive
        ZeroTotalWeightError: If every weight in the window is zero
    """
    n = len(state.x)
    lam = max(x - left, right - x)

    # Emulate a wider neighbourhood than the data can provide
    if state.width > n:
        lam += (state.width - n) / 2.0

    if lam <= 0:
        raise DegenerateBandwidthError(f"Bandwidth {lam}", x, left, right)

    ceil = 0.99999 * lam
    flor = 0.00001 * lam

    delta = np.abs(x - np.arange(left, right + 1, dtype=float))
    frac = delta / lam
    trix = 1.0 - frac * frac * frac

    w = state.window_weights(left, right)
    w[:] = trix * trix * trix
    w[delta <= flor] = 1.0
    w[delta > ceil] = 0.0

    if state.external is not None:
        w *= state.external[left : right + 1]

    total = w.sum()
    if total <= 0:
        raise ZeroTotalWeightError(f"Total weight {total}", x, left, right)

    w /= total


# =============================================================================
# Regression kernels
# =============================================================================


def _threshold(state: RegressionState) -> float:
    # Corrections are only applied to windows that are spread out enough
    thresh = 0.01 * (len(state.x) - 1)
    return thresh * thresh


def _linear_update(state: RegressionState, x: float, left: int, right: int) -> None:
    w = state.window_weights(left, right)
    idx = np.arange(left, right + 1, dtype=float)

    mean = np.dot(idx, w)
    centred = idx - mean
    variance = np.dot(w, centred * centred)

    if variance > 0 and variance >= _threshold(state):
        beta = (x - mean) / variance
        w *= 1.0 + beta * centred


def _quadratic_update(state: RegressionState, x: float, left: int, right: int) -> None:
    w = state.window_weights(left, right)
    idx = np.arange(left, right + 1, dtype=float)

    mean = np.dot(idx, w)
    u = idx - mean
    u2 = u * u
    m2 = np.dot(w, u2)
    m3 = np.dot(w, u2 * u)
    m4 = np.dot(w, u2 * u2)

    # Gram matrix of the basis (u, u^2 - m2), both orthogonal to the constant
    g11 = m2
    g12 = m3
    g22 = m4 - m2 * m2
    det = g11 * g22 - g12 * g12

    if not np.isfinite(det):
        raise DegenerateBandwidthError(f"Quadratic determinant {det}", x, left, right)

    if det <= _threshold(state):
        _linear_update(state, x, left, right)
        return

    ux = x - mean
    vx = ux * ux - m2
    c1 = (g22 * ux - g12 * vx) / det
    c2 = (g11 * vx - g12 * ux) / det
    w *= 1.0 + c1 * u + c2 * (u2 - m2)


class Kernel(str, Enum):
    """Regression kernel applied after neighbourhood weighting.

    Every kernel has the signature ``(state, x, left, right)`` and rewrites the
    window's weights in place so that they still sum to one.
    """

    LINEAR = "linear"
    QUADRATIC = "quadratic"

    def apply(self, state: RegressionState, x: float, left: int, right: int) -> None:
        _KERNEL_UPDATES[self](state, x, left, right)


_KERNEL_UPDATES = {
    Kernel.LINEAR: _linear_update,
    Kernel.QUADRATIC: _quadratic_update,
}


# =============================================================================
# Regression and smoothing
# =============================================================================


def regress(
    state: RegressionState,
    kernel: Kernel | str,
    x: float,
    left: int,
    right: int,
) -> float:
    """Local regression estimate at ``x`` over the window ``[left, right]``.

    Args:
        state: Workspace bound to the series being regressed
        kernel: Regression kernel
        x: Abscissa (may lie outside the window for extrapolation)
        left: First index of the window, >= 0
        right: Last index of the window (inclusive), < len(series)

    Returns:
        Weighted sum of the window's values

    Raises:
        RegressionError: If the weights cannot be computed
    """
    left, right = int(left), int(right)
    local_weights(state, x, left, right)
    Kernel(kernel).apply(state, x, left, right)
    return float(np.dot(state.window_weights(left, right), state.x[left : right + 1]))


def _regress_or_raw(state: RegressionState, kernel: Kernel, i: int, left: int, right: int) -> float:
    try:
        return regress(state, kernel, float(i), left, right)
    except RegressionError as e:
        logger.debug("Regression failed at index %d, keeping raw value: %s", i, e)
        return float(state.x[i])


def _window(i: int, size: int, width: int) -> tuple[int, int]:
    """Window of ``width`` points around ``i``, clamped to ``[0, size-1]``."""
    if width >= size:
        return 0, size - 1
    half = (width + 1) // 2
    if i < half - 1:
        left = 0
    elif i >= size - half:
        left = size - width
    else:
        left = i - half + 1
    return left, left + width - 1


def _smooth(state: RegressionState, jump: int, kernel: Kernel, out: np.ndarray) -> np.ndarray:
    x = state.x
    width = state.width
    size = len(x)

    if size == 0:
        return out
    if size == 1:
        out[0] = x[0]
        return out

    if width >= size:
        for i in range(0, size, jump):
            out[i] = _regress_or_raw(state, kernel, i, 0, size - 1)
    elif jump == 1:
        # Slide the window once half of it has been passed
        half = (width + 1) // 2
        left, right = 0, width - 1
        for i in range(size):
            if i >= half and right != size - 1:
                left += 1
                right += 1
            out[i] = _regress_or_raw(state, kernel, i, left, right)
    else:
        for i in range(0, size, jump):
            left, right = _window(i, size, width)
            out[i] = _regress_or_raw(state, kernel, i, left, right)

    if jump != 1:
        for i in range(0, size - jump, jump):
            interpolate_between(out, i, i + jump)

        last = size - 1
        last_sampled = (last // jump) * jump
        if last_sampled != last:
            left, right = _window(last, size, width)
            out[last] = _regress_or_raw(state, kernel, last, left, right)
            interpolate_between(out, last_sampled, last)

    return out


def smooth(
    x: np.ndarray,
    width: int,
    jump: int = 1,
    kernel: Kernel | str = Kernel.LINEAR,
) -> np.ndarray:
    """Smooth a series with LOESS.

    Args:
        x: Series to smooth
        width: Neighbourhood size in points, >= 1
        jump: Stride between exactly computed points, >= 1
        kernel: Regression kernel

    Returns:
        Smoothed series of the same length as ``x``. Points whose regression
        fails keep their raw value.

    Raises:
        ConfigMismatchError: If ``width`` or ``jump`` is below 1

    Example:
        >>> smooth(np.array([5, 6, 2, 4.5, 5, 5, 6.5, 3.5]), width=5)
    """
    state = RegressionState(width, np.array(x, dtype=float))
    return smooth_with_state(state, width, jump, kernel)


def smooth_with_state(
    state: RegressionState,
    width: int,
    jump: int = 1,
    kernel: Kernel | str = Kernel.LINEAR,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """Smooth the workspace's series, reusing its weight vector.

    Args:
        state: Workspace bound to the series to smooth
        width: Neighbourhood size; must equal ``state.width``
        jump: Stride between exactly computed points, >= 1
        kernel: Regression kernel
        out: Optional output buffer with at least ``len(state)`` elements;
            must not alias the workspace's series

    Returns:
        The output buffer

    Raises:
        ConfigMismatchError: If the widths differ, ``width`` or ``jump`` is below 1,
            or ``out`` is too short
    """
    if width < 1:
        raise ConfigMismatchError(f"Width must be at least 1, got {width}")
    if state.width != width:
        raise ConfigMismatchError(f"Regression width: {state.width}. Smoothing width {width}")
    if jump < 1:
        raise ConfigMismatchError(f"Jump must be at least 1, got {jump}")
    if out is None:
        out = np.empty(len(state.x))
    if len(out) < len(state.x):
        raise ConfigMismatchError(
            f"Expected the output buffer to have at least {len(state.x)} elements. "
            f"Got {len(out)} elements."
        )
    return _smooth(state, jump, Kernel(kernel), out)
