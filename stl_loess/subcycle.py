"""Subcycle (per-phase) seasonal smoothing.

Index ``i`` of a series with periodicity ``P`` belongs to phase ``i % P``. Each
phase forms its own sub-series (every ``P``-th sample), which is smoothed on
its own and extrapolated ``bwd`` points back and ``fwd`` points forward. The
phases are then interleaved back into natural time order, giving an extended
seasonal series of length ``N + (bwd + fwd) * P`` whose index ``k`` corresponds
to time ``k - bwd * P``.
"""

from __future__ import annotations

import logging

import numpy as np

from stl_loess.config import SmootherConfig
from stl_loess.errors import ConfigMismatchError, InsufficientDataError, RegressionError
from stl_loess.loess import Kernel, RegressionState, regress, smooth_with_state

logger = logging.getLogger(__name__)


class SubcycleSmoother:
    """Smooths the cycle-subseries of a periodic series.

    The workspace is a fixed-shape arena allocated once: ``data`` and
    ``weights`` are ``(P, cycle_length)`` and ``smoothed`` is
    ``(P, cycle_length + bwd + fwd)``. Phases ``p < N % P`` hold one sample
    more than the others.

    Attributes:
        config: Seasonal smoothing configuration
        size: Length of the series being smoothed
        periodicity: Number of phases
        fwd: Points extrapolated past the end of each phase
        bwd: Points extrapolated before the start of each phase

    Example:
        >>> smoother = SubcycleSmoother(SmootherConfig(width=7, jump=1), size=48, periodicity=12)
        >>> extended = smoother.smooth(detrended)
        >>> len(extended)
        72
    """

    def __init__(
        self,
        config: SmootherConfig,
        size: int,
        periodicity: int,
        fwd: int = 1,
        bwd: int = 1,
    ):
        self.config = config
        self.size = size
        self.periodicity = periodicity
        self.fwd = fwd
        self.bwd = bwd

        if size < periodicity:
            raise InsufficientDataError(
                f"Series of {size} points is shorter than one cycle of {periodicity}"
            )

        self.periods, self.rem = divmod(size, periodicity)
        self.cycle_length = self.periods + 1 if self.rem else self.periods

        self.data = np.zeros((periodicity, self.cycle_length))
        self.weights = np.ones((periodicity, self.cycle_length))
        self.smoothed = np.zeros((periodicity, self.cycle_length + fwd + bwd))

    @property
    def extended_size(self) -> int:
        """Length of the interleaved output."""
        return self.size + (self.fwd + self.bwd) * self.periodicity

    def phase_length(self, phase: int) -> int:
        """Number of observed samples in ``phase``."""
        return self.periods + 1 if phase < self.rem else self.periods

    def smooth(
        self,
        x: np.ndarray,
        weights: np.ndarray | None = None,
        out: np.ndarray | None = None,
    ) -> np.ndarray:
        """Smooth every phase of ``x`` and interleave the results.

        Args:
            x: Series of length ``size``
            weights: Optional robustness weights, same length as ``x``
            out: Optional output buffer of length ``extended_size``

        Returns:
            Extended seasonal series of length ``extended_size``

        Raises:
            ConfigMismatchError: If the buffers do not match the workspace shape
            RegressionError: If a phase cannot be smoothed
        """
        if len(x) != self.size:
            raise ConfigMismatchError(f"Expected a series of {self.size} points, got {len(x)}")
        if weights is not None and len(weights) != self.size:
            raise ConfigMismatchError(
                f"Expected {self.size} robustness weights, got {len(weights)}"
            )
        if out is None:
            out = np.empty(self.extended_size)
        if len(out) != self.extended_size:
            raise ConfigMismatchError(
                f"Expected an output buffer of {self.extended_size} points, got {len(out)}"
            )

        self._setup_workspace(x, weights)
        for p in range(self.periodicity):
            self._smooth_phase(p, use_weights=weights is not None)

        for p in range(self.periodicity):
            phase_out = out[p :: self.periodicity]
            phase_out[:] = self.smoothed[p, : len(phase_out)]
        return out

    def _setup_workspace(self, x: np.ndarray, weights: np.ndarray | None) -> None:
        x = np.asarray(x, dtype=float)
        for p in range(self.periodicity):
            n = self.phase_length(p)
            self.data[p, :n] = x[p :: self.periodicity]
            if weights is not None:
                self.weights[p, :n] = np.asarray(weights, dtype=float)[p :: self.periodicity]

    def _smooth_phase(self, p: int, use_weights: bool) -> None:
        n = self.phase_length(p)
        width = self.config.width
        kernel = Kernel(self.config.kernel)

        data = self.data[p, :n]
        smoothed = self.smoothed[p]
        external = self.weights[p, :n] if use_weights else None
        state = RegressionState(width, data, external)

        smooth_with_state(
            state, width, self.config.jump, kernel, out=smoothed[self.bwd : self.bwd + n]
        )

        # Extrapolate before the first sample
        left = 0
        right = min(n - 1, width - 1)
        first = self.bwd
        for i in range(1, self.bwd + 1):
            try:
                smoothed[first - i] = regress(state, kernel, -float(i), left, right)
            except RegressionError as e:
                logger.debug("Phase %d backward extrapolation failed: %s", p, e)
                smoothed[first - i] = smoothed[first]

        # Extrapolate past the last sample
        right = n - 1
        left = max(0, right - width + 1)
        last = self.bwd + right
        for i in range(1, self.fwd + 1):
            try:
                smoothed[last + i] = regress(state, kernel, float(right + i), left, right)
            except RegressionError as e:
                logger.debug("Phase %d forward extrapolation failed: %s", p, e)
                smoothed[last + i] = smoothed[last]
