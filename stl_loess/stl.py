"""Seasonal-Trend decomposition by LOESS (Cleveland et al., 1990).

The engine runs two nested, fixed-count loops. Each inner pass detrends the
data, smooths the cycle-subseries, low-pass filters the result to remove any
leakage of trend into the seasonal estimate, and refits the trend through the
deseasonalized data. Each outer pass after the first reuses bisquare
robustness weights computed from the previous pass's residuals.

Example:
    >>> result = decompose(co2, periodicity=12, width=35, robust_iter=2)
    >>> result.trend[:3]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from stl_loess.config import (
    SmootherConfig,
    STLConfig,
    default_lowpass,
    default_seasonal,
    default_trend,
)
from stl_loess.errors import (
    DecompositionError,
    InvalidPeriodicityError,
    InvalidWidthError,
    STLError,
)
from stl_loess.loess import RegressionState, smooth, smooth_with_state
from stl_loess.subcycle import SubcycleSmoother
from stl_loess.transforms import Transform, additive
from stl_loess.utils.data import validate_series
from stl_loess.utils.numeric import moving_average, robustness_weights

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class STLResult:
    """Outcome of a decomposition.

    On success the components are in the data space, so that for an additive
    model ``data == trend + seasonal + resid``. On failure ``error`` is set and
    the components hold the engine's buffers at the time of failure, in the
    transformed space.

    Attributes:
        data: Input series
        trend: Trend component
        seasonal: Seasonal component
        resid: Remainder
        error: Failure, if any
    """

    data: np.ndarray
    trend: np.ndarray
    seasonal: np.ndarray
    resid: np.ndarray
    error: Exception | None = None

    def __post_init__(self):
        for arr in (self.data, self.trend, self.seasonal, self.resid):
            arr.setflags(write=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> STLResult:
        """Raise the stored error, if any; otherwise return self."""
        if self.error is not None:
            raise self.error
        return self

    def to_frame(self, index: pd.Index | None = None) -> pd.DataFrame:
        """Components as a DataFrame with columns observed, trend, seasonal, resid."""
        return pd.DataFrame(
            {
                "observed": np.array(self.data),
                "trend": np.array(self.trend),
                "seasonal": np.array(self.seasonal),
                "resid": np.array(self.resid),
            },
            index=index,
        )


class DecompositionState:
    """Buffers and sub-steps of one decomposition.

    All buffers are allocated once and mutated in place across iterations.
    ``trend_input`` holds ``data - seasonal`` so the trend refit never reads
    values it has already overwritten.
    """

    def __init__(
        self,
        data: np.ndarray,
        periodicity: int,
        seasonal: SmootherConfig,
        trend: SmootherConfig,
        lowpass: SmootherConfig,
    ):
        n = len(data)
        self.data = data
        self.periodicity = periodicity
        self.seasonal_config = seasonal
        self.trend_config = trend
        self.lowpass_config = lowpass

        self.trend = np.zeros(n)
        self.seasonal = np.zeros(n)
        self.resid = np.zeros(n)
        self.weights = np.ones(n)

        self.detrended = np.zeros(n)
        self.extended_seasonal = np.zeros(n + 2 * periodicity)
        self.deseasonalized = np.zeros(n)
        self.trend_input = np.zeros(n)

        self.subcycle = SubcycleSmoother(seasonal, n, periodicity, fwd=1, bwd=1)
        self.trend_state = RegressionState(trend.width, self.trend_input, self.weights)

    def detrend(self) -> None:
        np.subtract(self.data, self.trend, out=self.detrended)

    def smooth_subcycles(self, use_weights: bool) -> None:
        weights = self.weights if use_weights else None
        self.subcycle.smooth(self.detrended, weights, out=self.extended_seasonal)

    def remove_seasonality(self) -> None:
        p = self.periodicity
        passes = moving_average(moving_average(moving_average(self.extended_seasonal, p), p), 3)
        conf = self.lowpass_config
        self.deseasonalized[:] = smooth(passes, conf.width, conf.jump, conf.kernel)

    def update_seasonal_and_trend(self) -> None:
        p = self.periodicity
        n = len(self.data)
        np.subtract(self.extended_seasonal[p : p + n], self.deseasonalized, out=self.seasonal)
        np.subtract(self.data, self.seasonal, out=self.trend_input)

        conf = self.trend_config
        smooth_with_state(self.trend_state, conf.width, conf.jump, conf.kernel, out=self.trend)

    def update_residuals(self) -> None:
        self.resid[:] = self.data - self.seasonal - self.trend

    def update_weights(self) -> None:
        self.update_residuals()
        self.weights[:] = robustness_weights(self.resid)
        logger.debug(
            "Robustness weights: %d zeroed, %d full, mean %.4f",
            int(np.sum(self.weights == 0)),
            int(np.sum(self.weights == 1)),
            float(self.weights.mean()),
        )

    def snapshot(self, error: Exception | None = None) -> STLResult:
        """Copy the current buffers into a result without transforming them."""
        return STLResult(
            data=self.data.copy(),
            trend=self.trend.copy(),
            seasonal=self.seasonal.copy(),
            resid=self.resid.copy(),
            error=error,
        )


def decompose(
    x: np.ndarray | pd.Series,
    periodicity: int,
    width: int,
    transform: Transform | None = None,
    *,
    seasonal: SmootherConfig | None = None,
    trend: SmootherConfig | None = None,
    lowpass: SmootherConfig | None = None,
    robust_iter: int = 0,
    inner_iter: int = 2,
    raise_on_error: bool = True,
) -> STLResult:
    """Perform an STL decomposition.

    Following R's ``stl()`` conventions, the defaults are 2 inner iterations
    and no robustness iterations.

    Args:
        x: Evenly sampled series, finite values only
        periodicity: Observations per cycle, >= 2
        width: Base smoothing width, >= 1; stage defaults are derived from it
        transform: Forward/inverse pair (default: additive)
        seasonal: Seasonal (subcycle) stage override
        trend: Trend stage override
        lowpass: Low-pass stage override
        robust_iter: Robustness iterations after the first pass
        inner_iter: Inner iterations per pass
        raise_on_error: If False, failures inside the iteration are returned
            as a result with ``error`` set instead of being raised

    Returns:
        STLResult with trend, seasonal and resid of the same length as ``x``

    Raises:
        InvalidPeriodicityError: If periodicity < 2
        InvalidWidthError: If width < 1
        InsufficientDataError: If ``x`` is empty, shorter than one cycle, or not finite
        DecompositionError: If a smoothing step fails (when raise_on_error)
    """
    if periodicity < 2:
        raise InvalidPeriodicityError(f"Periodicity must be at least 2, got {periodicity}")
    if width < 1:
        raise InvalidWidthError(f"Width must be at least 1, got {width}")
    if robust_iter < 0 or inner_iter < 1:
        raise ValueError(
            f"Need robust_iter >= 0 and inner_iter >= 1, got {robust_iter} and {inner_iter}"
        )

    observed = validate_series(x, periodicity)
    transform = transform or additive()

    state = DecompositionState(
        transform.forward(observed),
        periodicity,
        seasonal or default_seasonal(width),
        trend or default_trend(periodicity, width),
        lowpass or default_lowpass(periodicity),
    )
    logger.debug(
        "STL: n=%d periodicity=%d seasonal=%s trend=%s lowpass=%s model=%s",
        len(observed),
        periodicity,
        state.seasonal_config,
        state.trend_config,
        state.lowpass_config,
        transform.name,
    )

    for outer in range(robust_iter + 1):
        use_weights = outer > 0
        for inner in range(inner_iter):
            logger.debug("Outer iteration %d, inner iteration %d", outer, inner)
            state.detrend()
            step = "smooth subcycles"
            try:
                state.smooth_subcycles(use_weights)
                step = "remove seasonality"
                state.remove_seasonality()
                step = "update seasonal and trend"
                state.update_seasonal_and_trend()
            except STLError as e:
                error = DecompositionError(outer, inner, step, e)
                result = state.snapshot(error)
                error.result = result
                logger.warning("%s", error)
                if raise_on_error:
                    raise error from e
                return result
        state.update_weights()

    state.update_residuals()

    return STLResult(
        data=observed,
        trend=transform.inverse(state.trend),
        seasonal=transform.inverse(state.seasonal),
        resid=transform.inverse(state.resid),
    )


def decompose_with_config(
    x: np.ndarray | pd.Series,
    config: STLConfig,
    raise_on_error: bool = True,
) -> STLResult:
    """Perform an STL decomposition described by an ``STLConfig``."""
    return decompose(
        x,
        config.periodicity,
        config.width,
        config.transform(),
        seasonal=config.seasonal,
        trend=config.trend,
        lowpass=config.lowpass,
        robust_iter=config.robust_iter,
        inner_iter=config.inner_iter,
        raise_on_error=raise_on_error,
    )
