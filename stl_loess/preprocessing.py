"""
STL Decomposer Module

DataFrame front end for the STL engine.

A single period yields the classic trend/seasonal/residual split. Several
periods are extracted iteratively: STL is run with the shortest period, its
seasonal component becomes that band, and trend + residual is carried on to
the next (longer) period.

Output components (high freq -> low freq):
    - y_period_<P>: Seasonal component with a period of P observations
    - y_trend: Trend of the last pass
    - y_resid: Remainder of the last pass

Classes:
    STLDecomposer: Single or multi-period STL decomposition of a ds/y DataFrame
"""

from __future__ import annotations

import warnings
from typing import Literal, Optional

import numpy as np
import pandas as pd

from stl_loess.config import SmootherConfig, STLConfig
from stl_loess.stl import STLResult, decompose
from stl_loess.transforms import transform_from_name
from stl_loess.utils.data import validate_input


class STLDecomposer:
    """Single or multi-period decomposition of a DataFrame.

    Attributes:
        periods: Periods in observations, sorted from shortest to longest
        width: Base smoothing width (None = smallest odd width >= 7 and >= period / 2)
        robust_iter: Robustness iterations per pass
        inner_iter: Inner iterations per pass
        model: 'additive', 'multiplicative' or 'boxcox'
        boxcox_lambda: Box-Cox parameter for the 'boxcox' model
        verbose: Whether to print progress

    Example:
        >>> decomposer = STLDecomposer(periods=[24, 168], robust_iter=1)
        >>> df_decomposed = decomposer.decompose(df)
    """

    def __init__(
        self,
        periods: int | list[int],
        width: Optional[int] = None,
        robust_iter: int = 0,
        inner_iter: int = 2,
        model: Literal["additive", "multiplicative", "boxcox"] = "additive",
        boxcox_lambda: Optional[float] = None,
        seasonal: Optional[SmootherConfig] = None,
        trend: Optional[SmootherConfig] = None,
        lowpass: Optional[SmootherConfig] = None,
        verbose: bool = False,
    ):
        """Initialize the STL Decomposer.

        Args:
            periods: Period or list of periods in observations
                Example: [24, 168] for daily and weekly cycles of hourly data
            width: Base smoothing width shared by every pass
            robust_iter: Robustness iterations (0 = non-robust fit)
            inner_iter: Inner iterations per pass
            model: Decomposition model. The transform is applied once around
                the whole multi-period pass.
            boxcox_lambda: Box-Cox parameter (required for model='boxcox')
            seasonal: Seasonal stage override
            trend: Trend stage override
            lowpass: Low-pass stage override
            verbose: Print progress messages
        """
        if isinstance(periods, int):
            periods = [periods]
        if not periods:
            raise ValueError("At least one period is required")
        self.periods = sorted(periods)
        self.width = width
        self.robust_iter = robust_iter
        self.inner_iter = inner_iter
        self.model = model
        self.boxcox_lambda = boxcox_lambda
        self.seasonal = seasonal
        self.trend = trend
        self.lowpass = lowpass
        self.verbose = verbose

        self.transform = transform_from_name(model, boxcox_lambda)
        self.results_: dict[int, STLResult] = {}

    @classmethod
    def from_config(cls, config: STLConfig, verbose: bool = False) -> STLDecomposer:
        """Build a single-period decomposer from an ``STLConfig``."""
        return cls(
            periods=config.periodicity,
            width=config.width,
            robust_iter=config.robust_iter,
            inner_iter=config.inner_iter,
            model=config.model,
            boxcox_lambda=config.boxcox_lambda,
            seasonal=config.seasonal,
            trend=config.trend,
            lowpass=config.lowpass,
            verbose=verbose,
        )

    def _width_for(self, period: int) -> int:
        if self.width is not None:
            return self.width
        width = max(7, period // 2)
        return width if width % 2 else width + 1

    def decompose(self, df: pd.DataFrame) -> pd.DataFrame:
        """Decompose the 'y' column.

        Args:
            df: Input dataframe with columns:
                - y (float): Evenly sampled target values, no NaN
                - ds (datetime, optional): Timestamps

        Returns:
            DataFrame with original columns plus decomposed components:
                - y_period_<P> for each period
                - y_trend, y_resid

        Raises:
            ValueError: If 'y' is missing or invalid
            InsufficientDataError: If 'y' has NaN or is shorter than the shortest period
            DecompositionError: If a pass fails
        """
        df = validate_input(df)
        y = df['y'].to_numpy(dtype=float)

        if self.verbose:
            print(f"\n{'='*70}")
            print("Signal Decomposition - STL (LOESS) Method")
            print(f"{'='*70}")
            print(f"Data length: {len(y)} observations")
            print(f"Periods to extract: {self.periods} observations")
            print(f"Model: {self.model}, robust iterations: {self.robust_iter}")
            print(f"{'='*70}\n")

        self.results_ = {}
        current_signal = self.transform.forward(y)
        trend = current_signal
        resid = np.zeros_like(current_signal)

        for period in self.periods:
            name = f"period_{period}"

            if period > len(current_signal) // 2:
                warnings.warn(
                    f"{name}: Period {period} too large for data length {len(current_signal)}. "
                    "Skipping.",
                    stacklevel=2,
                )
                continue

            if self.verbose:
                print(f"Computing {name}...")

            result = decompose(
                current_signal,
                period,
                self._width_for(period),
                seasonal=self.seasonal,
                trend=self.trend,
                lowpass=self.lowpass,
                robust_iter=self.robust_iter,
                inner_iter=self.inner_iter,
            )
            self.results_[period] = result

            df[f'y_{name}'] = self._to_data_space(result.seasonal)
            trend = np.array(result.trend)
            resid = np.array(result.resid)

            # Continue with trend + residual for the next period
            current_signal = trend + resid

            if self.verbose:
                print(f"  → Extracted seasonal (std={np.std(result.seasonal):.4f})")

        df['y_trend'] = self._to_data_space(trend)
        df['y_resid'] = self._to_data_space(resid)

        if self.verbose:
            print(f"\n{'='*70}")
            print(f"Decomposition complete. Dataset shape: {df.shape}")
            print(f"{'='*70}\n")

        return df

    def _to_data_space(self, component: np.ndarray) -> np.ndarray:
        return np.asarray(self.transform.inverse(np.asarray(component)))

    def get_component_info(self) -> pd.DataFrame:
        """Get information about the decomposed components.

        Returns:
            DataFrame with component specifications
        """
        info = []
        for period in self.periods:
            info.append({
                'component': f"y_period_{period}",
                'period_obs': period,
                'width': self._width_for(period),
                'extracted': period in self.results_,
            })

        for name in ('y_trend', 'y_resid'):
            info.append({
                'component': name,
                'period_obs': None,
                'width': None,
                'extracted': bool(self.results_),
            })

        return pd.DataFrame(info)

    def reconstruct(self, df: pd.DataFrame) -> np.ndarray:
        """Reconstruct the original signal from components.

        Components are mapped back to the decomposition space, summed, and
        passed through the inverse transform. For a multiplicative model this
        is the product of the components. Box-Cox components are only
        invertible where ``lambda * component > -1``.

        Args:
            df: DataFrame with decomposed components

        Returns:
            Reconstructed signal
        """
        reconstructed = np.zeros(len(df))

        cols = [f"y_period_{p}" for p in self.periods] + ['y_trend', 'y_resid']
        for col in cols:
            if col not in df.columns:
                continue
            values = df[col].to_numpy(dtype=float)
            if not self.transform.is_identity:
                values = self.transform.forward(values)
            reconstructed += values

        if self.transform.is_identity:
            return reconstructed
        return self.transform.inverse(reconstructed)
