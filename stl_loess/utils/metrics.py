"""Decomposition quality metrics.

This module provides the trend and seasonality strength features of
Wang, Smith & Hyndman (2006) and a reconstruction check for additive
decompositions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from stl_loess.stl import STLResult


class DecompositionMetrics:
    """Static utility class for decomposition metrics.

    Strengths lie in [0, 1]; values near 1 mean the component dominates the
    remainder.
    """

    @staticmethod
    def _strength(component: np.ndarray, resid: np.ndarray) -> float:
        var_total = float(np.var(component + resid))
        if var_total == 0:
            return 0.0
        return max(0.0, 1.0 - float(np.var(resid)) / var_total)

    @staticmethod
    def strength_of_trend(trend: np.ndarray, resid: np.ndarray) -> float:
        """Compute ``max(0, 1 - var(R) / var(T + R))``.

        Args:
            trend: Trend component
            resid: Remainder

        Returns:
            Trend strength
        """
        return DecompositionMetrics._strength(np.asarray(trend), np.asarray(resid))

    @staticmethod
    def strength_of_seasonality(seasonal: np.ndarray, resid: np.ndarray) -> float:
        """Compute ``max(0, 1 - var(R) / var(S + R))``.

        Args:
            seasonal: Seasonal component
            resid: Remainder

        Returns:
            Seasonality strength
        """
        return DecompositionMetrics._strength(np.asarray(seasonal), np.asarray(resid))

    @staticmethod
    def reconstruction_error(result: STLResult) -> float:
        """RMSE between the data and ``trend + seasonal + resid``.

        Only meaningful for additive decompositions.
        """
        recon = result.trend + result.seasonal + result.resid
        return float(np.sqrt(np.mean((result.data - recon) ** 2)))

    @staticmethod
    def summary(result: STLResult) -> dict:
        """Compute all metrics.

        Args:
            result: Successful decomposition result

        Returns:
            Dictionary with keys: 'trend_strength', 'seasonal_strength',
            'resid_std', 'n_samples'
        """
        return {
            "trend_strength": DecompositionMetrics.strength_of_trend(result.trend, result.resid),
            "seasonal_strength": DecompositionMetrics.strength_of_seasonality(
                result.seasonal, result.resid
            ),
            "resid_std": float(np.std(result.resid)),
            "n_samples": len(result.data),
        }
