"""Input validation utilities for STL decomposition.

This module provides helper functions for validating series and DataFrames
before they reach the decomposition engine. No imputation is performed:
missing values are rejected.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from stl_loess.errors import InsufficientDataError


def validate_series(x: np.ndarray | pd.Series, periodicity: int) -> np.ndarray:
    """Validate a series and return it as a fresh float array.

    Args:
        x: Evenly sampled series
        periodicity: Observations per cycle

    Returns:
        One-dimensional float64 copy of ``x``

    Raises:
        InsufficientDataError: If the series is empty, not one-dimensional,
            contains NaN/inf, or is shorter than one cycle
    """
    if isinstance(x, pd.Series):
        a = x.to_numpy(dtype=float, copy=True)
    else:
        a = np.array(x, dtype=float)

    if a.ndim != 1:
        raise InsufficientDataError(f"Expected a one-dimensional series, got shape {a.shape}")
    if len(a) == 0:
        raise InsufficientDataError("Input series is empty")
    if not np.all(np.isfinite(a)):
        n_bad = int(np.sum(~np.isfinite(a)))
        raise InsufficientDataError(
            f"Input series contains {n_bad} NaN or infinite values. "
            "Please fill or remove them before decomposing."
        )
    if len(a) < periodicity:
        raise InsufficientDataError(
            f"Series of {len(a)} points is shorter than one cycle of {periodicity}"
        )
    return a


def validate_input(df: pd.DataFrame) -> pd.DataFrame:
    """Validate and prepare an input DataFrame for decomposition.

    The DataFrame must have a 'y' column. If a 'ds' column is present it is
    converted to datetime, the rows are sorted by it, and duplicate
    timestamps are rejected.

    Args:
        df: Input DataFrame to validate

    Returns:
        Validated copy of the DataFrame

    Raises:
        ValueError: If 'y' is missing or not numeric, or timestamps are duplicated
        ValueError: If DataFrame is empty

    Example:
        >>> df = pd.DataFrame({
        ...     'ds': pd.date_range('2024-01-01', periods=100, freq='h'),
        ...     'y': np.random.randn(100)
        ... })
        >>> validated_df = validate_input(df)
    """
    if df.empty:
        raise ValueError("Input DataFrame is empty")

    if 'y' not in df.columns:
        raise ValueError("DataFrame must have a 'y' column")

    # Make a copy to avoid modifying the original
    df = df.copy()

    # Ensure 'y' is numeric
    if not pd.api.types.is_numeric_dtype(df['y']):
        try:
            df['y'] = pd.to_numeric(df['y'])
        except Exception as e:
            raise ValueError(f"Could not convert 'y' column to numeric: {e}") from e

    if 'ds' in df.columns:
        if not pd.api.types.is_datetime64_any_dtype(df['ds']):
            try:
                df['ds'] = pd.to_datetime(df['ds'])
            except Exception as e:
                raise ValueError(f"Could not convert 'ds' column to datetime: {e}") from e

        df = df.sort_values('ds').reset_index(drop=True)

        n_duplicates = df['ds'].duplicated().sum()
        if n_duplicates > 0:
            raise ValueError(
                f"Found {n_duplicates} duplicate timestamps. "
                "Please aggregate or remove duplicates before decomposing."
            )

    return df
