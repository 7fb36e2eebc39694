"""stl_loess - Seasonal-Trend decomposition by LOESS.

Decomposes an evenly sampled series into trend, seasonal and residual
components using the iterative STL procedure of Cleveland et al. (1990),
with optional robustness re-weighting and Box-Cox family transforms.

Example:
    >>> from stl_loess import decompose, multiplicative
    >>>
    >>> # Additive model, two robustness iterations
    >>> result = decompose(co2, periodicity=12, width=35, robust_iter=2)
    >>> result.trend, result.seasonal, result.resid
    >>>
    >>> # Multiplicative model
    >>> result = decompose(co2, periodicity=12, width=35, transform=multiplicative())
    >>>
    >>> # From a YAML configuration
    >>> config = STLConfig.from_yaml("configs/co2.yaml")
    >>> result = decompose_with_config(co2, config)
    >>>
    >>> # DataFrame front end
    >>> decomposer = STLDecomposer(periods=[24, 168])
    >>> df_decomposed = decomposer.decompose(df)
"""

from stl_loess.config import (
    SmootherConfig,
    STLConfig,
    default_lowpass,
    default_seasonal,
    default_trend,
    trend_width,
)
from stl_loess.errors import (
    ConfigMismatchError,
    DecompositionError,
    DegenerateBandwidthError,
    InsufficientDataError,
    InvalidLambdaError,
    InvalidPeriodicityError,
    InvalidWidthError,
    RegressionError,
    STLError,
    ZeroTotalWeightError,
)
from stl_loess.loess import Kernel, RegressionState, local_weights, regress, smooth, smooth_with_state
from stl_loess.preprocessing import STLDecomposer
from stl_loess.stl import DecompositionState, STLResult, decompose, decompose_with_config
from stl_loess.subcycle import SubcycleSmoother
from stl_loess.transforms import Transform, additive, box_cox, multiplicative, transform_from_name

__version__ = "0.1.0"

# Define public API
__all__ = [
    # Configs
    "SmootherConfig",
    "STLConfig",
    "default_seasonal",
    "default_trend",
    "default_lowpass",
    "trend_width",
    # Errors
    "STLError",
    "InvalidPeriodicityError",
    "InvalidWidthError",
    "InsufficientDataError",
    "InvalidLambdaError",
    "ConfigMismatchError",
    "RegressionError",
    "DegenerateBandwidthError",
    "ZeroTotalWeightError",
    "DecompositionError",
    # LOESS
    "Kernel",
    "RegressionState",
    "local_weights",
    "regress",
    "smooth",
    "smooth_with_state",
    # Decomposition
    "SubcycleSmoother",
    "DecompositionState",
    "STLResult",
    "decompose",
    "decompose_with_config",
    "STLDecomposer",
    # Transforms
    "Transform",
    "additive",
    "multiplicative",
    "box_cox",
    "transform_from_name",
]
