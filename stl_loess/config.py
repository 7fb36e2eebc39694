"""Configuration classes for STL decomposition.

This module defines Pydantic-based configuration for the three smoothing stages
(seasonal, trend, low-pass) and for a full decomposition, with YAML
serialization support. Stage defaults are derived from the periodicity and the
base seasonal width following Cleveland et al. (1990).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from stl_loess.transforms import Transform, transform_from_name


class SmootherConfig(BaseModel):
    """Parameters of one LOESS smoothing stage.

    Attributes:
        width: Neighbourhood size in points
        jump: Stride between exactly computed points; the rest are interpolated
        kernel: Regression kernel used to update the neighbourhood weights
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(ge=1, description="Neighbourhood size in points")
    jump: int = Field(default=1, ge=1, description="Stride between computed points")
    kernel: Literal["linear", "quadratic"] = Field(
        default="linear", description="Regression kernel"
    )


def _default_jump(width: int) -> int:
    return max(1, int(0.1 * width))


def trend_width(periodicity: int, seasonal_width: int) -> int:
    """Trend smoother width from the numerical analysis section of the STL paper.

    Args:
        periodicity: Number of observations per cycle
        seasonal_width: Base (seasonal) smoothing width

    Returns:
        ``round(1.5 * P / (1 - 1.5 / w))``. For ``w <= 1.5`` the expression has no
        positive solution and its large-width limit ``round(1.5 * P)`` is used.
    """
    p = float(periodicity)
    w = float(seasonal_width)
    if w <= 1.5:
        return int(1.5 * p + 0.5)
    return int(1.5 * p / (1 - 1.5 / w) + 0.5)


def default_seasonal(width: int) -> SmootherConfig:
    """Default configuration of the subcycle (seasonal) smoother."""
    return SmootherConfig(width=width, jump=_default_jump(width))


def default_trend(periodicity: int, width: int) -> SmootherConfig:
    """Default configuration of the trend smoother.

    The jump is 10% of the base width, not of the derived trend width.
    """
    return SmootherConfig(width=trend_width(periodicity, width), jump=_default_jump(width))


def default_lowpass(periodicity: int) -> SmootherConfig:
    """Default configuration of the low-pass smoother."""
    return SmootherConfig(width=periodicity, jump=_default_jump(periodicity))


class STLConfig(BaseModel):
    """Configuration for a full STL decomposition.

    Attributes:
        periodicity: Observations per seasonal cycle
        width: Base smoothing width; the stage defaults are derived from it
        seasonal: Seasonal stage override (None = derived default)
        trend: Trend stage override (None = derived default)
        lowpass: Low-pass stage override (None = derived default)
        robust_iter: Number of robustness (outer) iterations after the first pass
        inner_iter: Number of inner iterations per outer pass
        model: Decomposition model
        boxcox_lambda: Box-Cox parameter, required when model is 'boxcox'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    periodicity: int = Field(ge=2, description="Observations per cycle")
    width: int = Field(ge=1, description="Base smoothing width")

    seasonal: SmootherConfig | None = None
    trend: SmootherConfig | None = None
    lowpass: SmootherConfig | None = None

    # R's stl() defaults
    robust_iter: int = Field(default=0, ge=0, description="Robustness iterations")
    inner_iter: int = Field(default=2, ge=1, description="Inner iterations per pass")

    model: Literal["additive", "multiplicative", "boxcox"] = "additive"
    boxcox_lambda: float | None = Field(default=None, ge=0.0)

    @model_validator(mode="after")
    def _check_boxcox(self) -> STLConfig:
        if self.model == "boxcox" and self.boxcox_lambda is None:
            raise ValueError("boxcox_lambda is required when model='boxcox'")
        return self

    def resolved_seasonal(self) -> SmootherConfig:
        return self.seasonal or default_seasonal(self.width)

    def resolved_trend(self) -> SmootherConfig:
        return self.trend or default_trend(self.periodicity, self.width)

    def resolved_lowpass(self) -> SmootherConfig:
        return self.lowpass or default_lowpass(self.periodicity)

    def transform(self) -> Transform:
        """Build the forward/inverse transform pair for this model."""
        return transform_from_name(self.model, self.boxcox_lambda)

    @classmethod
    def from_yaml(cls, path: str | Path) -> STLConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Configuration instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If YAML content is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            config_dict = yaml.safe_load(f)

        return cls(**config_dict)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path where YAML file will be saved
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)
