"""Elementwise transforms applied around the decomposition.

An additive model decomposes the raw series. A multiplicative model
decomposes its logarithm, and the Box-Cox family sits in between. Each
transform is a forward/inverse pair of stateless elementwise maps.

Example:
    >>> t = box_cox(0.5)
    >>> y = t.forward(np.array([1.0, 4.0, 9.0]))
    >>> t.inverse(y)
    array([1., 4., 9.])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from stl_loess.errors import InvalidLambdaError


@dataclass(frozen=True)
class Transform:
    """Forward/inverse pair of elementwise maps.

    Attributes:
        name: Model name ('additive', 'multiplicative', 'boxcox')
        forward: Map from the data space to the decomposition space
        inverse: Map from the decomposition space back to the data space
        lmbda: Box-Cox parameter, if any
    """

    name: str
    forward: Callable[[np.ndarray], np.ndarray]
    inverse: Callable[[np.ndarray], np.ndarray]
    lmbda: float | None = None

    @property
    def is_identity(self) -> bool:
        return self.name == "additive"


def _require_positive(a: np.ndarray, name: str) -> np.ndarray:
    a = np.asarray(a, dtype=float)
    if np.any(a <= 0):
        raise ValueError(f"{name} transform requires strictly positive values")
    return a


def additive() -> Transform:
    """Identity transform."""
    return Transform(
        name="additive",
        forward=lambda a: np.array(a, dtype=float),
        inverse=lambda a: np.array(a, dtype=float),
    )


def multiplicative() -> Transform:
    """Log/exp transform for a multiplicative model."""
    return Transform(
        name="multiplicative",
        forward=lambda a: np.log(_require_positive(a, "Multiplicative")),
        inverse=lambda a: np.exp(np.asarray(a, dtype=float)),
        lmbda=0.0,
    )


def box_cox(lmbda: float) -> Transform:
    """Box-Cox power transform.

    ``lmbda == 0`` is the log transform; ``lmbda == 1`` is a plain shift by one.

    Args:
        lmbda: Power parameter, must be non-negative

    Returns:
        Transform pair

    Raises:
        InvalidLambdaError: If lmbda is negative
    """
    if lmbda < 0:
        raise InvalidLambdaError(f"Box-Cox lambda cannot be negative, got {lmbda}")
    if lmbda == 0:
        return multiplicative()

    def forward(a: np.ndarray) -> np.ndarray:
        a = _require_positive(a, "Box-Cox")
        return (np.power(a, lmbda) - 1.0) / lmbda

    def inverse(a: np.ndarray) -> np.ndarray:
        a = np.asarray(a, dtype=float)
        return np.power(a * lmbda + 1.0, 1.0 / lmbda)

    return Transform(name="boxcox", forward=forward, inverse=inverse, lmbda=float(lmbda))


def transform_from_name(model: str, lmbda: float | None = None) -> Transform:
    """Build a transform from its model name.

    Args:
        model: 'additive', 'multiplicative' or 'boxcox'
        lmbda: Box-Cox parameter, required for 'boxcox'

    Returns:
        Transform pair

    Raises:
        ValueError: If the model name is unknown or lmbda is missing for 'boxcox'
    """
    if model == "additive":
        return additive()
    if model == "multiplicative":
        return multiplicative()
    if model == "boxcox":
        if lmbda is None:
            raise ValueError("boxcox model requires a lambda")
        return box_cox(lmbda)
    raise ValueError(f"Unknown model: {model}")
