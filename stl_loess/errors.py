"""Exception types raised by the STL decomposition engine.

Regression failures at a single point are recovered inside the window
smoother; everything else propagates to the caller.
"""

from __future__ import annotations


class STLError(Exception):
    """Base class for all decomposition errors."""


class InvalidPeriodicityError(STLError, ValueError):
    """Periodicity is smaller than 2."""


class InvalidWidthError(STLError, ValueError):
    """Base smoothing width is smaller than 1."""


class InsufficientDataError(STLError, ValueError):
    """Input series is empty, shorter than one cycle, or not finite."""


class InvalidLambdaError(STLError, ValueError):
    """Box-Cox lambda is negative."""


class ConfigMismatchError(STLError, ValueError):
    """A regression workspace does not match the requested smoothing."""


class RegressionError(STLError):
    """A local regression could not be evaluated at one abscissa.

    Attributes:
        x: Abscissa the regression was evaluated at
        left: First index of the window
        right: Last index of the window (inclusive)
    """

    def __init__(self, message: str, x: float, left: int, right: int):
        super().__init__(f"{message} (x={x}, window=[{left}, {right}])")
        self.x = x
        self.left = left
        self.right = right


class DegenerateBandwidthError(RegressionError):
    """The effective bandwidth of the window is not positive."""


class ZeroTotalWeightError(RegressionError):
    """All neighbourhood weights in the window collapsed to zero."""


class DecompositionError(STLError):
    """A smoothing step failed inside the STL iteration.

    Attributes:
        outer: Outer (robustness) iteration index
        inner: Inner iteration index
        step: Name of the sub-step that failed
        result: Partial result holding the buffers at the time of failure
    """

    def __init__(self, outer: int, inner: int, step: str, cause: Exception, result=None):
        super().__init__(
            f"Outer iteration {outer}, inner iteration {inner} - failed to {step}: {cause}"
        )
        self.outer = outer
        self.inner = inner
        self.step = step
        self.result = result
