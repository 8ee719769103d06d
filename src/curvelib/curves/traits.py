"""
Bootstrap traits: what a piecewise curve stores at each node and how it
turns the nodes into discount factors.

Provides:
- FlatForwardTraits ("flat_forward"): node k holds the instantaneous
  forward on (t[k-1], t[k]]; discount = exp(-integral of forwards)
- LogDiscountTraits ("log_linear"): node k holds D(t[k]); log-linear
  interpolation (also piecewise flat forwards, parameterised by discount)
- LinearZeroTraits ("linear_zero"): node k holds the continuous zero rate;
  linear interpolation on zero rates

The value stored at t=0 is derived from the solved parameters
(``node_values``), so the bootstrap only solves for nodes 1..n.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np

from ..errors import ConfigurationError
from .interpolation import (
    BackwardFlatInterpolator,
    Interpolator,
    LinearInterpolator,
    LogLinearInterpolator,
)


class BootstrapTraits(ABC):
    """
    Strategy describing node parameters for a piecewise curve.

    Attributes:
        name: Registry name
        default_guess: Guess for the first node's parameter
        lower_bound: Lowest admissible parameter, if any
    """

    name = "traits"
    default_guess = 0.05
    lower_bound: Optional[float] = None

    def fit(self, times: Sequence[float], params: Sequence[float]) -> Interpolator:
        """Fit an interpolator on t=0 plus the solved nodes."""
        interp = self._make_interpolator()
        interp.fit(np.asarray(times, dtype=np.float64), self.node_values(params))
        return interp

    def node_values(self, params: Sequence[float]) -> np.ndarray:
        """Values at t=0 and every solved node."""
        return np.concatenate(([self._value_at_reference(params)], params))

    def _value_at_reference(self, params: Sequence[float]) -> float:
        return float(params[0])

    @abstractmethod
    def _make_interpolator(self) -> Interpolator:
        """Return an unfitted interpolator."""

    @abstractmethod
    def discount(self, interp: Interpolator, t: float) -> float:
        """Discount factor at time t."""

    @abstractmethod
    def forward(self, interp: Interpolator, t: float) -> float:
        """Instantaneous forward at time t."""


class FlatForwardTraits(BootstrapTraits):
    """Piecewise-constant instantaneous forwards."""

    name = "flat_forward"

    def _make_interpolator(self) -> Interpolator:
        return BackwardFlatInterpolator()

    def discount(self, interp: BackwardFlatInterpolator, t: float) -> float:
        return float(np.exp(-interp.integral(t)))

    def forward(self, interp: BackwardFlatInterpolator, t: float) -> float:
        return interp.interpolate(t)


class LogDiscountTraits(BootstrapTraits):
    """Log-linear discount factors."""

    name = "log_linear"
    default_guess = 0.9
    lower_bound = 1e-12

    def _value_at_reference(self, params: Sequence[float]) -> float:
        return 1.0

    def _make_interpolator(self) -> Interpolator:
        return LogLinearInterpolator()

    def discount(self, interp: LogLinearInterpolator, t: float) -> float:
        return interp.get_discount_factor(t)

    def forward(self, interp: LogLinearInterpolator, t: float) -> float:
        return -interp.derivative(t)


class LinearZeroTraits(BootstrapTraits):
    """Linear zero rates (continuous compounding)."""

    name = "linear_zero"

    def _make_interpolator(self) -> Interpolator:
        return LinearInterpolator()

    def discount(self, interp: LinearInterpolator, t: float) -> float:
        return float(np.exp(-interp.interpolate(t) * t))

    def forward(self, interp: LinearInterpolator, t: float) -> float:
        return interp.interpolate(t) + t * interp.derivative(t)


_TRAITS = {
    "flat_forward": FlatForwardTraits,
    "log_linear": LogDiscountTraits,
    "linear_zero": LinearZeroTraits,
}


def create_traits(method: str) -> BootstrapTraits:
    """
    Factory function to create bootstrap traits by name.

    Args:
        method: One of "flat_forward", "log_linear", "linear_zero"
    """
    key = method.lower().replace("-", "_").replace(" ", "_")
    if key not in _TRAITS:
        raise ConfigurationError(
            f"Unknown interpolation for bootstrapping: {method} "
            f"(expected one of {sorted(_TRAITS)})"
        )
    return _TRAITS[key]()


__all__ = [
    "BootstrapTraits",
    "FlatForwardTraits",
    "LogDiscountTraits",
    "LinearZeroTraits",
    "create_traits",
]
