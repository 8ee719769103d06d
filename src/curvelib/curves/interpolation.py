"""
Interpolation methods for bootstrapped curves.

Provides:
- LinearInterpolator: linear interpolation (zero rates)
- LogLinearInterpolator: linear in log(discount factor)
- BackwardFlatInterpolator: piecewise constant, value on (t[i-1], t[i]] is
  y[i] (instantaneous forwards)

All interpolators are local: changing the last node only changes the curve
between the last two nodes, which is what sequential bootstrapping needs.
All work with year fractions as x-coordinates.
"""

from abc import ABC, abstractmethod
from typing import Optional
import numpy as np


class Interpolator(ABC):
    """Abstract base class for curve interpolation."""

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, values: np.ndarray) -> None:
        """
        Fit the interpolator to data points.

        Args:
            times: Array of year fractions (strictly ascending)
            values: Array of values
        """
        times = np.asarray(times, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)
        if len(times) != len(values):
            raise ValueError("Times and values must have same length")
        if len(times) < 2:
            raise ValueError("Need at least 2 points for interpolation")
        if np.any(np.diff(times) <= 0):
            raise ValueError("Times must be strictly increasing")
        self.times = times
        self.values = values

    @abstractmethod
    def interpolate(self, t: float) -> float:
        """
        Interpolate at a single point.

        Args:
            t: Year fraction

        Returns:
            Interpolated value
        """

    def __call__(self, t: float) -> float:
        """Convenience method to call interpolate."""
        return self.interpolate(t)

    @abstractmethod
    def derivative(self, t: float) -> float:
        """Return the first derivative at point t."""

    def _check_fitted(self) -> None:
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")

    def _segment(self, t: float) -> int:
        idx = np.searchsorted(self.times, t, side='right') - 1
        return int(max(0, min(idx, len(self.times) - 2)))


class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    Simple linear interpolation between knot points.
    Extrapolates flat beyond boundaries.
    """

    def interpolate(self, t: float) -> float:
        """Linear interpolation with flat extrapolation."""
        self._check_fitted()

        if t <= self.times[0]:
            return float(self.values[0])
        if t >= self.times[-1]:
            return float(self.values[-1])

        idx = self._segment(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        v0, v1 = self.values[idx], self.values[idx + 1]

        w = (t - t0) / (t1 - t0)
        return float(v0 + w * (v1 - v0))

    def derivative(self, t: float) -> float:
        """Derivative of linear interpolation (piecewise constant)."""
        self._check_fitted()

        if t < self.times[0] or t >= self.times[-1]:
            return 0.0

        idx = self._segment(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        v0, v1 = self.values[idx], self.values[idx + 1]

        return float((v1 - v0) / (t1 - t0))


class LogLinearInterpolator(Interpolator):
    """
    Log-linear interpolation on discount factors.

    Interpolates linearly in log(discount factor) space,
    which corresponds to piecewise constant forward rates.
    ``interpolate`` returns the log discount factor.
    """

    def __init__(self):
        super().__init__()
        self.log_df: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, discount_factors: np.ndarray) -> None:
        """
        Fit log-linear interpolator.

        Args:
            times: Year fractions
            discount_factors: Discount factors (not log!)
        """
        super().fit(times, discount_factors)
        if np.any(self.values <= 0):
            raise ValueError("Discount factors must be positive")
        self.log_df = np.log(self.values)

    def interpolate(self, t: float) -> float:
        """
        Interpolate log discount factor.

        Extrapolates linearly in log space beyond the last node.
        """
        self._check_fitted()

        if t <= self.times[0]:
            return float(self.log_df[0])

        idx = self._segment(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        v0, v1 = self.log_df[idx], self.log_df[idx + 1]

        w = (t - t0) / (t1 - t0)
        return float(v0 + w * (v1 - v0))

    def get_discount_factor(self, t: float) -> float:
        """Get discount factor at time t."""
        return float(np.exp(self.interpolate(t)))

    def derivative(self, t: float) -> float:
        """Derivative of log discount factor (negative of instantaneous forward rate)."""
        self._check_fitted()

        idx = self._segment(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        v0, v1 = self.log_df[idx], self.log_df[idx + 1]

        return float((v1 - v0) / (t1 - t0))


class BackwardFlatInterpolator(Interpolator):
    """
    Backward-flat (piecewise constant) interpolation.

    The value on (t[i-1], t[i]] is y[i]; y[0] applies at and before t[0],
    y[-1] beyond t[-1]. ``integral`` gives the exact area from t[0],
    so with forward rates as values exp(-integral) is the discount factor.
    """

    def interpolate(self, t: float) -> float:
        self._check_fitted()

        if t <= self.times[0]:
            return float(self.values[0])
        if t > self.times[-1]:
            return float(self.values[-1])

        idx = int(np.searchsorted(self.times, t, side='left'))
        return float(self.values[idx])

    def derivative(self, t: float) -> float:
        return 0.0

    def integral(self, t: float) -> float:
        """Integral of the step function from times[0] to t."""
        self._check_fitted()

        if t <= self.times[0]:
            return 0.0

        # full segments up to the last node before t
        idx = int(np.searchsorted(self.times, t, side='left'))
        idx = min(idx, len(self.times) - 1)
        widths = np.diff(self.times[:idx])
        total = float(np.dot(widths, self.values[1:idx]))
        if t <= self.times[-1]:
            total += (t - self.times[idx - 1]) * float(self.values[idx])
        else:
            total += (self.times[-1] - self.times[idx - 1]) * float(self.values[-1])
            total += (t - self.times[-1]) * float(self.values[-1])
        return total


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "BackwardFlatInterpolator",
]
