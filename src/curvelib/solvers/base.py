"""
Shared bookkeeping for one-dimensional root finders.

Solver1D owns the evaluation counter, the evaluation budget, optional
domain bounds and the current bracket. Concrete algorithms only supply
``_solve_impl``, which is entered with a valid bracket
(``fx_min * fx_max < 0``) and ``root`` set to a starting point inside it.

Budget contract: the budget is checked before every call of the function,
bracketing evaluations included. A solve that would need more than
``max_evaluations`` calls raises (BracketError while the root is still
unbracketed, ConvergenceError afterwards) instead of evaluating again.
"""

from abc import ABC, abstractmethod
import logging
import math
from typing import Callable, Optional

import numpy as np

from ..errors import BracketError, ConfigurationError, ConvergenceError

logger = logging.getLogger(__name__)

EPSILON = float(np.finfo(float).eps)

Function = Callable[[float], float]


class Solver1D(ABC):
    """
    Base class for scalar root finders.

    Attributes:
        max_evaluations: Evaluation budget for one solve
        evaluation_number: Evaluations used by the last solve
        root: Current (or last returned) root estimate
        x_min, x_max: Current bracket
        fx_min, fx_max: Function values at the bracket ends
    """

    name = "solver1d"

    def __init__(self, max_evaluations: int = 100):
        self.set_max_evaluations(max_evaluations)
        self.evaluation_number = 0
        self.root = math.nan
        self.x_min = self.x_max = math.nan
        self.fx_min = self.fx_max = math.nan
        self._lower_bound: Optional[float] = None
        self._upper_bound: Optional[float] = None

    def set_max_evaluations(self, n: int) -> None:
        if n < 1:
            raise ConfigurationError(f"max_evaluations must be at least 1, got {n}")
        self.max_evaluations = n

    def set_lower_bound(self, bound: Optional[float]) -> None:
        """Keep every trial point at or above ``bound`` (None removes it)."""
        self._lower_bound = bound

    def set_upper_bound(self, bound: Optional[float]) -> None:
        """Keep every trial point at or below ``bound`` (None removes it)."""
        self._upper_bound = bound

    def solve(self, f: Function, accuracy: float, guess: float, step: float) -> float:
        """
        Find a root of ``f`` starting from ``guess``.

        A bracket is grown outward from the guess: the side with the smaller
        |f| is pushed out by ``step``, and the step doubles after every
        failed attempt, until f changes sign.

        Args:
            f: Scalar function
            accuracy: Required accuracy on x
            guess: Starting point
            step: Initial bracket-search step

        Returns:
            Root estimate

        Raises:
            BracketError: if no sign change is found within the budget
            ConvergenceError: if the algorithm exhausts the budget
        """
        if step <= 0:
            raise ConfigurationError(f"bracketing step must be positive, got {step}")
        accuracy = max(abs(accuracy), EPSILON)
        self.evaluation_number = 0

        guess = self._enforce_bounds(guess)
        self.root = guess
        fx = self._evaluate(f, guess)
        if fx == 0.0:
            return guess

        if self.evaluation_number >= self.max_evaluations:
            raise BracketError(
                f"unable to bracket root in {self.max_evaluations} function evaluations"
            )
        if fx > 0.0:
            self.x_min = self._enforce_bounds(guess - step)
            self.fx_min = self._evaluate(f, self.x_min)
            self.x_max, self.fx_max = guess, fx
        else:
            self.x_min, self.fx_min = guess, fx
            self.x_max = self._enforce_bounds(guess + step)
            self.fx_max = self._evaluate(f, self.x_max)

        flipflop = -1
        while True:
            if self.fx_min * self.fx_max <= 0.0:
                if self.fx_min == 0.0:
                    return self.x_min
                if self.fx_max == 0.0:
                    return self.x_max
                logger.debug(
                    "%s bracketed root in [%.10g, %.10g] after %d evaluations",
                    self.name, self.x_min, self.x_max, self.evaluation_number
                )
                self.root = 0.5 * (self.x_min + self.x_max)
                return self._finish(f, accuracy)

            if self.evaluation_number >= self.max_evaluations:
                raise BracketError(
                    f"unable to bracket root in {self.max_evaluations} function "
                    f"evaluations (last bracket attempt: f[{self.x_min:.10g}, "
                    f"{self.x_max:.10g}] -> [{self.fx_min:.6g}, {self.fx_max:.6g}])"
                )

            step *= 2.0
            if abs(self.fx_min) < abs(self.fx_max):
                expand_low = True
            elif abs(self.fx_min) > abs(self.fx_max):
                expand_low = False
            else:
                expand_low = flipflop == -1
                flipflop = -flipflop

            if expand_low:
                self.x_min = self._enforce_bounds(self.x_min - step)
                self.fx_min = self._evaluate(f, self.x_min)
            else:
                self.x_max = self._enforce_bounds(self.x_max + step)
                self.fx_max = self._evaluate(f, self.x_max)

    def solve_bracketed(
        self,
        f: Function,
        accuracy: float,
        guess: float,
        x_min: float,
        x_max: float
    ) -> float:
        """
        Find a root of ``f`` inside an explicit bracket.

        Raises:
            ConfigurationError: invalid range or guess outside it
            BracketError: f(x_min) and f(x_max) have the same sign
            ConvergenceError: if the algorithm exhausts the budget
        """
        accuracy = max(abs(accuracy), EPSILON)
        if not x_min < x_max:
            raise ConfigurationError(f"invalid range: x_min ({x_min}) >= x_max ({x_max})")
        if self._lower_bound is not None and x_min < self._lower_bound:
            raise ConfigurationError(
                f"x_min ({x_min}) < enforced lower bound ({self._lower_bound})"
            )
        if self._upper_bound is not None and x_max > self._upper_bound:
            raise ConfigurationError(
                f"x_max ({x_max}) > enforced upper bound ({self._upper_bound})"
            )

        self.evaluation_number = 0
        self.x_min, self.x_max = x_min, x_max
        self.fx_min = self._evaluate(f, x_min)
        if self.fx_min == 0.0:
            return x_min
        if self.evaluation_number >= self.max_evaluations:
            raise self._budget_exceeded(self.fx_min)
        self.fx_max = self._evaluate(f, x_max)
        if self.fx_max == 0.0:
            return x_max

        if self.fx_min * self.fx_max > 0.0:
            raise BracketError(
                f"root not bracketed: f[{x_min:.10g}, {x_max:.10g}] -> "
                f"[{self.fx_min:.6g}, {self.fx_max:.6g}]"
            )
        if not x_min < guess < x_max:
            raise ConfigurationError(
                f"guess ({guess}) must lie strictly inside [{x_min}, {x_max}]"
            )

        self.root = guess
        return self._finish(f, accuracy)

    def _finish(self, f: Function, accuracy: float) -> float:
        root = self._solve_impl(f, accuracy)
        logger.debug(
            "%s converged to %.15g in %d evaluations",
            self.name, root, self.evaluation_number
        )
        return root

    @abstractmethod
    def _solve_impl(self, f: Function, accuracy: float) -> float:
        """Algorithm-specific iteration on a valid bracket."""

    def _evaluate(self, f: Function, x: float) -> float:
        self.evaluation_number += 1
        return float(f(x))

    def _enforce_bounds(self, x: float) -> float:
        if self._lower_bound is not None and x < self._lower_bound:
            return self._lower_bound
        if self._upper_bound is not None and x > self._upper_bound:
            return self._upper_bound
        return x

    def _budget_exceeded(self, last_value: Optional[float] = None) -> ConvergenceError:
        return ConvergenceError(
            f"{self.name}: maximum number of function evaluations "
            f"({self.max_evaluations}) exceeded",
            evaluations=self.evaluation_number,
            bracket=(self.x_min, self.x_max),
            last_value=last_value,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(max_evaluations={self.max_evaluations})"


__all__ = [
    "Solver1D",
    "EPSILON",
]
