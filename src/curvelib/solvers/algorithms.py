"""
Solver1D algorithms.

Provides:
- Bisection: halves the bracket every step
- Secant: secant steps from the bracket ends
- Newton: Newton-Raphson with a bisection step whenever the Newton step
  leaves the bracket
- Brent: inverse quadratic interpolation with bisection safeguard

Each class implements only ``_solve_impl``; bracketing, bounds and the
evaluation budget live in Solver1D.
"""

from typing import Callable, Optional

from ..errors import ConfigurationError, ConvergenceError
from .base import EPSILON, Function, Solver1D


class Bisection(Solver1D):
    """Bisection (Numerical Recipes orientation: f > 0 lies at root + dx)."""

    name = "bisection"

    def _solve_impl(self, f: Function, accuracy: float) -> float:
        # Orient the search so that f > 0 lies at root + dx
        if self.fx_min < 0.0:
            dx = self.x_max - self.x_min
            root = self.x_min
        else:
            dx = self.x_min - self.x_max
            root = self.x_max

        f_mid = None
        while self.evaluation_number < self.max_evaluations:
            dx /= 2.0
            x_mid = root + dx
            f_mid = self._evaluate(f, x_mid)
            if f_mid <= 0.0:
                root = x_mid
            self.root = root
            if abs(dx) < accuracy or f_mid == 0.0:
                return root

        raise self._budget_exceeded(f_mid)


class Secant(Solver1D):
    """Secant method started from the bracket end with the smaller |f|."""

    name = "secant"

    def _solve_impl(self, f: Function, accuracy: float) -> float:
        if abs(self.fx_min) < abs(self.fx_max):
            root, froot = self.x_min, self.fx_min
            xl, fl = self.x_max, self.fx_max
        else:
            root, froot = self.x_max, self.fx_max
            xl, fl = self.x_min, self.fx_min

        while self.evaluation_number < self.max_evaluations:
            if froot == fl:
                raise ConvergenceError(
                    f"secant: flat secant at x={root:.10g}",
                    evaluations=self.evaluation_number,
                    bracket=(self.x_min, self.x_max),
                    last_value=froot,
                )
            dx = (xl - root) * froot / (froot - fl)
            xl, fl = root, froot
            root += dx
            froot = self._evaluate(f, root)
            self.root = root
            if abs(dx) < accuracy or froot == 0.0:
                return root

        raise self._budget_exceeded(froot)


class Newton(Solver1D):
    """
    Newton-Raphson kept inside the bracket.

    The derivative is taken from the ``derivative`` argument or, failing
    that, from a ``derivative`` attribute of the function object.
    """

    name = "newton"

    def __init__(
        self,
        max_evaluations: int = 100,
        derivative: Optional[Callable[[float], float]] = None
    ):
        super().__init__(max_evaluations)
        self.derivative = derivative

    def _solve_impl(self, f: Function, accuracy: float) -> float:
        derivative = self.derivative or getattr(f, "derivative", None)
        if derivative is None:
            raise ConfigurationError("Newton solver requires the function's derivative")

        # orient so that f(x_lo) < 0 < f(x_hi)
        if self.fx_min < 0.0:
            x_lo, x_hi = self.x_min, self.x_max
        else:
            x_lo, x_hi = self.x_max, self.x_min

        root = self.root
        if self.evaluation_number >= self.max_evaluations:
            raise self._budget_exceeded()
        froot = self._evaluate(f, root)
        dfroot = float(derivative(root))

        while self.evaluation_number < self.max_evaluations:
            if froot == 0.0:
                return root
            if froot < 0.0:
                x_lo = root
            else:
                x_hi = root

            new_root = root - froot / dfroot if dfroot != 0.0 else None
            if new_root is None or (new_root - x_lo) * (new_root - x_hi) > 0.0:
                new_root = 0.5 * (x_lo + x_hi)
            dx = new_root - root
            root = new_root
            self.root = root
            if abs(dx) < accuracy:
                return root

            froot = self._evaluate(f, root)
            dfroot = float(derivative(root))

        raise self._budget_exceeded(froot)


class Brent(Solver1D):
    """Brent's method (van Wijngaarden-Dekker-Brent)."""

    name = "brent"

    def _solve_impl(self, f: Function, accuracy: float) -> float:
        x_min, fx_min = self.x_min, self.fx_min
        x_max, fx_max = self.x_max, self.fx_max
        d = e = 0.0

        root, froot = x_max, fx_max
        while self.evaluation_number < self.max_evaluations:
            if (froot > 0.0 and fx_max > 0.0) or (froot < 0.0 and fx_max < 0.0):
                # Rename x_min, root, x_max and adjust bounds
                x_max, fx_max = x_min, fx_min
                e = d = root - x_min
            if abs(fx_max) < abs(froot):
                x_min, root, x_max = root, x_max, root
                fx_min, froot, fx_max = froot, fx_max, froot

            x_acc = 2.0 * EPSILON * abs(root) + 0.5 * accuracy
            x_mid = (x_max - root) / 2.0
            if abs(x_mid) <= x_acc or froot == 0.0:
                self.root = root
                return root

            if abs(e) >= x_acc and abs(fx_min) > abs(froot):
                # Attempt inverse quadratic interpolation
                s = froot / fx_min
                if x_min == x_max:
                    p = 2.0 * x_mid * s
                    q = 1.0 - s
                else:
                    q = fx_min / fx_max
                    r = froot / fx_max
                    p = s * (2.0 * x_mid * q * (q - r) - (root - x_min) * (r - 1.0))
                    q = (q - 1.0) * (r - 1.0) * (s - 1.0)
                if p > 0.0:
                    q = -q
                p = abs(p)
                min1 = 3.0 * x_mid * q - abs(x_acc * q)
                min2 = abs(e * q)
                if 2.0 * p < min(min1, min2):
                    e, d = d, p / q
                else:
                    d = e = x_mid
            else:
                d = e = x_mid

            x_min, fx_min = root, froot
            if abs(d) > x_acc:
                root += d
            else:
                root += x_acc if x_mid >= 0.0 else -x_acc
            froot = self._evaluate(f, root)
            self.root = root
            self.x_min, self.x_max = min(x_min, x_max), max(x_min, x_max)

        raise self._budget_exceeded(froot)


_SOLVERS = {
    "bisection": Bisection,
    "secant": Secant,
    "newton": Newton,
    "brent": Brent,
}


def create_solver(method: str, max_evaluations: int = 100) -> Solver1D:
    """
    Factory function to create a solver by name.

    Args:
        method: One of "bisection", "secant", "newton", "brent"
        max_evaluations: Evaluation budget

    Returns:
        Solver1D instance
    """
    key = method.lower().replace("-", "_").replace(" ", "_")
    if key not in _SOLVERS:
        raise ConfigurationError(f"Unknown solver: {method}")
    return _SOLVERS[key](max_evaluations=max_evaluations)


__all__ = [
    "Bisection",
    "Secant",
    "Newton",
    "Brent",
    "create_solver",
]
