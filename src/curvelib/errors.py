"""
Error taxonomy for curve construction.

Provides:
- ConfigurationError: bad setup (unsorted/duplicate helpers, missing quotes,
  no achievable bracket)
- ConvergenceError: a solver ran out of evaluations before reaching accuracy
- DomainError: invalid query (date before reference, empty handle, unset quote)
- NotificationError: one or more observers failed during a notification pass

All errors derive from the builtin ValueError/RuntimeError so that callers
catching those keep working.
"""

from typing import List, Optional, Tuple


class CurveLibError(Exception):
    """Base class for all curvelib errors."""


class ConfigurationError(CurveLibError, ValueError):
    """Raised at setup time for inputs that can never produce a result."""


class BracketError(ConfigurationError):
    """Raised when a solver cannot find or was not given a valid bracket."""


class ConvergenceError(CurveLibError, RuntimeError):
    """
    Raised when a solver exhausts its evaluation budget.

    Attributes:
        evaluations: Number of function evaluations performed
        bracket: Last (x_min, x_max) bracket, if one was established
        last_value: Last residual f(x) computed
    """

    def __init__(
        self,
        message: str,
        evaluations: int = 0,
        bracket: Optional[Tuple[float, float]] = None,
        last_value: Optional[float] = None,
    ):
        super().__init__(message)
        self.evaluations = evaluations
        self.bracket = bracket
        self.last_value = last_value


class DomainError(CurveLibError, ValueError):
    """Raised when a query falls outside the valid domain."""


class NotificationError(CurveLibError, RuntimeError):
    """
    Raised after a notification pass in which observers failed.

    The exception is chained to the first failure; all of them are kept
    in ``failures``.
    """

    def __init__(self, message: str, failures: List[BaseException]):
        super().__init__(message)
        self.failures = failures


__all__ = [
    "CurveLibError",
    "ConfigurationError",
    "BracketError",
    "ConvergenceError",
    "DomainError",
    "NotificationError",
]
