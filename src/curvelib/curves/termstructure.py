"""
Yield term structure abstraction.

The YieldTermStructure class provides:
- Discount factor D(t)
- Zero rate z(t)
- Forward rate f(t1, t2)
- Instantaneous forward rate f(t)

All of them can be queried with a date or with a year fraction from the
reference date. The single primitive a subclass must supply is
``_discount_impl(t)``; zero and forward rates are derived from it unless a
subclass overrides ``_zero_yield_impl`` / ``_forward_impl`` analytically.

Reference date modes:
- fixed: ``reference_date=`` given at construction
- moving: ``settlement_days=`` (and ``calendar=``) given; the reference
  date follows the evaluation date of the context
- delegated: neither given; the subclass overrides ``reference_date``

Conventions:
    - Zero rates are continuously compounded unless requested otherwise
    - Times are year fractions from the reference date under ``day_count``
    - Discount factor at t=0 is 1.0
"""

from abc import abstractmethod
from datetime import date
import logging
from typing import Dict, Optional, Union

import numpy as np

from ..conventions import Compounding, DayCount, Frequency, year_fraction
from ..dates import Calendar, NullCalendar, TimeUnit
from ..errors import ConfigurationError, DomainError
from ..observable import ObservableObserver
from ..settings import EvaluationContext, default_context

logger = logging.getLogger(__name__)

DateOrTime = Union[date, float]

# Step used for numerical forwards and for zero rates at t=0
DT = 1e-4


class YieldTermStructure(ObservableObserver):
    """
    Observable discount curve.

    Attributes:
        day_count: Day count for the time axis
        reference_date: Date at which discount is 1
        context: Evaluation-date register the curve reads

    Discount factors are cached by time. The cache survives queries at
    new dates and is cleared only when the curve is notified (an input
    changed or the evaluation date moved).
    """

    def __init__(
        self,
        day_count: DayCount = DayCount.ACT_365_FIXED,
        reference_date: Optional[date] = None,
        settlement_days: Optional[int] = None,
        calendar: Optional[Calendar] = None,
        context: Optional[EvaluationContext] = None
    ):
        super().__init__()
        if reference_date is not None and settlement_days is not None:
            raise ConfigurationError(
                "give either reference_date or settlement_days, not both"
            )
        self._day_count = day_count
        self._fixed_reference = reference_date
        self._settlement_days = settlement_days
        self._calendar = calendar if calendar is not None else NullCalendar()
        self._context = context if context is not None else default_context()
        self._moving_reference: Optional[date] = None
        self._extrapolate = False
        self._cache: Dict[float, float] = {}

        if settlement_days is not None:
            self.register_with(self._context)

    # ------------------------------------------------------------------
    # Dates and times
    # ------------------------------------------------------------------

    @property
    def context(self) -> EvaluationContext:
        return self._context

    @property
    def day_count(self) -> DayCount:
        return self._day_count

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def settlement_days(self) -> Optional[int]:
        return self._settlement_days

    @property
    def reference_date(self) -> date:
        """Date at which the discount factor is 1."""
        if self._fixed_reference is not None:
            return self._fixed_reference
        if self._settlement_days is None:
            raise ConfigurationError(
                f"{type(self).__name__} has no reference date: pass reference_date "
                "or settlement_days, or override reference_date"
            )
        if self._moving_reference is None:
            self._moving_reference = self._calendar.advance(
                self._context.evaluation_date, self._settlement_days, TimeUnit.DAYS
            )
        return self._moving_reference

    @property
    def max_date(self) -> date:
        """Latest date the curve can be queried at without extrapolation."""
        return date.max

    @property
    def max_time(self) -> float:
        return self.time_from_reference(self.max_date)

    def time_from_reference(self, d: date) -> float:
        """Year fraction from the reference date to ``d``."""
        return year_fraction(self.reference_date, d, self.day_count)

    # ------------------------------------------------------------------
    # Extrapolation
    # ------------------------------------------------------------------

    def enable_extrapolation(self) -> None:
        self._extrapolate = True

    def disable_extrapolation(self) -> None:
        self._extrapolate = False

    @property
    def allows_extrapolation(self) -> bool:
        return self._extrapolate

    # ------------------------------------------------------------------
    # Public queries
    # ------------------------------------------------------------------

    def discount(self, x: DateOrTime, extrapolate: bool = False) -> float:
        """
        Get discount factor D(t).

        Args:
            x: Date or year fraction from the reference date
            extrapolate: Allow queries beyond max_date

        Returns:
            Discount factor
        """
        t = self._to_time(x, extrapolate)
        return self._discount(t)

    def zero_yield(
        self,
        x: DateOrTime,
        compounding: Compounding = Compounding.CONTINUOUS,
        frequency: Frequency = Frequency.ANNUAL,
        extrapolate: bool = False
    ) -> float:
        """
        Get zero rate z(t).

        At t=0 the rate over the first DT is returned.

        Args:
            x: Date or year fraction
            compounding: Compounding convention for output
            frequency: Compounding frequency (COMPOUNDED only)
            extrapolate: Allow queries beyond max_date

        Returns:
            Zero rate (default continuously compounded)
        """
        t = self._to_time(x, extrapolate)
        if t == 0.0:
            t = DT
        z = self._zero_yield_impl(t)
        return _from_continuous(z, t, compounding, frequency)

    def forward(
        self,
        x1: DateOrTime,
        x2: DateOrTime,
        compounding: Compounding = Compounding.CONTINUOUS,
        frequency: Frequency = Frequency.ANNUAL,
        extrapolate: bool = False
    ) -> float:
        """
        Get forward rate f(t1, t2).

        Args:
            x1: Start (date or year fraction)
            x2: End (date or year fraction)
            compounding: Compounding convention
            frequency: Compounding frequency (COMPOUNDED only)
            extrapolate: Allow queries beyond max_date

        Returns:
            Forward rate between t1 and t2
        """
        t1 = self._to_time(x1, extrapolate)
        t2 = self._to_time(x2, extrapolate)
        if t2 < t1:
            raise DomainError(f"forward end ({x2}) precedes start ({x1})")
        if t2 == t1:
            return _from_continuous(self._forward_impl(t1), DT, compounding, frequency)

        f = float(np.log(self._discount(t1) / self._discount(t2))) / (t2 - t1)
        return _from_continuous(f, t2 - t1, compounding, frequency)

    def instantaneous_forward(self, x: DateOrTime, extrapolate: bool = False) -> float:
        """
        Get instantaneous forward rate f(t) = -d/dt ln D(t).

        Args:
            x: Date or year fraction
            extrapolate: Allow queries beyond max_date

        Returns:
            Continuously compounded instantaneous forward
        """
        t = self._to_time(x, extrapolate)
        return self._forward_impl(t)

    # ------------------------------------------------------------------
    # Notification
    # ------------------------------------------------------------------

    def update(self) -> None:
        self._cache.clear()
        self._moving_reference = None
        self.notify_observers()

    # ------------------------------------------------------------------
    # Implementation hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _discount_impl(self, t: float) -> float:
        """Discount factor at time t >= 0 (uncached)."""

    def _zero_yield_impl(self, t: float) -> float:
        return -float(np.log(self._discount(t))) / t

    def _forward_impl(self, t: float) -> float:
        t1 = max(t - DT / 2.0, 0.0)
        t2 = t + DT / 2.0
        return float(np.log(self._discount(t1) / self._discount(t2))) / (t2 - t1)

    def _discount(self, t: float) -> float:
        df = self._cache.get(t)
        if df is None:
            df = float(self._discount_impl(t))
            self._cache[t] = df
        return df

    def _to_time(self, x: DateOrTime, extrapolate: bool) -> float:
        if isinstance(x, date):
            if x < self.reference_date:
                raise DomainError(
                    f"date ({x}) before reference date ({self.reference_date})"
                )
            t = self.time_from_reference(x)
        else:
            t = float(x)
            if t < 0.0:
                raise DomainError(f"negative time ({t}) given")
        if t > self.max_time and not (extrapolate or self._extrapolate):
            raise DomainError(
                f"time ({t:.6f}) is past max curve time ({self.max_time:.6f})"
            )
        return t


def _from_continuous(
    rate: float,
    t: float,
    compounding: Compounding,
    frequency: Frequency
) -> float:
    """Convert a continuously compounded rate over ``t`` years."""
    if compounding == Compounding.CONTINUOUS:
        return rate
    if compounding == Compounding.SIMPLE:
        return float(np.expm1(rate * t)) / t
    if compounding == Compounding.COMPOUNDED:
        f = frequency.value
        return f * float(np.expm1(rate / f))
    raise ValueError(f"Unknown compounding: {compounding}")


def to_continuous(
    rate: float,
    compounding: Compounding,
    frequency: Frequency = Frequency.ANNUAL,
    t: Optional[float] = None
) -> float:
    """Convert a rate in the given compounding to its continuous equivalent."""
    if compounding == Compounding.CONTINUOUS:
        return rate
    if compounding == Compounding.COMPOUNDED:
        f = frequency.value
        return f * float(np.log1p(rate / f))
    if compounding == Compounding.SIMPLE:
        if t is None or t <= 0.0:
            raise ConfigurationError("simple compounding needs a positive period")
        return float(np.log1p(rate * t)) / t
    raise ValueError(f"Unknown compounding: {compounding}")


__all__ = [
    "YieldTermStructure",
    "DateOrTime",
    "to_continuous",
]
