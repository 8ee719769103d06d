"""
Flat forward curve.
"""

from datetime import date
from typing import Optional, Union

import numpy as np

from ..conventions import Compounding, DayCount, Frequency
from ..dates import Calendar
from ..errors import ConfigurationError
from ..handle import Handle
from ..quotes import Quote, quote_handle
from ..settings import EvaluationContext
from .termstructure import YieldTermStructure, to_continuous


class FlatForward(YieldTermStructure):
    """
    Curve with a constant forward rate.

    The rate may be a float or an observable quote (Quote or Handle); a
    quote change notifies the curve's observers.

    Args:
        forward: Forward rate
        day_count: Day count for the time axis
        reference_date: Fixed reference date
        settlement_days: Business days from the evaluation date to the
            reference date (moving curve)
        calendar: Calendar for settlement_days
        compounding: Compounding of ``forward`` (continuous or compounded)
        frequency: Compounding frequency for COMPOUNDED
        context: Evaluation-date register
    """

    def __init__(
        self,
        forward: Union[float, Quote, Handle],
        day_count: DayCount = DayCount.ACT_365_FIXED,
        reference_date: Optional[date] = None,
        settlement_days: Optional[int] = None,
        calendar: Optional[Calendar] = None,
        compounding: Compounding = Compounding.CONTINUOUS,
        frequency: Frequency = Frequency.ANNUAL,
        context: Optional[EvaluationContext] = None
    ):
        if compounding == Compounding.SIMPLE:
            raise ConfigurationError("a flat forward cannot be quoted with simple compounding")
        super().__init__(day_count, reference_date, settlement_days, calendar, context)
        self._forward = quote_handle(forward)
        self._compounding = compounding
        self._frequency = frequency
        self.register_with(self._forward)

    @property
    def forward_quote(self) -> Handle:
        return self._forward

    def _rate(self) -> float:
        r = self._forward.current_link().value()
        return to_continuous(r, self._compounding, self._frequency)

    def _discount_impl(self, t: float) -> float:
        return float(np.exp(-self._rate() * t))

    def _zero_yield_impl(self, t: float) -> float:
        return self._rate()

    def _forward_impl(self, t: float) -> float:
        return self._rate()

    def __repr__(self) -> str:
        return f"FlatForward({self._forward!r}, {self.day_count.value})"


__all__ = [
    "FlatForward",
]
