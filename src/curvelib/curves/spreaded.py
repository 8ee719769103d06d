"""
Spreaded term structures.

Provides:
- ForwardSpreadedTermStructure: base instantaneous forwards plus a spread
- ZeroSpreadedTermStructure: base zero rates plus a spread

Both take their reference date, day count, calendar and max date from the
base curve and observe both the base-curve handle and the spread handle,
so relinking either or moving the spread quote notifies their observers.
Spreads are continuously compounded.
"""

from datetime import date
from typing import Optional, Union

import numpy as np

from ..conventions import DayCount
from ..dates import Calendar
from ..handle import Handle
from ..quotes import Quote, quote_handle
from ..settings import EvaluationContext
from .termstructure import YieldTermStructure


class _SpreadedTermStructure(YieldTermStructure):
    """Base-curve delegation shared by the spreaded curves."""

    def __init__(
        self,
        base: Handle,
        spread: Union[float, Quote, Handle],
        context: Optional[EvaluationContext] = None
    ):
        super().__init__(context=context)
        self._base = base
        self._spread = quote_handle(spread)
        self.register_with(self._base)
        self.register_with(self._spread)

    @property
    def base(self) -> Handle:
        return self._base

    @property
    def spread(self) -> Handle:
        return self._spread

    @property
    def reference_date(self) -> date:
        return self._base.current_link().reference_date

    @property
    def day_count(self) -> DayCount:
        return self._base.current_link().day_count

    @property
    def calendar(self) -> Calendar:
        return self._base.current_link().calendar

    @property
    def settlement_days(self) -> Optional[int]:
        return self._base.current_link().settlement_days

    @property
    def max_date(self) -> date:
        return self._base.current_link().max_date

    def _spread_value(self) -> float:
        return self._spread.current_link().value()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._base!r}, {self._spread!r})"


class ForwardSpreadedTermStructure(_SpreadedTermStructure):
    """
    Base curve with its instantaneous forwards shifted by a spread s.

    f(t) = f_base(t) + s, z(t) = z_base(t) + s, D(t) = D_base(t) exp(-s t)
    """

    def _discount_impl(self, t: float) -> float:
        base = self._base.current_link()
        return base.discount(t, True) * float(np.exp(-self._spread_value() * t))

    def _zero_yield_impl(self, t: float) -> float:
        return self._base.current_link().zero_yield(t, extrapolate=True) + self._spread_value()

    def _forward_impl(self, t: float) -> float:
        return self._base.current_link().instantaneous_forward(t, True) + self._spread_value()


class ZeroSpreadedTermStructure(_SpreadedTermStructure):
    """
    Base curve with its zero rates shifted by a spread s.

    z(t) = z_base(t) + s, D(t) = exp(-(z_base(t) + s) t)
    """

    def _discount_impl(self, t: float) -> float:
        if t == 0.0:
            return 1.0
        return float(np.exp(-self._zero_yield_impl(t) * t))

    def _zero_yield_impl(self, t: float) -> float:
        return self._base.current_link().zero_yield(t, extrapolate=True) + self._spread_value()

    def _forward_impl(self, t: float) -> float:
        return self._base.current_link().instantaneous_forward(t, True) + self._spread_value()


__all__ = [
    "ForwardSpreadedTermStructure",
    "ZeroSpreadedTermStructure",
]
