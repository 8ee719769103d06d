"""
Implied term structure: a base curve seen from a later reference date.
"""

from datetime import date
from typing import Optional

from ..conventions import DayCount
from ..dates import Calendar
from ..handle import Handle
from ..settings import EvaluationContext
from .termstructure import YieldTermStructure


class ImpliedTermStructure(YieldTermStructure):
    """
    Curve implied by a base curve at a new reference date d0.

    D(t) = D_base(t0 + t) / D_base(t0), where t0 is the base time of d0,
    i.e. the forward discount curve as of d0. Day count, calendar and max
    date are those of the base curve, so the base handle can be empty at
    construction and linked later.

    Args:
        base: Handle to the base curve
        reference_date: New reference date d0
        context: Evaluation-date register
    """

    def __init__(
        self,
        base: Handle,
        reference_date: date,
        context: Optional[EvaluationContext] = None
    ):
        super().__init__(reference_date=reference_date, context=context)
        self._base = base
        self.register_with(self._base)

    @property
    def base(self) -> Handle:
        return self._base

    @property
    def day_count(self) -> DayCount:
        return self._base.current_link().day_count

    @property
    def calendar(self) -> Calendar:
        return self._base.current_link().calendar

    @property
    def max_date(self) -> date:
        return self._base.current_link().max_date

    def _discount_impl(self, t: float) -> float:
        base = self._base.current_link()
        t0 = base.time_from_reference(self.reference_date)
        return base.discount(t0 + t, True) / base.discount(t0, True)

    def __repr__(self) -> str:
        return f"ImpliedTermStructure({self._base!r}, {self.reference_date})"


__all__ = [
    "ImpliedTermStructure",
]
