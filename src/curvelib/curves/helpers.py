"""
Rate helpers: calibration instruments for bootstrapping.

Defines the instruments used to build yield curves:
- DepositRateHelper: money market deposits
- FraRateHelper: forward rate agreements
- SwapRateHelper: fixed-vs-floating par swaps (single curve)

Each helper knows how to:
1. Derive its dates from the evaluation date (settlement lag + tenor)
2. Imply its market quote from a candidate curve
3. Report ``error(curve) = market quote - implied quote``, the function the
   bootstrap drives to zero

Helpers observe their quote and the evaluation context and forward
notifications, so a curve built on them is rebuilt when either changes.
"""

from abc import abstractmethod
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from ..conventions import (
    BusinessDayConvention,
    Conventions,
    DayCount,
    Frequency,
    year_fraction,
)
from ..dates import Calendar, TimeUnit, make_schedule, parse_tenor
from ..errors import ConfigurationError
from ..handle import Handle
from ..observable import ObservableObserver
from ..quotes import Quote, quote_handle
from ..settings import EvaluationContext, default_context
from .termstructure import YieldTermStructure

QuoteLike = Union[float, Quote, Handle]


class RateHelper(ObservableObserver):
    """
    Abstract base for curve calibration instruments.

    Attributes:
        quote: Handle to the market quote
        earliest_date: First date the helper needs the curve at
        maturity_date: Last date the helper needs the curve at; the
            bootstrap places a node here
    """

    def __init__(
        self,
        quote: QuoteLike,
        settlement_days: int = 2,
        calendar: Optional[Calendar] = None,
        context: Optional[EvaluationContext] = None
    ):
        super().__init__()
        self._quote = quote_handle(quote)
        self._settlement_days = settlement_days
        self._calendar = calendar if calendar is not None else Calendar()
        self._context = context if context is not None else default_context()
        self._dates_as_of: Optional[date] = None
        self._earliest: Optional[date] = None
        self._maturity: Optional[date] = None
        self.register_with(self._quote)
        self.register_with(self._context)

    @property
    def quote(self) -> Handle:
        return self._quote

    def quote_value(self) -> float:
        return self._quote.current_link().value()

    def is_valid(self) -> bool:
        """True if the quote handle is linked and holds a value."""
        return not self._quote.empty() and self._quote.current_link().is_valid()

    @property
    def settlement_date(self) -> date:
        return self._calendar.advance(
            self._context.evaluation_date, self._settlement_days, TimeUnit.DAYS
        )

    @property
    def earliest_date(self) -> date:
        self._ensure_dates()
        return self._earliest

    @property
    def maturity_date(self) -> date:
        self._ensure_dates()
        return self._maturity

    @property
    def latest_date(self) -> date:
        return self.maturity_date

    @property
    @abstractmethod
    def label(self) -> str:
        """Short description such as "Deposit 3M"."""

    @abstractmethod
    def _compute_dates(self, settlement: date) -> Tuple[date, date]:
        """Return (earliest_date, maturity_date) for a settlement date."""

    @abstractmethod
    def implied_quote(self, curve: YieldTermStructure) -> float:
        """Quote the instrument would have if ``curve`` were the market."""

    def error(self, curve: YieldTermStructure) -> float:
        """Market quote minus the quote implied by ``curve``."""
        return self.quote_value() - self.implied_quote(curve)

    def _ensure_dates(self) -> None:
        today = self._context.evaluation_date
        if self._dates_as_of != today:
            self._earliest, self._maturity = self._compute_dates(self.settlement_date)
            self._dates_as_of = today

    def update(self) -> None:
        self._dates_as_of = None
        self.notify_observers()

    def __repr__(self) -> str:
        value = self.quote_value() if self.is_valid() else None
        return f"{type(self).__name__}({self.label!r}, quote={value!r})"


class DepositRateHelper(RateHelper):
    """
    Money market deposit.

    Simple interest instrument from settlement to maturity, by default on
    ``Conventions.money_market()``.

    Implied rate: R = (D(start) / D(end) - 1) / tau
    """

    def __init__(
        self,
        rate: QuoteLike,
        n: int,
        unit: TimeUnit,
        settlement_days: Optional[int] = None,
        calendar: Optional[Calendar] = None,
        conventions: Optional[Conventions] = None,
        context: Optional[EvaluationContext] = None
    ):
        if n <= 0:
            raise ConfigurationError(f"deposit tenor must be positive, got {n}{unit.value}")
        self.conventions = conventions or Conventions.money_market()
        if settlement_days is None:
            settlement_days = self.conventions.settlement_days
        super().__init__(rate, settlement_days, calendar, context)
        self.n = n
        self.unit = unit

    @property
    def label(self) -> str:
        return f"Deposit {self.n}{self.unit.value}"

    def _compute_dates(self, settlement: date) -> Tuple[date, date]:
        maturity = self._calendar.advance(
            settlement, self.n, self.unit, self.conventions.business_day
        )
        return settlement, maturity

    def implied_quote(self, curve: YieldTermStructure) -> float:
        start, end = self.earliest_date, self.maturity_date
        tau = year_fraction(start, end, self.conventions.day_count)
        return (curve.discount(start) / curve.discount(end) - 1.0) / tau


class FraRateHelper(RateHelper):
    """
    Forward Rate Agreement.

    Forward period runs from settlement + months_to_start to
    settlement + months_to_end, by default on ``Conventions.money_market()``.

    Implied rate: F = (D(T1) / D(T2) - 1) / tau
    """

    def __init__(
        self,
        rate: QuoteLike,
        months_to_start: int,
        months_to_end: int,
        settlement_days: Optional[int] = None,
        calendar: Optional[Calendar] = None,
        conventions: Optional[Conventions] = None,
        context: Optional[EvaluationContext] = None
    ):
        if months_to_end <= months_to_start:
            raise ConfigurationError(
                f"FRA end ({months_to_end}M) must be after start ({months_to_start}M)"
            )
        self.conventions = conventions or Conventions.money_market()
        if settlement_days is None:
            settlement_days = self.conventions.settlement_days
        super().__init__(rate, settlement_days, calendar, context)
        self.months_to_start = months_to_start
        self.months_to_end = months_to_end

    @property
    def label(self) -> str:
        return f"FRA {self.months_to_start}x{self.months_to_end}"

    def _compute_dates(self, settlement: date) -> Tuple[date, date]:
        convention = self.conventions.business_day
        start = self._calendar.advance(
            settlement, self.months_to_start, TimeUnit.MONTHS, convention
        )
        end = self._calendar.advance(
            settlement, self.months_to_end, TimeUnit.MONTHS, convention
        )
        return start, end

    def implied_quote(self, curve: YieldTermStructure) -> float:
        start, end = self.earliest_date, self.maturity_date
        tau = year_fraction(start, end, self.conventions.day_count)
        return (curve.discount(start) / curve.discount(end) - 1.0) / tau


class SwapRateHelper(RateHelper):
    """
    Par swap, fixed leg against a floating leg projected off the same curve.

    Single-curve pricing:
    Par swap rate: R = sum(D(T[i-1]) - D(T[i])) / sum(delta_j * D(T[j]))
    where the numerator runs over the floating schedule and the
    denominator (the annuity) over the fixed schedule.

    Both schedules are rolled backward from the unadjusted maturity
    (settlement + tenor). Intermediate dates follow each leg's business
    day rule; both legs end on the maturity adjusted with the floating
    leg's rule.

    Args:
        fixed_leg: Fixed leg conventions (default ``Conventions.swap_fixed_leg()``)
        float_leg: Floating leg conventions (default ``Conventions.swap_float_leg()``)
    """

    def __init__(
        self,
        rate: QuoteLike,
        n: int,
        unit: TimeUnit,
        settlement_days: Optional[int] = None,
        calendar: Optional[Calendar] = None,
        fixed_leg: Optional[Conventions] = None,
        float_leg: Optional[Conventions] = None,
        context: Optional[EvaluationContext] = None
    ):
        if n <= 0:
            raise ConfigurationError(f"swap tenor must be positive, got {n}{unit.value}")
        self.fixed_leg = fixed_leg or Conventions.swap_fixed_leg()
        self.float_leg = float_leg or Conventions.swap_float_leg()
        if settlement_days is None:
            settlement_days = self.float_leg.settlement_days
        super().__init__(rate, settlement_days, calendar, context)
        self.n = n
        self.unit = unit
        self._fixed_schedule: List[date] = []
        self._float_schedule: List[date] = []

    @property
    def label(self) -> str:
        return f"Swap {self.n}{self.unit.value}"

    def _compute_dates(self, settlement: date) -> Tuple[date, date]:
        termination = self._calendar.advance(
            settlement, self.n, self.unit, BusinessDayConvention.UNADJUSTED
        )
        end_rule = self.float_leg.business_day
        self._fixed_schedule = make_schedule(
            settlement, termination, self.fixed_leg.frequency, self._calendar,
            self.fixed_leg.business_day, end_rule
        )
        self._float_schedule = make_schedule(
            settlement, termination, self.float_leg.frequency, self._calendar,
            self.float_leg.business_day, end_rule
        )
        return settlement, self._float_schedule[-1]

    @property
    def fixed_schedule(self) -> List[date]:
        self._ensure_dates()
        return list(self._fixed_schedule)

    @property
    def float_schedule(self) -> List[date]:
        self._ensure_dates()
        return list(self._float_schedule)

    def annuity(self, curve: YieldTermStructure) -> float:
        """Fixed-leg PV of a unit coupon."""
        schedule = self.fixed_schedule
        return sum(
            year_fraction(start, end, self.fixed_leg.day_count) * curve.discount(end)
            for start, end in zip(schedule[:-1], schedule[1:])
        )

    def floating_leg_value(self, curve: YieldTermStructure) -> float:
        schedule = self.float_schedule
        return sum(
            curve.discount(start) - curve.discount(end)
            for start, end in zip(schedule[:-1], schedule[1:])
        )

    def implied_quote(self, curve: YieldTermStructure) -> float:
        return self.floating_leg_value(curve) / self.annuity(curve)


def helpers_from_quotes(
    quotes: Union[pd.DataFrame, Sequence[Dict]],
    settlement_days: int = 2,
    calendar: Optional[Calendar] = None,
    context: Optional[EvaluationContext] = None
) -> List[RateHelper]:
    """
    Build rate helpers from a quote table.

    Args:
        quotes: DataFrame or list of dicts with columns ``instrument_type``
            (DEPOSIT, FRA, SWAP), ``tenor`` and ``quote`` (decimal).
            Optional: ``start_tenor`` (FRA start, months), ``day_count``
            (deposits/FRAs), ``fixed_frequency`` and ``float_frequency`` (swaps).
        settlement_days: Settlement lag for every helper
        calendar: Calendar for every helper
        context: Evaluation-date register

    Returns:
        List of helpers, in input order

    Example quote format:
        {"instrument_type": "DEPOSIT", "tenor": "3M", "quote": 0.0456}
        {"instrument_type": "FRA", "tenor": "3M", "start_tenor": "3M", "quote": 0.046}
        {"instrument_type": "SWAP", "tenor": "5Y", "quote": 0.0499}
    """
    frame = quotes if isinstance(quotes, pd.DataFrame) else pd.DataFrame(list(quotes))
    missing = {"instrument_type", "tenor", "quote"} - set(frame.columns)
    if missing:
        raise ConfigurationError(f"Quote table is missing columns: {sorted(missing)}")

    helpers: List[RateHelper] = []
    common = dict(settlement_days=settlement_days, calendar=calendar, context=context)

    for row in frame.to_dict("records"):
        inst_type = str(row["instrument_type"]).upper()
        n, unit = parse_tenor(str(row["tenor"]))
        quote = float(row["quote"])

        if inst_type == "DEPOSIT":
            conventions = _money_market(row)
            helpers.append(DepositRateHelper(quote, n, unit, conventions=conventions, **common))
        elif inst_type == "FRA":
            start_n, start_unit = parse_tenor(_optional(row, "start_tenor", "0M"))
            if unit != TimeUnit.MONTHS or start_unit != TimeUnit.MONTHS:
                raise ConfigurationError(f"FRA tenors must be in months: {row}")
            conventions = _money_market(row)
            helpers.append(FraRateHelper(
                quote, start_n, start_n + n, conventions=conventions, **common
            ))
        elif inst_type in ("SWAP", "IRS"):
            fixed_leg = Conventions.swap_fixed_leg()
            float_leg = Conventions.swap_float_leg()
            fixed_leg = replace(fixed_leg, frequency=Frequency.from_string(
                _optional(row, "fixed_frequency", fixed_leg.frequency.name)
            ))
            float_leg = replace(float_leg, frequency=Frequency.from_string(
                _optional(row, "float_frequency", float_leg.frequency.name)
            ))
            helpers.append(SwapRateHelper(
                quote, n, unit, fixed_leg=fixed_leg, float_leg=float_leg, **common
            ))
        else:
            raise ConfigurationError(f"Unsupported instrument_type: {row['instrument_type']}")

    return helpers


def _money_market(row: Dict) -> Conventions:
    conventions = Conventions.money_market()
    day_count = _optional(row, "day_count", None)
    if day_count is None:
        return conventions
    return replace(conventions, day_count=DayCount.from_string(day_count))


def _optional(row: Dict, key: str, default: Optional[str]) -> Optional[str]:
    value = row.get(key)
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    return str(value)


__all__ = [
    "RateHelper",
    "DepositRateHelper",
    "FraRateHelper",
    "SwapRateHelper",
    "helpers_from_quotes",
]
