"""
Date utilities for curve construction.

Provides:
- Tenor parsing ("3M", "2Y", ...) into (amount, TimeUnit)
- Calendar / NullCalendar with business-day adjustment and advance()
- Regular schedule generation for swap legs
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple
import calendar as _calendar
import re

from .conventions import BusinessDayConvention, Frequency


class TimeUnit(Enum):
    """Unit of a period."""
    DAYS = "D"
    WEEKS = "W"
    MONTHS = "M"
    YEARS = "Y"


# Tenor regex pattern: number + unit (D/W/M/Y)
TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)


def parse_tenor(tenor: str) -> Tuple[int, TimeUnit]:
    """
    Parse a tenor string into (amount, unit).

    Args:
        tenor: Tenor string like "1D", "3M", "2Y"

    Returns:
        Tuple of (amount, TimeUnit)

    Raises:
        ValueError: If tenor format is invalid
    """
    match = TENOR_PATTERN.match(tenor.upper().strip())
    if not match:
        raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")

    return int(match.group(1)), TimeUnit(match.group(2).upper())


def add_months(d: date, months: int, end_of_month: bool = False) -> date:
    """Add calendar months, clipping the day to the target month length."""
    year = d.year + (d.month + months - 1) // 12
    month = (d.month + months - 1) % 12 + 1
    last = _calendar.monthrange(year, month)[1]
    if end_of_month and d.day == _calendar.monthrange(d.year, d.month)[1]:
        return date(year, month, last)
    return date(year, month, min(d.day, last))


@dataclass(frozen=True)
class Calendar:
    """
    Weekend-plus-holidays business calendar.

    Attributes:
        name: Display name
        holidays: Explicit non-business dates
        weekend: Weekday numbers treated as weekend (5=Saturday, 6=Sunday)
    """
    name: str = "WeekendsOnly"
    holidays: FrozenSet[date] = field(default_factory=frozenset)
    weekend: FrozenSet[int] = frozenset({5, 6})

    @classmethod
    def with_holidays(cls, holidays: Iterable[date], name: str = "Custom") -> "Calendar":
        return cls(name=name, holidays=frozenset(holidays))

    def is_business_day(self, d: date) -> bool:
        """Check if a date is a business day."""
        if d.weekday() in self.weekend:
            return False
        return d not in self.holidays

    def adjust(
        self,
        d: date,
        convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING
    ) -> date:
        """
        Adjust a date according to business day convention.

        Args:
            d: Date to adjust
            convention: Business day adjustment rule

        Returns:
            Adjusted date
        """
        if convention == BusinessDayConvention.UNADJUSTED:
            return d

        if convention == BusinessDayConvention.PRECEDING:
            return self._roll(d, -1)

        adjusted = self._roll(d, 1)
        if convention == BusinessDayConvention.MODIFIED_FOLLOWING and adjusted.month != d.month:
            adjusted = self._roll(d, -1)
        return adjusted

    def advance(
        self,
        d: date,
        n: int,
        unit: TimeUnit,
        convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING,
        end_of_month: bool = False
    ) -> date:
        """
        Advance a date by n units.

        Days are counted in business days; weeks, months and years are
        calendar periods whose end is adjusted with ``convention``.
        """
        if unit == TimeUnit.DAYS:
            if n == 0:
                return self.adjust(d, convention)
            step = 1 if n > 0 else -1
            result = d
            remaining = abs(n)
            while remaining > 0:
                result += timedelta(days=step)
                if self.is_business_day(result):
                    remaining -= 1
            return result

        if unit == TimeUnit.WEEKS:
            result = d + timedelta(weeks=n)
        elif unit == TimeUnit.MONTHS:
            result = add_months(d, n, end_of_month)
        elif unit == TimeUnit.YEARS:
            result = add_months(d, 12 * n, end_of_month)
        else:
            raise ValueError(f"Unknown time unit: {unit}")

        return self.adjust(result, convention)

    def _roll(self, d: date, step: int) -> date:
        while not self.is_business_day(d):
            d += timedelta(days=step)
        return d


class NullCalendar(Calendar):
    """Calendar in which every day is a business day."""

    def __init__(self):
        super().__init__(name="Null", holidays=frozenset(), weekend=frozenset())


def make_schedule(
    start: date,
    end: date,
    frequency: Frequency,
    calendar: Optional[Calendar] = None,
    convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
    termination_convention: Optional[BusinessDayConvention] = None
) -> List[date]:
    """
    Generate a regular schedule between start and end dates.

    Dates are generated backward from the unadjusted ``end`` so any stub
    falls at the front. The returned list starts with ``start``;
    intermediate dates are adjusted with ``convention`` and the final date
    with ``termination_convention``.

    Args:
        start: Accrual start
        end: Unadjusted termination date
        frequency: Period frequency
        calendar: Calendar for adjustment (weekends-only if omitted)
        convention: Business day adjustment of intermediate dates
        termination_convention: Adjustment of the final date; defaults to
            ``convention``

    Returns:
        List of schedule dates, ascending
    """
    if end <= start:
        raise ValueError("Schedule end must be after start")

    cal = calendar if calendar is not None else Calendar()
    if termination_convention is None:
        termination_convention = convention
    unadjusted = [end]
    periods = 1
    while True:
        prev = add_months(end, -frequency.months * periods)
        if prev <= start:
            break
        unadjusted.insert(0, prev)
        periods += 1

    dates = [start] + [cal.adjust(d, convention) for d in unadjusted[:-1]]
    dates.append(cal.adjust(end, termination_convention))
    # adjustment can collapse a short front stub onto the start date
    return [d for i, d in enumerate(dates) if i == 0 or d > dates[i - 1]]


__all__ = [
    "TimeUnit",
    "parse_tenor",
    "add_months",
    "Calendar",
    "NullCalendar",
    "make_schedule",
]
