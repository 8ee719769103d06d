"""
Day count, business day, compounding and frequency conventions.

Supported Day Counts:
- ACT/360: Actual days / 360 (money markets)
- ACT/365F: Actual days / 365 (curve time axis default)
- ACT/ACT: ISDA actual/actual, split at year boundaries
- 30/360: 30 days per month / 360 (fixed swap legs)

Business Day Conventions:
- Following, Modified Following, Preceding, Unadjusted

These are the collaborator interfaces the curve core consumes; they are
deliberately small.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
import calendar


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365_FIXED = "ACT/365F"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        mapping = {
            "ACT/360": cls.ACT_360,
            "ACT360": cls.ACT_360,
            "ACT/365": cls.ACT_365_FIXED,
            "ACT/365F": cls.ACT_365_FIXED,
            "ACT365": cls.ACT_365_FIXED,
            "ACT/ACT": cls.ACT_ACT,
            "ACTACT": cls.ACT_ACT,
            "30/360": cls.THIRTY_360,
            "30360": cls.THIRTY_360,
        }
        key = s.upper().replace(" ", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown day count convention: {s}")


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    FOLLOWING = "Following"
    PRECEDING = "Preceding"
    UNADJUSTED = "Unadjusted"


class Compounding(Enum):
    """Interest rate compounding convention."""
    CONTINUOUS = "Continuous"
    COMPOUNDED = "Compounded"
    SIMPLE = "Simple"


class Frequency(Enum):
    """Payments (or compounding periods) per year."""
    ANNUAL = 1
    SEMIANNUAL = 2
    QUARTERLY = 4
    MONTHLY = 12

    @classmethod
    def from_string(cls, s: str) -> "Frequency":
        mapping = {
            "ANNUAL": cls.ANNUAL,
            "SEMI": cls.SEMIANNUAL,
            "SEMIANNUAL": cls.SEMIANNUAL,
            "QUARTERLY": cls.QUARTERLY,
            "MONTHLY": cls.MONTHLY,
        }
        key = s.upper().replace("-", "").replace("_", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown frequency: {s}")

    @property
    def months(self) -> int:
        """Length of one period in months."""
        return 12 // self.value


@dataclass
class Conventions:
    """
    Container for helper conventions.

    Attributes:
        day_count: Day count convention for accrual
        business_day: Business day adjustment rule
        frequency: Payment frequency
        settlement_days: Business days from evaluation date to settlement
    """
    day_count: DayCount = DayCount.ACT_360
    business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING
    frequency: Frequency = Frequency.ANNUAL
    settlement_days: int = 2

    @classmethod
    def money_market(cls) -> "Conventions":
        """Deposit / FRA conventions."""
        return cls(
            day_count=DayCount.ACT_360,
            business_day=BusinessDayConvention.MODIFIED_FOLLOWING,
            frequency=Frequency.ANNUAL,
            settlement_days=2,
        )

    @classmethod
    def swap_fixed_leg(cls) -> "Conventions":
        """Annual 30/360 unadjusted fixed leg."""
        return cls(
            day_count=DayCount.THIRTY_360,
            business_day=BusinessDayConvention.UNADJUSTED,
            frequency=Frequency.ANNUAL,
            settlement_days=2,
        )

    @classmethod
    def swap_float_leg(cls) -> "Conventions":
        """Semiannual ACT/360 modified-following floating leg."""
        return cls(
            day_count=DayCount.ACT_360,
            business_day=BusinessDayConvention.MODIFIED_FOLLOWING,
            frequency=Frequency.SEMIANNUAL,
            settlement_days=2,
        )


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction as float (negative when end precedes start)
    """
    if start == end:
        return 0.0
    if start > end:
        return -year_fraction(end, start, day_count)

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    elif day_count == DayCount.ACT_365_FIXED:
        return actual_days / 365.0

    elif day_count == DayCount.ACT_ACT:
        # ISDA: each calendar year contributes days / days-in-that-year
        if start.year == end.year:
            return actual_days / _days_in_year(start.year)
        total = (date(start.year + 1, 1, 1) - start).days / _days_in_year(start.year)
        total += end.year - start.year - 1
        total += (end - date(end.year, 1, 1)).days / _days_in_year(end.year)
        return total

    elif day_count == DayCount.THIRTY_360:
        # 30/360 US (bond basis)
        d1 = min(start.day, 30)
        d2 = end.day
        if d2 == 31 and d1 == 30:
            d2 = 30
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0

    else:
        raise ValueError(f"Unknown day count: {day_count}")


def _days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "Compounding",
    "Frequency",
    "Conventions",
    "year_fraction",
]
