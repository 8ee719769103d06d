"""
Shared fixtures for the test suite.
"""

from datetime import date

import pytest

from curvelib import (
    Calendar,
    DayCount,
    DepositRateHelper,
    EvaluationContext,
    Observer,
    PiecewiseFlatForward,
    SwapRateHelper,
    TimeUnit,
)

DEPOSIT_DATA = [
    (1, TimeUnit.MONTHS, 4.581),
    (2, TimeUnit.MONTHS, 4.573),
    (3, TimeUnit.MONTHS, 4.557),
    (6, TimeUnit.MONTHS, 4.496),
    (9, TimeUnit.MONTHS, 4.490),
]

SWAP_DATA = [
    (1, TimeUnit.YEARS, 4.54),
    (5, TimeUnit.YEARS, 4.99),
    (10, TimeUnit.YEARS, 5.47),
    (20, TimeUnit.YEARS, 5.89),
    (30, TimeUnit.YEARS, 5.96),
]


class Flag(Observer):
    """Observer that records notifications."""

    def __init__(self):
        super().__init__()
        self.up = False
        self.count = 0

    def update(self):
        self.up = True
        self.count += 1

    def lower(self):
        self.up = False


@pytest.fixture
def flag():
    return Flag()


@pytest.fixture
def today():
    """A Monday."""
    return date(2024, 1, 15)


@pytest.fixture
def context(today):
    return EvaluationContext(today)


@pytest.fixture
def calendar():
    return Calendar()


def make_helpers(context, calendar, settlement_days=2):
    """Deposit and swap helpers on the standard test quotes."""
    helpers = [
        DepositRateHelper(rate / 100, n, unit, settlement_days, calendar, context=context)
        for n, unit, rate in DEPOSIT_DATA
    ]
    helpers += [
        SwapRateHelper(rate / 100, n, unit, settlement_days, calendar, context=context)
        for n, unit, rate in SWAP_DATA
    ]
    return helpers


@pytest.fixture
def market_helpers(context, calendar):
    return make_helpers(context, calendar)


@pytest.fixture
def market_curve(context, calendar, market_helpers):
    """Flat-forward curve bootstrapped on the standard quotes at settlement."""
    settlement = calendar.advance(context.evaluation_date, 2, TimeUnit.DAYS)
    return PiecewiseFlatForward(
        market_helpers,
        day_count=DayCount.ACT_360,
        reference_date=settlement,
        context=context,
    )


@pytest.fixture
def make_flag():
    """Factory for extra Flag observers."""
    return Flag


@pytest.fixture
def helper_factory():
    return make_helpers
