"""
Unit tests for rate helpers.
"""

from datetime import date
import numpy as np
import pandas as pd
import pytest

from curvelib import (
    ConfigurationError,
    Conventions,
    DayCount,
    DepositRateHelper,
    FlatForward,
    FraRateHelper,
    Handle,
    RateHelper,
    SimpleQuote,
    SwapRateHelper,
    TimeUnit,
    helpers_from_quotes,
    year_fraction,
)
from curvelib.conventions import BusinessDayConvention, Frequency


@pytest.fixture
def flat_curve(today, context):
    return FlatForward(0.03, DayCount.ACT_365_FIXED, reference_date=today, context=context)


def flat_discount(today, d):
    """Discount factor of the 3% flat curve, computed by hand."""
    return np.exp(-0.03 * (d - today).days / 365.0)


class TestDepositRateHelper:
    """Tests for deposits."""

    def test_dates(self, context, calendar):
        helper = DepositRateHelper(0.0456, 3, TimeUnit.MONTHS, calendar=calendar, context=context)
        assert helper.earliest_date == date(2024, 1, 17)
        assert helper.maturity_date == date(2024, 4, 17)
        assert helper.latest_date == helper.maturity_date
        assert helper.label == "Deposit 3M"

    def test_implied_quote_on_flat_curve(self, context, calendar, flat_curve):
        helper = DepositRateHelper(0.0456, 3, TimeUnit.MONTHS, calendar=calendar, context=context)
        start, end = helper.earliest_date, helper.maturity_date
        tau = year_fraction(start, end, DayCount.ACT_360)
        t = year_fraction(start, end, DayCount.ACT_365_FIXED)
        expected = np.expm1(0.03 * t) / tau

        assert abs(helper.implied_quote(flat_curve) - expected) < 1e-12
        assert abs(helper.error(flat_curve) - (0.0456 - expected)) < 1e-12

    def test_dates_follow_evaluation_date(self, context, calendar, flag):
        helper = DepositRateHelper(0.0456, 3, TimeUnit.MONTHS, calendar=calendar, context=context)
        flag.register_with(helper)
        assert helper.earliest_date == date(2024, 1, 17)

        context.advance(1)

        assert flag.up
        assert helper.earliest_date == date(2024, 1, 18)
        assert helper.maturity_date == date(2024, 4, 18)

    def test_quote_change_notifies(self, context, flag):
        quote = SimpleQuote(0.0456)
        helper = DepositRateHelper(quote, 3, TimeUnit.MONTHS, context=context)
        flag.register_with(helper)

        quote.set_value(0.0460)

        assert flag.up
        assert helper.quote_value() == 0.0460

    def test_relinked_quote_handle(self, context, flag):
        handle = Handle(SimpleQuote(0.0456))
        helper = DepositRateHelper(handle, 3, TimeUnit.MONTHS, context=context)
        flag.register_with(helper)

        handle.link_to(SimpleQuote(0.0470))

        assert flag.up
        assert helper.quote_value() == 0.0470

    def test_invalid_quote(self, context):
        assert not DepositRateHelper(SimpleQuote(), 3, TimeUnit.MONTHS, context=context).is_valid()
        assert not DepositRateHelper(Handle(), 3, TimeUnit.MONTHS, context=context).is_valid()

    def test_non_positive_tenor(self, context):
        with pytest.raises(ConfigurationError):
            DepositRateHelper(0.0456, 0, TimeUnit.MONTHS, context=context)

    def test_money_market_conventions(self, today, context):
        helper = DepositRateHelper(0.0456, 3, TimeUnit.MONTHS, context=context)
        assert helper.conventions == Conventions.money_market()

        same_day = Conventions(day_count=DayCount.ACT_365_FIXED, settlement_days=0)
        helper = DepositRateHelper(0.0456, 3, TimeUnit.MONTHS, conventions=same_day, context=context)
        assert helper.earliest_date == today
        assert helper.maturity_date == date(2024, 4, 15)

    def test_base_class_is_abstract(self, context):
        with pytest.raises(TypeError):
            RateHelper(0.0456, context=context)


class TestFraRateHelper:
    """Tests for FRAs."""

    def test_dates(self, context, calendar):
        helper = FraRateHelper(0.046, 3, 6, calendar=calendar, context=context)
        assert helper.earliest_date == date(2024, 4, 17)
        assert helper.maturity_date == date(2024, 7, 17)
        assert helper.label == "FRA 3x6"

    def test_implied_quote_on_flat_curve(self, context, calendar, flat_curve):
        helper = FraRateHelper(0.046, 3, 6, calendar=calendar, context=context)
        start, end = helper.earliest_date, helper.maturity_date
        tau = year_fraction(start, end, DayCount.ACT_360)
        t = year_fraction(start, end, DayCount.ACT_365_FIXED)

        assert abs(helper.implied_quote(flat_curve) - np.expm1(0.03 * t) / tau) < 1e-12

    def test_end_before_start(self, context):
        with pytest.raises(ConfigurationError):
            FraRateHelper(0.046, 6, 3, context=context)


class TestSwapRateHelper:
    """Tests for par swaps."""

    def test_schedules(self, context, calendar):
        helper = SwapRateHelper(0.0499, 5, TimeUnit.YEARS, calendar=calendar, context=context)
        assert helper.earliest_date == date(2024, 1, 17)
        assert helper.maturity_date == date(2029, 1, 17)
        assert len(helper.fixed_schedule) == 6
        assert len(helper.float_schedule) == 11
        assert helper.fixed_schedule[0] == helper.earliest_date
        assert helper.float_schedule[-1] == helper.maturity_date

    def test_par_rate_on_flat_curve(self, today, context, calendar, flat_curve):
        helper = SwapRateHelper(0.0499, 5, TimeUnit.YEARS, calendar=calendar, context=context)

        # unadjusted annual 30/360 coupons: every accrual is exactly one year
        coupon_dates = [date(y, 1, 17) for y in range(2025, 2030)]
        annuity = sum(flat_discount(today, d) for d in coupon_dates)
        float_leg = flat_discount(today, date(2024, 1, 17)) - flat_discount(today, date(2029, 1, 17))

        assert abs(helper.floating_leg_value(flat_curve) - float_leg) < 1e-14
        assert abs(helper.annuity(flat_curve) - annuity) < 1e-14
        assert abs(helper.implied_quote(flat_curve) - float_leg / annuity) < 1e-12

    def test_weekend_maturity_schedules(self, context, calendar):
        # 2026-01-17 is a Saturday
        helper = SwapRateHelper(0.047, 2, TimeUnit.YEARS, calendar=calendar, context=context)

        assert helper.maturity_date == date(2026, 1, 19)
        assert helper.fixed_schedule == [date(2024, 1, 17), date(2025, 1, 17), date(2026, 1, 19)]
        assert helper.float_schedule == [
            date(2024, 1, 17), date(2024, 7, 17), date(2025, 1, 17),
            date(2025, 7, 17), date(2026, 1, 19),
        ]

    def test_weekend_maturity_par_rate(self, today, context, calendar, flat_curve):
        helper = SwapRateHelper(0.047, 2, TimeUnit.YEARS, calendar=calendar, context=context)

        # second coupon accrues 2025-01-17 to 2026-01-19: 362/360 under 30/360
        annuity = (
            flat_discount(today, date(2025, 1, 17))
            + 362.0 / 360.0 * flat_discount(today, date(2026, 1, 19))
        )
        float_leg = flat_discount(today, date(2024, 1, 17)) - flat_discount(today, date(2026, 1, 19))

        assert abs(helper.annuity(flat_curve) - annuity) < 1e-14
        assert abs(helper.implied_quote(flat_curve) - float_leg / annuity) < 1e-12

    def test_leg_conventions(self, context, calendar):
        helper = SwapRateHelper(0.047, 2, TimeUnit.YEARS, calendar=calendar, context=context)
        assert helper.fixed_leg == Conventions.swap_fixed_leg()
        assert helper.float_leg == Conventions.swap_float_leg()

        semiannual = Conventions(
            day_count=DayCount.ACT_360,
            business_day=BusinessDayConvention.MODIFIED_FOLLOWING,
            frequency=Frequency.SEMIANNUAL,
        )
        helper = SwapRateHelper(
            0.047, 2, TimeUnit.YEARS, calendar=calendar, fixed_leg=semiannual, context=context
        )
        assert len(helper.fixed_schedule) == 5

    def test_implied_rate_increases_with_curve_level(self, today, context, calendar):
        helper = SwapRateHelper(0.0499, 5, TimeUnit.YEARS, calendar=calendar, context=context)
        low = FlatForward(0.02, reference_date=today, context=context)
        high = FlatForward(0.04, reference_date=today, context=context)
        assert helper.implied_quote(low) < helper.implied_quote(high)


class TestHelpersFromQuotes:
    """Tests for building helpers from a quote table."""

    def test_from_records(self, context):
        quotes = [
            {"instrument_type": "DEPOSIT", "tenor": "3M", "quote": 0.0456},
            {"instrument_type": "FRA", "tenor": "3M", "start_tenor": "3M", "quote": 0.046},
            {"instrument_type": "SWAP", "tenor": "5Y", "quote": 0.0499},
        ]
        helpers = helpers_from_quotes(quotes, context=context)

        assert [type(h) for h in helpers] == [DepositRateHelper, FraRateHelper, SwapRateHelper]
        assert [h.label for h in helpers] == ["Deposit 3M", "FRA 3x6", "Swap 5Y"]
        assert helpers[2].quote_value() == 0.0499

    def test_from_dataframe(self, context):
        frame = pd.DataFrame({
            "instrument_type": ["deposit", "swap"],
            "tenor": ["6M", "2Y"],
            "quote": [0.045, 0.047],
            "start_tenor": [np.nan, np.nan],
        })
        helpers = helpers_from_quotes(frame, context=context)
        assert [h.label for h in helpers] == ["Deposit 6M", "Swap 2Y"]

    def test_day_count_override(self, context):
        helpers = helpers_from_quotes(
            [{"instrument_type": "DEPOSIT", "tenor": "3M", "quote": 0.0456, "day_count": "ACT/365F"},
             {"instrument_type": "DEPOSIT", "tenor": "6M", "quote": 0.0450}],
            context=context,
        )
        assert helpers[0].conventions.day_count == DayCount.ACT_365_FIXED
        assert helpers[1].conventions == Conventions.money_market()

    def test_swap_frequencies(self, context):
        helpers = helpers_from_quotes(
            [{"instrument_type": "SWAP", "tenor": "2Y", "quote": 0.047,
              "fixed_frequency": "SEMIANNUAL", "float_frequency": "QUARTERLY"}],
            context=context,
        )
        assert len(helpers[0].fixed_schedule) == 5
        assert len(helpers[0].float_schedule) == 9

    def test_unknown_instrument(self, context):
        with pytest.raises(ConfigurationError):
            helpers_from_quotes(
                [{"instrument_type": "FUTURE", "tenor": "3M", "quote": 0.046}], context=context
            )

    def test_missing_columns(self, context):
        with pytest.raises(ConfigurationError):
            helpers_from_quotes([{"tenor": "3M", "quote": 0.046}], context=context)
