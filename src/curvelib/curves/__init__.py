"""
Curves package - yield term structures and curve bootstrapping.

Provides:
- YieldTermStructure: Observable discount curve base class
- FlatForward: Constant forward rate curve
- PiecewiseYieldCurve: Curve bootstrapped from rate helpers
- ImpliedTermStructure, ForwardSpreadedTermStructure,
  ZeroSpreadedTermStructure: Curves derived from a base curve handle
"""

from .termstructure import YieldTermStructure, to_continuous
from .flat_forward import FlatForward
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    LogLinearInterpolator,
    BackwardFlatInterpolator,
)
from .traits import (
    BootstrapTraits,
    FlatForwardTraits,
    LogDiscountTraits,
    LinearZeroTraits,
    create_traits,
)
from .helpers import (
    RateHelper,
    DepositRateHelper,
    FraRateHelper,
    SwapRateHelper,
    helpers_from_quotes,
)
from .piecewise import PiecewiseYieldCurve, PiecewiseFlatForward, bootstrap_from_quotes
from .implied import ImpliedTermStructure
from .spreaded import ForwardSpreadedTermStructure, ZeroSpreadedTermStructure

__all__ = [
    "YieldTermStructure",
    "to_continuous",
    "FlatForward",
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "BackwardFlatInterpolator",
    "BootstrapTraits",
    "FlatForwardTraits",
    "LogDiscountTraits",
    "LinearZeroTraits",
    "create_traits",
    "RateHelper",
    "DepositRateHelper",
    "FraRateHelper",
    "SwapRateHelper",
    "helpers_from_quotes",
    "PiecewiseYieldCurve",
    "PiecewiseFlatForward",
    "bootstrap_from_quotes",
    "ImpliedTermStructure",
    "ForwardSpreadedTermStructure",
    "ZeroSpreadedTermStructure",
]
