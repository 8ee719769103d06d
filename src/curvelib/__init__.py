"""
CurveLib: Observable yield term structures and curve bootstrapping

A modular library for:
- Observer/observable dependency graphs with relinkable handles
- Market quotes and a process-wide evaluation date
- One-dimensional root finding with bracketing and evaluation budgets
- Yield term structures: flat forward, piecewise bootstrapped from
  deposits/FRAs/swaps, implied and spreaded curves

Every curve observes its inputs, so a quote change or a new evaluation
date invalidates and rebuilds whatever depends on it.
"""

import logging

__version__ = "0.1.0"

# Core modules
from .errors import (
    CurveLibError,
    ConfigurationError,
    BracketError,
    ConvergenceError,
    DomainError,
    NotificationError,
)
from .conventions import (
    DayCount,
    BusinessDayConvention,
    Compounding,
    Frequency,
    Conventions,
    year_fraction,
)
from .dates import TimeUnit, Calendar, NullCalendar, parse_tenor, make_schedule
from .config import BootstrapConfig

# Observability
from .observable import Observable, Observer, ObservableObserver
from .handle import Handle, RelinkableHandle
from .quotes import Quote, SimpleQuote, quote_handle
from .settings import EvaluationContext, default_context

# Solvers
from .solvers import Solver1D, Bisection, Secant, Newton, Brent, create_solver

# Curves
from .curves import (
    YieldTermStructure,
    FlatForward,
    RateHelper,
    DepositRateHelper,
    FraRateHelper,
    SwapRateHelper,
    helpers_from_quotes,
    PiecewiseYieldCurve,
    PiecewiseFlatForward,
    bootstrap_from_quotes,
    ImpliedTermStructure,
    ForwardSpreadedTermStructure,
    ZeroSpreadedTermStructure,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Errors
    "CurveLibError",
    "ConfigurationError",
    "BracketError",
    "ConvergenceError",
    "DomainError",
    "NotificationError",
    # Core
    "DayCount",
    "BusinessDayConvention",
    "Compounding",
    "Frequency",
    "Conventions",
    "year_fraction",
    "TimeUnit",
    "Calendar",
    "NullCalendar",
    "parse_tenor",
    "make_schedule",
    "BootstrapConfig",
    # Observability
    "Observable",
    "Observer",
    "ObservableObserver",
    "Handle",
    "RelinkableHandle",
    "Quote",
    "SimpleQuote",
    "quote_handle",
    "EvaluationContext",
    "default_context",
    # Solvers
    "Solver1D",
    "Bisection",
    "Secant",
    "Newton",
    "Brent",
    "create_solver",
    # Curves
    "YieldTermStructure",
    "FlatForward",
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
