"""
Piecewise yield curve bootstrapping.

Implements sequential bootstrap from rate helpers:
1. Sort helpers by maturity and validate them
2. Solve one node parameter per helper, earlier nodes held fixed, so that
   the helper reprices exactly
3. Commit the nodes as a snapshot used for every query until an input
   changes

The curve is lazy: nothing is solved until the first query, and any
quote, helper or evaluation-date notification marks it stale. Rebuilds
are wholesale because moving an early node changes every later helper's
implied quote through the interpolation.
"""

from datetime import date
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import BootstrapConfig
from ..conventions import DayCount
from ..dates import Calendar
from ..errors import BracketError, ConfigurationError, ConvergenceError
from ..settings import EvaluationContext
from ..solvers import create_solver
from .helpers import RateHelper, helpers_from_quotes
from .interpolation import Interpolator
from .termstructure import DT, YieldTermStructure
from .traits import BootstrapTraits, create_traits

logger = logging.getLogger(__name__)


class _NodeCurve(YieldTermStructure):
    """Trial curve the helpers are priced on while a node is being solved."""

    def __init__(
        self,
        day_count: DayCount,
        reference_date: date,
        traits: BootstrapTraits,
        context: EvaluationContext
    ):
        super().__init__(day_count, reference_date=reference_date, context=context)
        self._traits = traits
        self._interp: Optional[Interpolator] = None

    def set_nodes(self, times: np.ndarray, params: Sequence[float]) -> None:
        self._interp = self._traits.fit(times, params)
        self._cache.clear()

    def _discount_impl(self, t: float) -> float:
        return self._traits.discount(self._interp, t)


class _NodeObjective:
    """
    Repricing error of one helper as a function of its node parameter.

    Carries a central-difference ``derivative`` so the Newton solver can
    be used for bootstrapping as well.
    """

    def __init__(
        self,
        helper: RateHelper,
        candidate: _NodeCurve,
        times: np.ndarray,
        solved: List[float]
    ):
        self.helper = helper
        self.candidate = candidate
        self.times = times
        self.solved = solved

    def __call__(self, param: float) -> float:
        self.candidate.set_nodes(self.times, self.solved + [param])
        return self.helper.error(self.candidate)

    def derivative(self, param: float) -> float:
        h = max(abs(param), 1.0) * 1e-7
        return (self(param + h) - self(param - h)) / (2.0 * h)


class PiecewiseYieldCurve(YieldTermStructure):
    """
    Yield curve bootstrapped from rate helpers.

    One node sits at the reference date and one at each helper's
    maturity. What a node holds (forward, discount factor or zero rate)
    depends on ``interpolation``.

    Args:
        helpers: Calibration instruments
        day_count: Day count for the time axis
        reference_date: Fixed reference date
        settlement_days: Business days from the evaluation date to the
            reference date (moving curve)
        calendar: Calendar for settlement_days
        interpolation: "flat_forward", "log_linear" or "linear_zero"
        config: Solver settings
        context: Evaluation-date register
    """

    def __init__(
        self,
        helpers: Sequence[RateHelper],
        day_count: DayCount = DayCount.ACT_365_FIXED,
        reference_date: Optional[date] = None,
        settlement_days: Optional[int] = None,
        calendar: Optional[Calendar] = None,
        interpolation: str = "flat_forward",
        config: Optional[BootstrapConfig] = None,
        context: Optional[EvaluationContext] = None
    ):
        super().__init__(day_count, reference_date, settlement_days, calendar, context)
        if not helpers:
            raise ConfigurationError("no bootstrap helpers given")
        self._helpers = list(helpers)
        self._traits = create_traits(interpolation)
        self._config = config if config is not None else BootstrapConfig()

        self._calculated = False
        self._dates: Tuple[date, ...] = ()
        self._times = np.empty(0)
        self._params = np.empty(0)
        self._interp: Optional[Interpolator] = None

        for helper in self._helpers:
            self.register_with(helper)

    @property
    def helpers(self) -> Tuple[RateHelper, ...]:
        return tuple(self._helpers)

    @property
    def interpolation(self) -> str:
        return self._traits.name

    @property
    def config(self) -> BootstrapConfig:
        return self._config

    @property
    def max_date(self) -> date:
        self.calculate()
        return self._dates[-1]

    # ------------------------------------------------------------------
    # Bootstrapping
    # ------------------------------------------------------------------

    def calculate(self) -> None:
        """Bootstrap now if the curve is stale."""
        if not self._calculated:
            self._bootstrap()
            self._calculated = True

    def update(self) -> None:
        self._calculated = False
        super().update()

    def _sorted_helpers(self) -> List[RateHelper]:
        ref = self.reference_date
        for helper in self._helpers:
            if not helper.is_valid():
                raise ConfigurationError(f"{helper.label} has an invalid quote")

        helpers = sorted(self._helpers, key=lambda h: h.latest_date)
        previous: Optional[RateHelper] = None
        for helper in helpers:
            if helper.latest_date <= ref:
                raise ConfigurationError(
                    f"{helper.label} matures on {helper.latest_date}, "
                    f"not after the reference date {ref}"
                )
            if helper.earliest_date < ref:
                raise ConfigurationError(
                    f"{helper.label} starts on {helper.earliest_date}, "
                    f"before the reference date {ref}"
                )
            if previous is not None and previous.latest_date == helper.latest_date:
                raise ConfigurationError(
                    f"{previous.label} and {helper.label} have the same maturity "
                    f"({helper.latest_date})"
                )
            previous = helper
        return helpers

    def _bootstrap(self) -> None:
        ref = self.reference_date
        helpers = self._sorted_helpers()
        cfg = self._config
        traits = self._traits

        dates = [ref] + [h.latest_date for h in helpers]
        times = np.array([self.time_from_reference(d) for d in dates], dtype=np.float64)
        if np.any(np.diff(times) <= 0):
            raise ConfigurationError(
                f"node times must be strictly increasing under {self.day_count.value}: {dates}"
            )

        candidate = _NodeCurve(self.day_count, ref, traits, self._context)
        solver = create_solver(cfg.solver, cfg.max_evaluations)
        solver.set_lower_bound(traits.lower_bound)

        params: List[float] = []
        for k, helper in enumerate(helpers):
            objective = _NodeObjective(helper, candidate, times[:k + 2], params)
            if params:
                guess = params[-1]
            elif cfg.initial_guess is not None:
                guess = cfg.initial_guess
            else:
                guess = traits.default_guess

            try:
                value = solver.solve(objective, cfg.accuracy, guess, cfg.guess_step)
            except ConvergenceError as exc:
                raise ConvergenceError(
                    f"bootstrap failed at node {k + 1} ({helper.label}, maturity "
                    f"{helper.latest_date}) after {exc.evaluations} evaluations: {exc}",
                    evaluations=exc.evaluations,
                    bracket=exc.bracket,
                    last_value=exc.last_value,
                ) from exc
            except BracketError as exc:
                raise BracketError(
                    f"bootstrap failed at node {k + 1} ({helper.label}, maturity "
                    f"{helper.latest_date}) after {solver.evaluation_number} "
                    f"evaluations: {exc}"
                ) from exc

            params.append(value)
            logger.debug(
                "node %d %s (%s): %.12g in %d evaluations",
                k + 1, helper.label, helper.latest_date, value, solver.evaluation_number
            )

        self._dates = tuple(dates)
        self._times = times
        self._params = np.array(params, dtype=np.float64)
        self._interp = traits.fit(times, params)
        self._cache.clear()
        logger.info(
            "Bootstrapped %s curve as of %s: %d nodes up to %s",
            traits.name, ref, len(params), dates[-1]
        )

    # ------------------------------------------------------------------
    # Term structure hooks
    # ------------------------------------------------------------------

    def _discount_impl(self, t: float) -> float:
        self.calculate()
        return self._traits.discount(self._interp, t)

    def _forward_impl(self, t: float) -> float:
        self.calculate()
        return self._traits.forward(self._interp, t)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def dates(self) -> List[date]:
        """Node dates, reference date first."""
        self.calculate()
        return list(self._dates)

    def times(self) -> np.ndarray:
        self.calculate()
        return self._times.copy()

    def data(self) -> np.ndarray:
        """Node values aligned with ``dates()`` (value at the reference first)."""
        self.calculate()
        return self._traits.node_values(self._params)

    def nodes(self) -> List[Tuple[date, float]]:
        return list(zip(self.dates(), self.data()))

    def nodes_frame(self) -> pd.DataFrame:
        """
        Node table.

        Returns:
            DataFrame with columns date, time, parameter, discount, zero_rate
            (continuous; the rate over the first DT at the reference date)
        """
        self.calculate()
        times = self._times
        return pd.DataFrame({
            "date": list(self._dates),
            "time": times,
            "parameter": self._traits.node_values(self._params),
            "discount": [self._discount(t) for t in times],
            "zero_rate": [self._zero_yield_impl(max(t, DT)) for t in times],
        })

    def repricing_errors(self) -> pd.Series:
        """Market quote minus curve-implied quote for each helper."""
        self.calculate()
        helpers = sorted(self._helpers, key=lambda h: h.latest_date)
        return pd.Series(
            [h.error(self) for h in helpers],
            index=[h.label for h in helpers],
            name="error",
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({len(self._helpers)} helpers, "
            f"{self._traits.name}, {self.day_count.value})"
        )


class PiecewiseFlatForward(PiecewiseYieldCurve):
    """Piecewise yield curve with flat instantaneous forwards between nodes."""

    def __init__(
        self,
        helpers: Sequence[RateHelper],
        day_count: DayCount = DayCount.ACT_365_FIXED,
        reference_date: Optional[date] = None,
        settlement_days: Optional[int] = None,
        calendar: Optional[Calendar] = None,
        config: Optional[BootstrapConfig] = None,
        context: Optional[EvaluationContext] = None
    ):
        super().__init__(
            helpers, day_count, reference_date, settlement_days, calendar,
            interpolation="flat_forward", config=config, context=context
        )


def bootstrap_from_quotes(
    reference_date: date,
    quotes,
    day_count: DayCount = DayCount.ACT_365_FIXED,
    settlement_days: int = 2,
    calendar: Optional[Calendar] = None,
    interpolation: str = "flat_forward",
    config: Optional[BootstrapConfig] = None,
    context: Optional[EvaluationContext] = None
) -> PiecewiseYieldCurve:
    """
    Convenience function to bootstrap a curve from a quote table.

    Args:
        reference_date: Curve reference date; also the evaluation date
            when no context is given
        quotes: DataFrame or list of dicts, see ``helpers_from_quotes``
        day_count: Day count for the curve time axis
        settlement_days: Settlement lag of the helpers
        calendar: Calendar for the helpers
        interpolation: Bootstrap interpolation
        config: Solver settings
        context: Evaluation-date register; a private one dated
            ``reference_date`` is used if omitted

    Returns:
        Bootstrapped PiecewiseYieldCurve
    """
    if context is None:
        context = EvaluationContext(reference_date)
    helpers = helpers_from_quotes(quotes, settlement_days, calendar, context)
    curve = PiecewiseYieldCurve(
        helpers,
        day_count=day_count,
        reference_date=reference_date,
        interpolation=interpolation,
        config=config,
        context=context,
    )
    curve.calculate()
    return curve


__all__ = [
    "PiecewiseYieldCurve",
    "PiecewiseFlatForward",
    "bootstrap_from_quotes",
]
