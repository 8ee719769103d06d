"""
Unit tests for one-dimensional solvers.
"""

import pytest
from scipy.optimize import brentq

from curvelib import (
    BracketError,
    ConfigurationError,
    ConvergenceError,
    create_solver,
)
from curvelib.solvers import Bisection, Brent, Newton, Secant

CUBIC_ROOT = 1.5213797068045676


class Cubic:
    """f(x) = x^3 - x - 2 with its derivative, counting calls."""

    def __init__(self):
        self.calls = 0
        self.points = []

    def __call__(self, x):
        self.calls += 1
        self.points.append(x)
        return x ** 3 - x - 2.0

    def derivative(self, x):
        return 3.0 * x ** 2 - 1.0


ALGORITHMS = ["bisection", "secant", "newton", "brent"]


class TestRootFinding:
    """All algorithms find the same root."""

    @pytest.mark.parametrize("method", ALGORITHMS)
    def test_solve_from_guess(self, method):
        solver = create_solver(method)
        root = solver.solve(Cubic(), 1e-12, 1.0, 0.5)
        assert abs(root - CUBIC_ROOT) < 1e-9

    @pytest.mark.parametrize("method", ALGORITHMS)
    def test_solve_bracketed(self, method):
        solver = create_solver(method)
        root = solver.solve_bracketed(Cubic(), 1e-12, 1.5, 1.0, 2.0)
        assert abs(root - CUBIC_ROOT) < 1e-9

    @pytest.mark.parametrize("method", ALGORITHMS)
    def test_matches_scipy_brentq(self, method):
        f = Cubic()
        expected = brentq(f, 1.0, 2.0, xtol=1e-14)
        root = create_solver(method).solve_bracketed(Cubic(), 1e-12, 1.5, 1.0, 2.0)
        assert abs(root - expected) < 1e-9

    @pytest.mark.parametrize("method", ALGORITHMS)
    def test_evaluation_count_matches_calls(self, method):
        f = Cubic()
        solver = create_solver(method)
        solver.solve(f, 1e-12, 1.0, 0.5)
        assert solver.evaluation_number == f.calls
        assert solver.evaluation_number <= solver.max_evaluations

    def test_exact_root_at_guess(self):
        solver = Brent()
        root = solver.solve(lambda x: x - 2.0, 1e-12, 2.0, 0.1)
        assert root == 2.0
        assert solver.evaluation_number == 1

    def test_decreasing_function(self):
        root = Brent().solve(lambda x: 0.05 - x, 1e-12, 0.0, 0.01)
        assert abs(root - 0.05) < 1e-10

    def test_brent_faster_than_bisection(self):
        brent, bisection = Brent(), Bisection()
        brent.solve_bracketed(Cubic(), 1e-12, 1.5, 1.0, 2.0)
        bisection.solve_bracketed(Cubic(), 1e-12, 1.5, 1.0, 2.0)
        assert brent.evaluation_number < bisection.evaluation_number


class TestBudget:
    """The evaluation budget is never exceeded."""

    def test_budget_exhaustion_raises(self):
        solver = Bisection(max_evaluations=5)
        with pytest.raises(ConvergenceError) as excinfo:
            solver.solve_bracketed(Cubic(), 1e-12, 1.5, 1.0, 2.0)

        err = excinfo.value
        assert err.evaluations == 5
        assert err.bracket is not None
        assert err.last_value is not None

    @pytest.mark.parametrize("method", ALGORITHMS)
    def test_small_budget_never_overrun(self, method):
        f = Cubic()
        solver = create_solver(method, max_evaluations=4)
        with pytest.raises(ConvergenceError):
            solver.solve_bracketed(f, 1e-15, 1.5, 1.0, 2.0)
        assert f.calls <= 4

    def test_single_evaluation_budget(self):
        f = Cubic()
        with pytest.raises(ConvergenceError):
            Bisection(max_evaluations=1).solve_bracketed(f, 1e-8, 1.5, 1.0, 2.0)
        assert f.calls == 1

    @pytest.mark.parametrize("method", ALGORITHMS)
    @pytest.mark.parametrize("budget", [1, 2, 3])
    def test_tiny_budget_from_guess(self, method, budget):
        f = Cubic()
        solver = create_solver(method, max_evaluations=budget)
        with pytest.raises((BracketError, ConvergenceError)):
            solver.solve(f, 1e-15, 1.0, 0.5)
        assert f.calls <= budget

    def test_convergence_error_is_runtime_error(self):
        with pytest.raises(RuntimeError):
            Brent(max_evaluations=3).solve_bracketed(Cubic(), 1e-15, 1.5, 1.0, 2.0)

    def test_invalid_budget(self):
        with pytest.raises(ConfigurationError):
            Brent(max_evaluations=0)


class TestBracketing:
    """Tests for bracket search and validation."""

    def test_no_root_raises_bracket_error(self):
        solver = Brent(max_evaluations=20)
        with pytest.raises(BracketError):
            solver.solve(lambda x: x * x + 1.0, 1e-12, 0.0, 0.1)

    def test_same_sign_bracket(self):
        with pytest.raises(BracketError):
            Brent().solve_bracketed(Cubic(), 1e-12, 0.5, 0.0, 1.0)

    def test_bracket_error_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            Brent().solve_bracketed(Cubic(), 1e-12, 0.5, 0.0, 1.0)

    def test_invalid_range(self):
        with pytest.raises(ConfigurationError):
            Brent().solve_bracketed(Cubic(), 1e-12, 1.5, 2.0, 1.0)

    def test_guess_outside_bracket(self):
        with pytest.raises(ConfigurationError):
            Brent().solve_bracketed(Cubic(), 1e-12, 3.0, 1.0, 2.0)

    def test_bracket_found_far_from_guess(self):
        solver = Brent()
        root = solver.solve(lambda x: x - 10.0, 1e-12, 0.0, 0.01)
        assert abs(root - 10.0) < 1e-10

    def test_lower_bound_respected(self):
        f = Cubic()
        solver = Brent()
        solver.set_lower_bound(1.2)
        root = solver.solve(f, 1e-12, 1.3, 0.5)
        assert abs(root - CUBIC_ROOT) < 1e-9
        assert min(f.points) >= 1.2

    def test_non_positive_step(self):
        with pytest.raises(ConfigurationError):
            Brent().solve(Cubic(), 1e-12, 1.0, 0.0)


class TestFactory:
    """Tests for create_solver and per-algorithm options."""

    def test_create_known(self):
        assert isinstance(create_solver("bisection"), Bisection)
        assert isinstance(create_solver("Secant"), Secant)
        assert isinstance(create_solver("newton"), Newton)
        assert isinstance(create_solver("BRENT"), Brent)

    def test_create_unknown(self):
        with pytest.raises(ConfigurationError):
            create_solver("golden")

    def test_newton_needs_derivative(self):
        with pytest.raises(ConfigurationError):
            Newton().solve_bracketed(lambda x: x - 1.5, 1e-12, 1.2, 1.0, 2.0)

    def test_newton_explicit_derivative(self):
        solver = Newton(derivative=lambda x: 3.0 * x ** 2 - 1.0)
        root = solver.solve_bracketed(lambda x: x ** 3 - x - 2.0, 1e-12, 1.5, 1.0, 2.0)
        assert abs(root - CUBIC_ROOT) < 1e-9
