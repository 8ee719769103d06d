"""
Solvers package - one-dimensional root finding.

Provides:
- Solver1D: shared bracketing / evaluation-budget framework
- Bisection, Secant, Newton, Brent: concrete algorithms
- create_solver: factory by name
"""

from .base import Solver1D, EPSILON
from .algorithms import Bisection, Secant, Newton, Brent, create_solver

__all__ = [
    "Solver1D",
    "EPSILON",
    "Bisection",
    "Secant",
    "Newton",
    "Brent",
    "create_solver",
]
