"""
Bootstrap configuration.

BootstrapConfig collects the numerical settings shared by every node of a
piecewise bootstrap: solver algorithm, target accuracy, evaluation budget
and the bracket-search step.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from .errors import ConfigurationError


@dataclass(frozen=True)
class BootstrapConfig:
    """
    Numerical settings for curve bootstrapping.

    Attributes:
        solver: Solver1D algorithm name ("brent", "bisection", "secant", "newton")
        accuracy: Target accuracy on the node parameter
        max_evaluations: Evaluation budget per node
        guess_step: Initial bracket-search step around the guess
        initial_guess: Guess for the first node; None uses the
            interpolation strategy's default
    """
    solver: str = "brent"
    accuracy: float = 1e-12
    max_evaluations: int = 100
    guess_step: float = 0.01
    initial_guess: Optional[float] = None

    def __post_init__(self):
        if self.accuracy <= 0:
            raise ConfigurationError(f"accuracy must be positive, got {self.accuracy}")
        if self.max_evaluations < 1:
            raise ConfigurationError(
                f"max_evaluations must be at least 1, got {self.max_evaluations}"
            )
        if self.guess_step <= 0:
            raise ConfigurationError(f"guess_step must be positive, got {self.guess_step}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BootstrapConfig":
        """Build from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown bootstrap settings: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def fast(cls) -> "BootstrapConfig":
        """Looser accuracy for scenario/bumped rebuilds."""
        return cls(accuracy=1e-10, max_evaluations=50)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "BootstrapConfig",
]
