"""
Evaluation-date register.

Every term structure and rate helper reads "today" from an
EvaluationContext. Changing the context's date notifies everything
registered with it, so curves with a moving reference date and helpers
whose dates depend on today are invalidated together.

Components take an explicit ``context=`` argument; when omitted they share
the process-wide instance returned by ``default_context()``.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from .observable import Observable

logger = logging.getLogger(__name__)


class EvaluationContext(Observable):
    """
    Observable holder of the evaluation date.

    Attributes:
        evaluation_date: Date used as "today"; falls back to the system
            date while unset
    """

    def __init__(self, evaluation_date: Optional[date] = None):
        super().__init__()
        self._evaluation_date = evaluation_date

    @property
    def evaluation_date(self) -> date:
        if self._evaluation_date is None:
            return date.today()
        return self._evaluation_date

    @evaluation_date.setter
    def evaluation_date(self, d: Optional[date]) -> None:
        self.set_evaluation_date(d)

    def set_evaluation_date(self, d: Optional[date]) -> None:
        """Set the evaluation date; notifies only if the effective date moved."""
        previous = self.evaluation_date
        self._evaluation_date = d
        if self.evaluation_date != previous:
            logger.debug("Evaluation date moved from %s to %s", previous, self.evaluation_date)
            self.notify_observers()

    def advance(self, days: int) -> date:
        """Move the evaluation date by calendar days and return the new date."""
        self.set_evaluation_date(self.evaluation_date + timedelta(days=days))
        return self.evaluation_date

    def reset(self) -> None:
        """Go back to tracking the system date."""
        self.set_evaluation_date(None)

    def __repr__(self) -> str:
        return f"EvaluationContext({self._evaluation_date!r})"


_default_context: Optional[EvaluationContext] = None


def default_context() -> EvaluationContext:
    """Return the shared process-wide context."""
    global _default_context
    if _default_context is None:
        _default_context = EvaluationContext()
    return _default_context


__all__ = [
    "EvaluationContext",
    "default_context",
]
