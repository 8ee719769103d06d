"""
Observable market quotes.
"""

from abc import ABC, abstractmethod
from typing import Optional, Union

from .errors import DomainError
from .handle import Handle
from .observable import Observable


class Quote(Observable, ABC):
    """Abstract observable scalar."""

    @abstractmethod
    def value(self) -> float:
        """Current value; raises DomainError when unset."""

    @abstractmethod
    def is_valid(self) -> bool:
        """True if a value is available."""


class SimpleQuote(Quote):
    """
    Quote holding a settable value.

    ``set_value`` notifies observers only when the new value differs from
    the stored one under exact comparison; values that differ by any
    amount, however small, do notify.
    """

    def __init__(self, value: Optional[float] = None):
        super().__init__()
        self._value = value

    def value(self) -> float:
        if self._value is None:
            raise DomainError("invalid SimpleQuote: no value set")
        return self._value

    def is_valid(self) -> bool:
        return self._value is not None

    def set_value(self, value: Optional[float]) -> float:
        """
        Store a new value.

        Returns:
            Difference between new and old value (0.0 when unchanged or
            when either side is unset)
        """
        if value == self._value:
            return 0.0
        diff = 0.0
        if value is not None and self._value is not None:
            diff = value - self._value
        self._value = value
        self.notify_observers()
        return diff

    def reset(self) -> None:
        """Clear the value."""
        self.set_value(None)

    def __repr__(self) -> str:
        return f"SimpleQuote({self._value!r})"


def quote_handle(quote: Union[float, Quote, Handle, None]) -> Handle:
    """Wrap a float or a Quote into a Handle; pass handles through."""
    if isinstance(quote, Handle):
        return quote
    if isinstance(quote, Quote):
        return Handle(quote)
    if quote is None:
        return Handle()
    return Handle(SimpleQuote(float(quote)))


__all__ = [
    "Quote",
    "SimpleQuote",
    "quote_handle",
]
