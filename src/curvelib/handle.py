"""
Relinkable, observable references.

A Handle points at a shared link cell which in turn points at the actual
object. Relinking the cell notifies everything registered with the handle,
and every handle sharing the cell sees the new object. Observers register
with the handle itself:

    >>> h = Handle()
    >>> curve = ImpliedTermStructure(h, some_date)   # registers with h
    >>> h.link_to(base_curve)                        # curve is notified
"""

from typing import Generic, Optional, TypeVar

from .errors import DomainError
from .observable import ObservableObserver

T = TypeVar("T")


class _Link(ObservableObserver):
    """Shared cell behind one or more handles."""

    def __init__(self, obj, register_as_observer: bool):
        super().__init__()
        self._obj = None
        self._is_observer = False
        self.link_to(obj, register_as_observer)

    @property
    def obj(self):
        return self._obj

    def link_to(self, obj, register_as_observer: bool = True) -> None:
        if obj is self._obj and register_as_observer == self._is_observer:
            return
        if self._obj is not None and self._is_observer:
            self.unregister_with(self._obj)
        self._obj = obj
        self._is_observer = register_as_observer
        if obj is not None and register_as_observer and hasattr(obj, "as_observable"):
            self.register_with(obj)
        self.notify_observers()


class Handle(Generic[T]):
    """
    Observable indirection to a shared object.

    Args:
        obj: Initial object, or None for an empty handle
        register_as_observer: Whether the handle forwards notifications
            raised by the linked object
    """

    def __init__(self, obj: Optional[T] = None, register_as_observer: bool = True):
        self._link = _Link(obj, register_as_observer)

    @classmethod
    def _from_link(cls, link: _Link) -> "Handle[T]":
        handle = cls.__new__(cls)
        handle._link = link
        return handle

    def link_to(self, obj: Optional[T], register_as_observer: bool = True) -> None:
        """Point the shared cell at ``obj`` and notify observers."""
        self._link.link_to(obj, register_as_observer)

    def current_link(self) -> T:
        """
        Return the linked object.

        Raises:
            DomainError: if the handle is empty
        """
        if self._link.obj is None:
            raise DomainError("empty Handle cannot be dereferenced")
        return self._link.obj

    def empty(self) -> bool:
        return self._link.obj is None

    def share(self) -> "Handle[T]":
        """Return another handle on the same cell."""
        return self._from_link(self._link)

    def as_observable(self) -> _Link:
        return self._link

    def __bool__(self) -> bool:
        return not self.empty()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Handle):
            return NotImplemented
        return self._link is other._link

    def __hash__(self) -> int:
        return id(self._link)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._link.obj!r})"


class RelinkableHandle(Handle[T]):
    """Handle meant to be relinked by its owner; shares cells via share()."""


__all__ = [
    "Handle",
    "RelinkableHandle",
]
