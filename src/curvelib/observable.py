"""
Observable/Observer notification graph.

Observables hold weak references to their observers, keyed by a stable
integer id assigned to each observer on construction. Observers hold strong
references to what they observe, so a derived curve keeps its inputs alive
but an input never keeps a derived curve alive.

Notification is synchronous: ``notify_observers()`` calls ``update()`` on a
snapshot of the registered observers before returning. Observers added
during the pass are not called; observers removed during the pass and not
yet reached are skipped. A failing observer does not stop the pass; the
first failure is re-raised (wrapped in NotificationError) once every
observer has been called.
"""

from abc import ABC, abstractmethod
import itertools
import logging
import weakref
from typing import Any, Dict, List

from .errors import NotificationError

logger = logging.getLogger(__name__)

_observer_ids = itertools.count(1)


class Observable:
    """Publisher side of the notification graph."""

    def __init__(self):
        super().__init__()
        self._observers: Dict[int, "weakref.ReferenceType[Observer]"] = {}

    def as_observable(self) -> "Observable":
        return self

    @property
    def observer_count(self) -> int:
        """Number of live registered observers."""
        self._prune()
        return len(self._observers)

    def _register_observer(self, observer: "Observer") -> None:
        key = observer.observer_id
        if key not in self._observers:
            self._observers[key] = weakref.ref(observer)

    def _unregister_observer(self, observer: "Observer") -> None:
        self._observers.pop(observer.observer_id, None)

    def _prune(self) -> None:
        dead = [key for key, ref in self._observers.items() if ref() is None]
        for key in dead:
            del self._observers[key]

    def notify_observers(self) -> None:
        """
        Call ``update()`` on every currently registered observer once.

        Raises:
            NotificationError: if any observer raised; chained to the first
                failure after all observers have been notified
        """
        snapshot = list(self._observers.items())
        failures: List[BaseException] = []

        for key, ref in snapshot:
            # unregistered (or re-registered) by an earlier callback
            if self._observers.get(key) is not ref:
                continue
            observer = ref()
            if observer is None:
                del self._observers[key]
                continue
            try:
                observer.update()
            except Exception as exc:
                logger.warning(
                    "Observer %r of %r failed during notification: %s",
                    observer, self, exc
                )
                failures.append(exc)

        if failures:
            raise NotificationError(
                f"{len(failures)} observer(s) failed during notification "
                f"of {type(self).__name__}: {failures[0]}",
                failures
            ) from failures[0]


class Observer(ABC):
    """Subscriber side of the notification graph."""

    def __init__(self):
        super().__init__()
        self._observer_id = next(_observer_ids)
        self._observables: Dict[int, Observable] = {}

    @property
    def observer_id(self) -> int:
        return self._observer_id

    def register_with(self, target: Any) -> None:
        """
        Start observing ``target``.

        Accepts an Observable or anything exposing ``as_observable()``
        (such as a Handle). Registering twice has no further effect;
        ``None`` is ignored.
        """
        if target is None:
            return
        observable = target.as_observable()
        observable._register_observer(self)
        self._observables[id(observable)] = observable

    def unregister_with(self, target: Any) -> None:
        """Stop observing ``target``; a no-op if not registered."""
        if target is None:
            return
        observable = target.as_observable()
        observable._unregister_observer(self)
        self._observables.pop(id(observable), None)

    def unregister_with_all(self) -> None:
        for observable in list(self._observables.values()):
            observable._unregister_observer(self)
        self._observables.clear()

    @abstractmethod
    def update(self) -> None:
        """React to a notification from an observed object."""


class ObservableObserver(Observer, Observable):
    """Observer that forwards every notification to its own observers."""

    def update(self) -> None:
        self.notify_observers()


__all__ = [
    "Observable",
    "Observer",
    "ObservableObserver",
]
