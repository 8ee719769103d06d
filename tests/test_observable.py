"""
Unit tests for the observer/observable graph.
"""

import gc
import weakref

import pytest

from curvelib import NotificationError, Observable, ObservableObserver, Observer


class Recorder(Observer):
    """Observer that appends its name to a shared log."""

    def __init__(self, name, log):
        super().__init__()
        self.name = name
        self.log = log

    def update(self):
        self.log.append(self.name)


class Failing(Observer):
    def update(self):
        raise RuntimeError("boom")


class TestNotification:
    """Tests for basic registration and notification."""

    def test_notify_calls_update(self, flag):
        subject = Observable()
        flag.register_with(subject)

        subject.notify_observers()

        assert flag.up
        assert flag.count == 1

    def test_registration_is_idempotent(self, flag):
        subject = Observable()
        flag.register_with(subject)
        flag.register_with(subject)

        subject.notify_observers()

        assert flag.count == 1
        assert subject.observer_count == 1

    def test_unregister_stops_notifications(self, flag):
        subject = Observable()
        flag.register_with(subject)
        flag.unregister_with(subject)

        subject.notify_observers()

        assert not flag.up

    def test_unregister_with_all(self, flag):
        first, second = Observable(), Observable()
        flag.register_with(first)
        flag.register_with(second)
        flag.unregister_with_all()

        first.notify_observers()
        second.notify_observers()

        assert flag.count == 0
        assert first.observer_count == 0
        assert second.observer_count == 0

    def test_register_with_none_is_ignored(self, flag):
        flag.register_with(None)
        flag.unregister_with(None)

    def test_each_observer_notified_once(self, make_flag):
        subject = Observable()
        flags = [make_flag() for _ in range(5)]
        for f in flags:
            f.register_with(subject)

        subject.notify_observers()

        assert [f.count for f in flags] == [1] * 5


class TestLifetime:
    """Observables must not keep observers alive."""

    def test_dropped_observer_is_not_called(self):
        subject = Observable()
        log = []
        recorder = Recorder("gone", log)
        recorder.register_with(subject)

        del recorder
        gc.collect()

        subject.notify_observers()
        assert log == []
        assert subject.observer_count == 0

    def test_observer_keeps_observable_alive(self, flag):
        subject = Observable()
        ref = weakref.ref(subject)
        flag.register_with(subject)

        del subject
        gc.collect()

        assert ref() is not None


class TestReentrancy:
    """Observers may change the graph while a notification is running."""

    def test_unregister_during_notify_skips_pending_observer(self):
        subject = Observable()
        log = []
        second = Recorder("second", log)

        class Remover(Observer):
            def update(self):
                log.append("remover")
                second.unregister_with(subject)

        remover = Remover()
        remover.register_with(subject)
        second.register_with(subject)

        subject.notify_observers()

        assert log == ["remover"]

    def test_register_during_notify_waits_for_next_pass(self):
        subject = Observable()
        log = []
        late = Recorder("late", log)

        class Adder(Observer):
            def update(self):
                log.append("adder")
                late.register_with(subject)

        adder = Adder()
        adder.register_with(subject)

        subject.notify_observers()
        assert log == ["adder"]

        subject.notify_observers()
        assert sorted(log) == ["adder", "adder", "late"]


class TestFailures:
    """A failing observer does not block the others."""

    def test_failure_is_collected_and_raised(self, flag):
        subject = Observable()
        failing = Failing()
        failing.register_with(subject)
        flag.register_with(subject)

        with pytest.raises(NotificationError) as excinfo:
            subject.notify_observers()

        assert flag.up
        assert len(excinfo.value.failures) == 1
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_failure_is_a_runtime_error(self):
        subject = Observable()
        failing = Failing()
        failing.register_with(subject)

        with pytest.raises(RuntimeError):
            subject.notify_observers()


class TestForwarding:
    """ObservableObserver forwards notifications downstream."""

    def test_chain_forwards(self, flag):
        source = Observable()
        middle = ObservableObserver()
        middle.register_with(source)
        flag.register_with(middle)

        source.notify_observers()

        assert flag.up

    def test_plain_observer_requires_update(self):
        with pytest.raises(TypeError):
            Observer()
