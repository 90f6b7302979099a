"""
Tests for ChangeCoordinator - trailing debounce.
"""

import pytest

from treesync.application.sync import ChangeCoordinator


@pytest.fixture
def fired() -> list[int]:
    return []


@pytest.fixture
def coordinator(scheduler, fired) -> ChangeCoordinator:
    return ChangeCoordinator(scheduler, on_quiet=lambda: fired.append(1), quiet_period_ms=300)


class TestChangeCoordinator:
    """Tests for notify()/cancel()."""

    def test_single_notify_fires_after_quiet_period(self, coordinator, scheduler, fired):
        coordinator.notify()

        scheduler.advance(0.25)
        assert fired == []
        assert coordinator.pending

        scheduler.advance(0.1)
        assert fired == [1]
        assert not coordinator.pending

    def test_notify_restarts_timer(self, coordinator, scheduler, fired):
        """Each notify pushes the deadline back to quiet period after itself."""
        coordinator.notify()
        scheduler.advance(0.2)
        coordinator.notify()
        scheduler.advance(0.2)

        assert fired == []

        scheduler.advance(0.15)
        assert fired == [1]

    def test_continuous_notifications_never_fire(self, coordinator, scheduler, fired):
        """A stream that never pauses for the quiet period produces no refresh."""
        for _ in range(50):
            coordinator.notify()
            scheduler.advance(0.25)

        assert fired == []
        assert coordinator.fired == 0
        assert coordinator.notifications == 50

    def test_at_most_one_outstanding_timer(self, coordinator, scheduler):
        for _ in range(10):
            coordinator.notify()

        assert len(scheduler.pending) == 1

    def test_cancel_prevents_firing(self, coordinator, scheduler, fired):
        coordinator.notify()
        coordinator.cancel()
        scheduler.advance(10)

        assert fired == []
        assert not coordinator.pending

    def test_cancel_without_pending_is_noop(self, coordinator):
        coordinator.cancel()
        assert not coordinator.pending

    def test_zero_quiet_period(self, scheduler, fired):
        coordinator = ChangeCoordinator(scheduler, lambda: fired.append(1), quiet_period_ms=0)

        coordinator.notify()
        scheduler.advance(0)

        assert fired == [1]

    def test_callback_exception_is_logged_and_later_firings_continue(self, scheduler, caplog):
        calls = []

        def on_quiet():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("refresh exploded")

        coordinator = ChangeCoordinator(scheduler, on_quiet, quiet_period_ms=100)

        coordinator.notify()
        scheduler.advance(0.1)
        coordinator.notify()
        scheduler.advance(0.1)

        assert len(calls) == 2
        assert "Quiet-period callback failed" in caplog.text
