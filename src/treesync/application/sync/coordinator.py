"""
Change Coordinator - Trailing debounce for filesystem events.

Every ``notify()`` restarts a quiet-period timer. The refresh callback fires
once the quiet period elapses with no further notification, so a burst of
writes collapses into a single refresh after the burst ends. Continuous
writes that never pause for a full quiet period produce no refresh until
they stop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from treesync.core.ports.scheduler import ScheduledTask, SchedulerPort


logger = logging.getLogger("ChangeCoordinator")


class ChangeCoordinator:
    """
    Debounces notifications into a single quiet-period callback.

    At most one timer is outstanding at any time.
    """

    def __init__(
        self,
        scheduler: SchedulerPort,
        on_quiet: Callable[[], None],
        quiet_period_ms: int = 300,
    ):
        """
        Initialize the coordinator.

        Args:
            scheduler: Source of cancellable timers
            on_quiet: Called once after each quiet period
            quiet_period_ms: Milliseconds without notifications before firing
        """
        self.scheduler = scheduler
        self.on_quiet = on_quiet
        self.quiet_period_ms = quiet_period_ms

        self._timer: ScheduledTask | None = None
        self.notifications = 0
        self.fired = 0

    @property
    def pending(self) -> bool:
        """True while a refresh is scheduled but has not fired."""
        return self._timer is not None

    def notify(self) -> None:
        """Record activity and restart the quiet-period timer."""
        self.notifications += 1
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self.scheduler.call_later(self.quiet_period_ms / 1000.0, self._fire)

    def cancel(self) -> None:
        """Drop any pending timer without firing."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        self.fired += 1
        try:
            self.on_quiet()
        except Exception:
            logger.exception("Quiet-period callback failed")
