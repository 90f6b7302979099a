"""
Scheduler Port - Cancellable delayed callbacks.

The debounce timer goes through this port so tests can drive a virtual
clock instead of sleeping.

Implementations:
- AsyncioScheduler: ``loop.call_later`` on the running event loop
"""

from abc import ABC, abstractmethod
from collections.abc import Callable


__all__ = ["ScheduledTask", "SchedulerPort"]


class ScheduledTask(ABC):
    """A callback scheduled to run once in the future."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class SchedulerPort(ABC):
    """Abstract interface for timers."""

    @abstractmethod
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        """
        Run ``callback`` once after ``delay_seconds``.

        Returns:
            A task that can be cancelled before it fires
        """
        ...
