"""
Asyncio Scheduler - SchedulerPort backed by ``loop.call_later``.
"""

import asyncio
from collections.abc import Callable

from treesync.core.ports.scheduler import ScheduledTask, SchedulerPort


class TimerTask(ScheduledTask):
    """Wraps an asyncio TimerHandle."""

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()

    @property
    def when(self) -> float:
        """Loop time at which the callback is due."""
        return self._handle.when()


class AsyncioScheduler(SchedulerPort):
    """
    Schedules callbacks on an event loop.

    If no loop is given, the running loop at call time is used, so the
    scheduler can be created before the loop starts.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        loop = self._loop or asyncio.get_running_loop()
        return TimerTask(loop.call_later(max(0.0, delay_seconds), callback))
