"""
Scheduling adapter - SchedulerPort implementation on asyncio.
"""

from .asyncio_scheduler import AsyncioScheduler, TimerTask


__all__ = ["AsyncioScheduler", "TimerTask"]
