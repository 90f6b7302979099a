"""
Root Binding - The watched root and its live watcher handle.

A binding forwards every filesystem event to the change coordinator until it
is closed. Closing deactivates forwarding first and then awaits the watcher
handle, so an event from an old root can never reach the coordinator once
the engine has moved on.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from treesync.core.domain.entities import EngineStats, FileEvent
from treesync.core.ports.file_watcher import FileWatcherPort, WatchHandle

from .coordinator import ChangeCoordinator


logger = logging.getLogger("RootBinding")


@dataclass
class RootBinding:
    """Link between one root directory, its watcher and the coordinator."""

    root_path: Path
    coordinator: ChangeCoordinator
    stats: EngineStats
    handle: WatchHandle | None = None
    active: bool = True

    def forward(self, event: FileEvent) -> None:
        """Watcher callback; the event kind and path do not matter."""
        if not self.active:
            logger.debug(f"Dropping event from closed binding: {event}")
            return
        self.stats.events_received += 1
        self.coordinator.notify()

    async def close(self) -> None:
        self.active = False
        if self.handle is not None and not self.handle.closed:
            await self.handle.close()


async def open_root_binding(
    watcher: FileWatcherPort,
    root_path: Path,
    ignore_globs: Sequence[str],
    coordinator: ChangeCoordinator,
    stats: EngineStats,
) -> RootBinding:
    """
    Start watching ``root_path`` and wire its events into ``coordinator``.

    Raises:
        WatcherError: If the watcher cannot bind
    """
    binding = RootBinding(root_path=root_path, coordinator=coordinator, stats=stats)
    try:
        binding.handle = await watcher.watch(root_path, ignore_globs, binding.forward)
    except BaseException:
        binding.active = False
        raise
    return binding
