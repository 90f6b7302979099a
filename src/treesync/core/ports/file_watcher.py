"""
File Watcher Port - Abstract interface for recursive filesystem watching.

Implementations:
- WatchfilesWatcher: backed by the ``watchfiles`` library
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from pathlib import Path

from treesync.core.domain.entities import FileEvent


__all__ = [
    "DEFAULT_IGNORE_GLOBS",
    "FileEventCallback",
    "FileWatcherPort",
    "WatchHandle",
]


FileEventCallback = Callable[[FileEvent], None]

# Dotfiles are matched per path component by the adapters, so ".*" covers
# ".env" as well as "src/.cache/x".
DEFAULT_IGNORE_GLOBS: tuple[str, ...] = (".*", "node_modules/**", ".git/**")


class WatchHandle(ABC):
    """A live watch on one root. Closing it releases native resources."""

    @property
    @abstractmethod
    def root(self) -> Path:
        ...

    @property
    @abstractmethod
    def closed(self) -> bool:
        ...

    @abstractmethod
    async def close(self) -> None:
        """
        Stop watching.

        Once this returns no further events are delivered to the callback.
        Closing twice is a no-op.
        """
        ...


class FileWatcherPort(ABC):
    """Abstract interface for filesystem watchers."""

    @abstractmethod
    async def watch(
        self,
        root: Path,
        ignore_globs: Sequence[str],
        on_event: FileEventCallback,
    ) -> WatchHandle:
        """
        Start watching ``root`` recursively.

        Args:
            root: Directory to watch
            ignore_globs: Root-relative glob patterns to ignore
            on_event: Called on the event loop for every add/change/unlink

        Returns:
            Handle used to stop the watch

        Raises:
            WatcherError: If the watch cannot be established
        """
        ...
