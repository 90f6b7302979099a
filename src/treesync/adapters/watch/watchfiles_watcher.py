"""
Watchfiles Watcher - FileWatcherPort backed by ``watchfiles.awatch``.

Each watch runs ``awatch`` inside an asyncio task. Closing the handle sets
the stop event and waits for the task, so once ``close()`` returns no
event from that root can reach the callback.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Sequence
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath

from watchfiles import Change, awatch

from treesync.core.domain.entities import FileEvent
from treesync.core.domain.enums import FileEventKind
from treesync.core.exceptions import WatcherError
from treesync.core.ports.file_watcher import FileEventCallback, FileWatcherPort, WatchHandle


logger = logging.getLogger("WatchfilesWatcher")

CHANGE_KINDS = {
    Change.added: FileEventKind.ADD,
    Change.modified: FileEventKind.CHANGE,
    Change.deleted: FileEventKind.UNLINK,
}


class IgnoreGlobFilter:
    """
    ``watch_filter`` for awatch built from root-relative glob patterns.

    Patterns without a slash are matched against every path component
    (so ``.*`` hides dotfiles at any depth). ``dir/**`` patterns hide the
    directory and everything below it.
    """

    def __init__(self, root: Path, ignore_globs: Sequence[str]):
        self.root = Path(root).resolve()
        self.ignore_globs = list(ignore_globs)

    def is_ignored(self, path: str | Path) -> bool:
        try:
            rel = PurePosixPath(Path(path).resolve().relative_to(self.root).as_posix())
        except ValueError:
            return True
        if str(rel) == ".":
            return False

        rel_str = str(rel)
        for pattern in self.ignore_globs:
            if pattern.endswith("/**"):
                prefix = pattern[:-3]
                if rel_str == prefix or rel_str.startswith(prefix + "/"):
                    return True
                if "/" not in prefix and prefix in rel.parts:
                    return True
            elif "/" in pattern:
                if fnmatch(rel_str, pattern):
                    return True
            elif any(fnmatch(part, pattern) for part in rel.parts):
                return True
        return False

    def __call__(self, change: Change, path: str) -> bool:
        return not self.is_ignored(path)


class WatchfilesHandle(WatchHandle):
    """Handle for one running awatch task."""

    close_timeout = 5.0

    def __init__(
        self,
        root: Path,
        ignore_filter: IgnoreGlobFilter,
        on_event: FileEventCallback,
        debounce_ms: int = 50,
        force_polling: bool = False,
    ):
        self._root = root
        self._filter = ignore_filter
        self._on_event = on_event
        self._debounce_ms = debounce_ms
        self._force_polling = force_polling
        self._stop_event = asyncio.Event()
        self._closed = False
        self._task: asyncio.Task[None] | None = None
        self.error: BaseException | None = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        self._task = asyncio.get_running_loop().create_task(self._pump())

    async def _pump(self) -> None:
        try:
            async for changes in awatch(
                self._root,
                watch_filter=self._filter,
                debounce=self._debounce_ms,
                stop_event=self._stop_event,
                force_polling=self._force_polling or None,
                recursive=True,
            ):
                for change, path in changes:
                    if self._closed:
                        return
                    self._dispatch(FileEvent(kind=CHANGE_KINDS[change], path=path))
        except Exception as e:
            self.error = e
            logger.error(f"Watcher on {self._root} stopped: {e}")

    def _dispatch(self, event: FileEvent) -> None:
        try:
            self._on_event(event)
        except Exception:
            logger.exception(f"File event callback failed for {event}")

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._stop_event.set()

        task = self._task
        if task is None or task.done():
            return
        try:
            await asyncio.wait_for(task, timeout=self.close_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Watcher on {self._root} did not stop within {self.close_timeout}s")
        logger.debug(f"Closed watcher on {self._root}")


class WatchfilesWatcher(FileWatcherPort):
    """
    Recursive watcher using the ``watchfiles`` library.

    Args:
        debounce_ms: Batching window inside watchfiles (the engine does its
            own trailing debounce on top)
        force_polling: Poll instead of native notifications (network drives,
            some containers)
    """

    def __init__(self, debounce_ms: int = 50, force_polling: bool = False):
        self.debounce_ms = debounce_ms
        self.force_polling = force_polling

    async def watch(
        self,
        root: Path,
        ignore_globs: Sequence[str],
        on_event: FileEventCallback,
    ) -> WatchHandle:
        root = Path(root)
        if not root.exists():
            raise WatcherError(f"Watch root does not exist: {root}", path=str(root))
        if not root.is_dir():
            raise WatcherError(f"Watch root is not a directory: {root}", path=str(root))
        if not os.access(root, os.R_OK | os.X_OK):
            raise WatcherError(f"Permission denied watching {root}", path=str(root))

        handle = WatchfilesHandle(
            root=root,
            ignore_filter=IgnoreGlobFilter(root, ignore_globs),
            on_event=on_event,
            debounce_ms=self.debounce_ms,
            force_polling=self.force_polling,
        )
        handle.start()

        # awatch sets up the native watch on its first step; surface failures now
        await asyncio.sleep(0)
        if handle.error is not None:
            await handle.close()
            raise WatcherError(
                f"Could not watch {root}: {handle.error}",
                path=str(root),
                cause=handle.error,
            )

        logger.debug(f"Watching {root} (ignoring {', '.join(ignore_globs)})")
        return handle
