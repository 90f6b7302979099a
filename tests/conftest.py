"""
Shared pytest fixtures for the treesync test suite.

Fixture Categories:
- Fakes: virtual-clock scheduler, recording git driver, recording watcher
- Engine: SyncEngine wired with the fakes and a recording subscriber
- Data: sample raw status / log values
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from treesync.application.sync import StatusBroadcaster, SyncEngine
from treesync.core.domain.entities import FileEvent
from treesync.core.domain.enums import FileEventKind
from treesync.core.exceptions import GitCommandError, WatcherError
from treesync.core.ports.config_provider import EngineConfig
from treesync.core.ports.file_watcher import FileEventCallback, FileWatcherPort, WatchHandle
from treesync.core.ports.scheduler import ScheduledTask, SchedulerPort
from treesync.core.ports.status_notifier import StatusEvent
from treesync.core.ports.vcs_driver import (
    RawFileStatus,
    RawLog,
    RawLogEntry,
    RawStatus,
    VersionControlDriverPort,
)


# =============================================================================
# Virtual Clock Scheduler
# =============================================================================


class FakeTask(ScheduledTask):
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class FakeScheduler(SchedulerPort):
    """Scheduler driven by ``advance()`` instead of wall-clock time."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, FakeTask]] = []
        self._counter = itertools.count()
        self.scheduled: list[FakeTask] = []

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        task = FakeTask(self.now + max(0.0, delay_seconds), callback)
        heapq.heappush(self._queue, (task.when, next(self._counter), task))
        self.scheduled.append(task)
        return task

    @property
    def pending(self) -> list[FakeTask]:
        return [task for _, _, task in self._queue if not task.cancelled]

    def advance(self, seconds: float) -> list[float]:
        """Move the clock forward, firing due callbacks. Returns fire times."""
        target = self.now + seconds
        fired = []
        while self._queue and self._queue[0][0] <= target:
            when, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self.now = when
            fired.append(when)
            task.callback()
        self.now = target
        return fired


# =============================================================================
# Recording Git Driver
# =============================================================================


def make_raw_status(
    *,
    current: str = "main",
    tracking: str = "",
    staged: Sequence[str] = (),
    not_added: Sequence[str] = (),
    created: Sequence[str] = (),
    modified: Sequence[str] = (),
    deleted: Sequence[str] = (),
    conflicted: Sequence[str] = (),
    **kwargs: Any,
) -> RawStatus:
    files = [RawFileStatus(path=p, index="?", working_dir="?") for p in not_added]
    files += [RawFileStatus(path=p, index="M", working_dir=" ") for p in staged]
    return RawStatus(
        current=current,
        tracking=tracking,
        staged=list(staged),
        not_added=list(not_added),
        created=list(created),
        modified=list(modified),
        deleted=list(deleted),
        conflicted=list(conflicted),
        files=files,
        **kwargs,
    )


class RecordingDriver(VersionControlDriverPort):
    """
    In-memory driver that records every call.

    ``statuses`` is consumed front to back; the last entry repeats. Set
    ``fail[method]`` to an exception to make that method raise it.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.repos: set[Path] | None = None  # None = every path is a repo
        self.statuses: list[RawStatus] = [make_raw_status()]
        self.log_entries: list[RawLogEntry] = []
        self.fail: dict[str, BaseException] = {}

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail:
            raise self.fail[name]

    def calls_to(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]

    async def check_is_repo(self, path: Path) -> bool:
        self._record("check_is_repo", path)
        return self.repos is None or Path(path) in self.repos

    async def init(self, path: Path) -> None:
        self._record("init", path)

    async def status(self, root: Path) -> RawStatus:
        self._record("status", root)
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0]

    async def add(self, root: Path, paths: list[str]) -> None:
        self._record("add", root, list(paths))

    async def reset(self, root: Path, args: list[str]) -> None:
        self._record("reset", root, list(args))

    async def commit(self, root: Path, message: str) -> None:
        self._record("commit", root, message)

    async def checkout(self, root: Path, args: list[str]) -> None:
        self._record("checkout", root, list(args))

    async def log(self, root: Path, max_count: int | None = None) -> RawLog:
        self._record("log", root, max_count)
        entries = self.log_entries if max_count is None else self.log_entries[:max_count]
        return RawLog(all=list(entries))


# =============================================================================
# Recording Watcher
# =============================================================================


class FakeWatchHandle(WatchHandle):
    def __init__(self, root: Path, ignore_globs: Sequence[str], on_event: FileEventCallback):
        self._root = root
        self.ignore_globs = list(ignore_globs)
        self.on_event = on_event
        self._closed = False

    @property
    def root(self) -> Path:
        return self._root

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        self._closed = True

    def emit(self, kind: FileEventKind = FileEventKind.CHANGE, path: str = "file.txt") -> None:
        """Deliver an event the way a misbehaving watcher might: even after close."""
        self.on_event(FileEvent(kind=kind, path=str(self._root / path)))


class RecordingWatcher(FileWatcherPort):
    def __init__(self) -> None:
        self.handles: list[FakeWatchHandle] = []
        self.fail: BaseException | None = None

    async def watch(
        self, root: Path, ignore_globs: Sequence[str], on_event: FileEventCallback
    ) -> WatchHandle:
        if self.fail is not None:
            raise self.fail
        handle = FakeWatchHandle(Path(root), ignore_globs, on_event)
        self.handles.append(handle)
        return handle

    @property
    def last(self) -> FakeWatchHandle:
        return self.handles[-1]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def driver() -> RecordingDriver:
    return RecordingDriver()


@pytest.fixture
def watcher() -> RecordingWatcher:
    return RecordingWatcher()


@pytest.fixture
def broadcaster() -> StatusBroadcaster:
    return StatusBroadcaster()


@pytest.fixture
def events(broadcaster: StatusBroadcaster) -> list[StatusEvent]:
    """Every status-changed event published through ``broadcaster``."""
    received: list[StatusEvent] = []
    broadcaster.subscribe(received.append)
    return received


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig(quiet_period_ms=300)


@pytest.fixture
def engine(
    driver: RecordingDriver,
    watcher: RecordingWatcher,
    scheduler: FakeScheduler,
    broadcaster: StatusBroadcaster,
    engine_config: EngineConfig,
) -> SyncEngine:
    return SyncEngine(
        driver=driver,
        watcher=watcher,
        scheduler=scheduler,
        notifier=broadcaster,
        config=engine_config,
    )


@pytest.fixture
def git_error() -> GitCommandError:
    return GitCommandError(
        "git status failed",
        command=["status"],
        exit_code=128,
        stderr="fatal: index file corrupt",
    )


@pytest.fixture
def watcher_error() -> WatcherError:
    return WatcherError("Permission denied watching /repo", path="/repo")


@pytest.fixture
def sample_log_entries() -> list[RawLogEntry]:
    return [
        RawLogEntry(
            hash="c3" * 20,
            date="2024-03-02T10:00:00+00:00",
            message="Add parser",
            refs="HEAD -> main",
            author_name="Ada",
            author_email="ada@example.com",
        ),
        RawLogEntry(
            hash="b2" * 20,
            date="2024-03-01T10:00:00+00:00",
            message="Initial commit",
            author_name="Ada",
            author_email="ada@example.com",
        ),
    ]


@pytest.fixture
def raw_status() -> Callable[..., RawStatus]:
    """Factory for RawStatus values (keyword arguments per category)."""
    return make_raw_status


@pytest.fixture(scope="session")
def make_scheduler() -> Callable[[], FakeScheduler]:
    """Scheduler factory for tests that need a fresh clock per example (hypothesis)."""
    return FakeScheduler
