"""
Sync Engine - Keeps a git working tree status continuously up to date.

The engine binds to one root at a time, watches it, coalesces bursts of
filesystem events into single refreshes and pushes each new
WorkingTreeStatus to the status notifier. It also runs the mutating git
operations (stage, unstage, commit, discard) and pushes a fresh status right
after each one succeeds.

Lifecycle:
    UNINITIALIZED --initialize--> BOUND --initialize--> BOUND --dispose--> DISPOSED

Every public operation returns a Result; nothing raises across the engine
boundary.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from pathlib import Path
from typing import Any, TypeVar

from treesync.core.domain.entities import CommitRecord, EngineStats, WorkingTreeStatus
from treesync.core.domain.enums import LifecycleState
from treesync.core.exceptions import (
    EngineDisposedError,
    GitCommandError,
    NotARepositoryError,
    NotInitializedError,
    TreeSyncError,
    WatcherError,
)
from treesync.core.ports.config_provider import EngineConfig
from treesync.core.ports.file_watcher import FileWatcherPort
from treesync.core.ports.scheduler import SchedulerPort
from treesync.core.ports.status_notifier import StatusEvent, StatusNotifierPort
from treesync.core.ports.vcs_driver import VersionControlDriverPort
from treesync.core.result import Err, Ok, Result

from .binding import RootBinding, open_root_binding
from .coordinator import ChangeCoordinator
from .mapper import StatusMapper
from .notifier import StatusBroadcaster, StatusSubscriber


T = TypeVar("T")

logger = logging.getLogger("SyncEngine")


class SyncEngine:
    """
    Working-tree status synchronization engine.

    Mutations, ``initialize`` and ``init_repo`` run one at a time in
    submission order (FIFO lock), since git takes its own index lock and
    back-to-back commands would otherwise contend for it. Reads are not
    serialized.

    Usage:
        engine = SyncEngine(driver, watcher, scheduler)
        unsubscribe = engine.subscribe(print)
        result = await engine.initialize("/path/to/repo")
        if result.is_ok():
            print(result.unwrap().current_branch)
        ...
        await engine.dispose()
    """

    def __init__(
        self,
        driver: VersionControlDriverPort,
        watcher: FileWatcherPort,
        scheduler: SchedulerPort,
        notifier: StatusNotifierPort | None = None,
        config: EngineConfig | None = None,
        mapper: StatusMapper | None = None,
    ):
        """
        Initialize the engine.

        Args:
            driver: Git driver
            watcher: Filesystem watcher
            scheduler: Timer source for the debounce window
            notifier: Receives status-changed events (default: a new StatusBroadcaster)
            config: Engine configuration
            mapper: Raw driver output to domain mapper
        """
        self.driver = driver
        self.watcher = watcher
        self.notifier = notifier if notifier is not None else StatusBroadcaster()
        self.config = config or EngineConfig()
        self.mapper = mapper or StatusMapper()
        self.stats = EngineStats()

        self._state = LifecycleState.UNINITIALIZED
        self._binding: RootBinding | None = None
        self._lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[None]] = set()
        # Refreshes are numbered when their status query starts; an older
        # result never replaces a newer one that was already published.
        self._refresh_seq = 0
        self._published_seq = 0
        self._quiet_deferred = False
        self._coordinator = ChangeCoordinator(
            scheduler=scheduler,
            on_quiet=self._on_quiet,
            quiet_period_ms=self.config.quiet_period_ms,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def root_path(self) -> Path | None:
        """Currently bound root, or None."""
        return self._binding.root_path if self._binding else None

    @property
    def refresh_pending(self) -> bool:
        """True while a debounced refresh is waiting for its quiet period."""
        return self._coordinator.pending

    def subscribe(self, callback: StatusSubscriber) -> Callable[[], None]:
        """
        Subscribe to status-changed events.

        Only available when the notifier is a StatusBroadcaster.

        Returns:
            Unsubscribe function
        """
        if not isinstance(self.notifier, StatusBroadcaster):
            raise TypeError(f"{type(self.notifier).__name__} does not support subscribe()")
        return self.notifier.subscribe(callback)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self, root_path: str | Path) -> Result[WorkingTreeStatus, TreeSyncError]:
        """
        Bind the engine to a repository root.

        Any previous binding is torn down first. The repository check runs
        before the watcher binds; on any failure the engine is left
        UNINITIALIZED with no watcher running.

        Args:
            root_path: Root directory of the working tree

        Returns:
            Ok with the initial status snapshot, or Err with
            NotARepositoryError, WatcherError, GitCommandError or
            EngineDisposedError
        """
        if self._state is LifecycleState.DISPOSED:
            return Err(EngineDisposedError())

        async with self._lock:
            if self._state is LifecycleState.DISPOSED:
                return Err(EngineDisposedError())

            root = Path(root_path).expanduser()
            await self._unbind()

            try:
                is_repo = await self._call_driver("check_is_repo", self.driver.check_is_repo, root)
            except TreeSyncError as e:
                return Err(e)
            if not is_repo:
                logger.info(f"Refusing to bind {root}: not a git repository")
                return Err(NotARepositoryError(f"Not a git repository: {root}", path=str(root)))
            if self._state is LifecycleState.DISPOSED:
                return Err(EngineDisposedError())

            try:
                binding = await open_root_binding(
                    self.watcher,
                    root,
                    self.config.all_ignore_globs,
                    self._coordinator,
                    self.stats,
                )
            except WatcherError as e:
                self.stats.record_error(str(e))
                return Err(e)
            except Exception as e:
                self.stats.record_error(str(e))
                return Err(WatcherError(f"Could not watch {root}: {e}", path=str(root), cause=e))

            if self._state is LifecycleState.DISPOSED:
                await binding.close()
                return Err(EngineDisposedError())

            try:
                status = await self._query_status(root)
            except TreeSyncError as e:
                await binding.close()
                self.stats.record_error(str(e))
                return Err(e)

            if self._state is LifecycleState.DISPOSED:
                await binding.close()
                return Err(EngineDisposedError())

            self._binding = binding
            self._state = LifecycleState.BOUND
            logger.info(f"Bound to {root} (branch {status.current_branch or '?'})")
            if self._quiet_deferred:
                # A quiet period ended while the initial status was running
                logger.debug(f"Running deferred refresh for {root}")
                self._quiet_deferred = False
                self._spawn(self._refresh(binding))
            return Ok(status)

    async def dispose(self) -> Result[None, TreeSyncError]:
        """
        Tear the engine down.

        Cancels the debounce timer and in-flight background refreshes, closes
        the watcher and clears the binding. Safe in any state; calling it
        again is a no-op.
        """
        if self._state is LifecycleState.DISPOSED:
            return Ok(None)

        self._state = LifecycleState.DISPOSED
        self._coordinator.cancel()

        binding, self._binding = self._binding, None
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()

        if binding is not None:
            try:
                await binding.close()
            except Exception as e:
                logger.warning(f"Error closing watcher for {binding.root_path}: {e}")
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        logger.info("Engine disposed")
        return Ok(None)

    async def __aenter__(self) -> SyncEngine:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.dispose()

    async def wait_idle(self) -> None:
        """Wait until no background refresh is running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # -------------------------------------------------------------------------
    # Path-based Operations
    # -------------------------------------------------------------------------

    async def check_is_repo(self, path: str | Path) -> Result[bool, TreeSyncError]:
        """Check whether ``path`` is inside a git working tree."""
        if self._state is LifecycleState.DISPOSED:
            return Err(EngineDisposedError())
        try:
            return Ok(await self._call_driver("check_is_repo", self.driver.check_is_repo, Path(path)))
        except TreeSyncError as e:
            return Err(e)

    async def init_repo(self, path: str | Path) -> Result[None, TreeSyncError]:
        """Create a new repository at ``path``."""
        if self._state is LifecycleState.DISPOSED:
            return Err(EngineDisposedError())
        async with self._lock:
            if self._state is LifecycleState.DISPOSED:
                return Err(EngineDisposedError())
            try:
                await self._call_driver("init", self.driver.init, Path(path))
            except TreeSyncError as e:
                return Err(e)
        logger.info(f"Initialized repository at {path}")
        return Ok(None)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_status(self) -> Result[WorkingTreeStatus, TreeSyncError]:
        """Full, untracked-inclusive status of the bound root."""
        try:
            binding = self._require_binding()
            return Ok(await self._query_status(binding.root_path))
        except TreeSyncError as e:
            return Err(e)

    async def get_log(self, max_count: int | None = None) -> Result[list[CommitRecord], TreeSyncError]:
        """
        Commit history of the bound root, newest first.

        Args:
            max_count: Limit the number of commits (None for all)
        """
        try:
            binding = self._require_binding()
            raw = await self._call_driver("log", self.driver.log, binding.root_path, max_count)
        except TreeSyncError as e:
            return Err(e)
        return Ok(self.mapper.map_log(raw))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add(self, paths: list[str]) -> Result[None, TreeSyncError]:
        """Stage ``paths``."""
        paths = list(paths)
        return await self._mutate("add", lambda root: self.driver.add(root, paths))

    async def stage(self, paths: list[str]) -> Result[None, TreeSyncError]:
        """Alias of add()."""
        return await self.add(paths)

    async def unstage(self, paths: list[str]) -> Result[None, TreeSyncError]:
        """
        Remove ``paths`` from the index, keeping working tree changes.

        An empty selection is a no-op; ``git reset HEAD --`` with no paths
        would clear the whole index.
        """
        paths = list(paths)
        if not paths:
            try:
                self._require_binding()
            except TreeSyncError as e:
                return Err(e)
            return Ok(None)

        async def run(root: Path) -> None:
            if await self._has_commits(root):
                await self.driver.reset(root, ["HEAD", "--", *paths])
            else:
                await self.driver.reset(root, ["--", *paths])

        return await self._mutate("reset", run)

    async def stage_all(self) -> Result[None, TreeSyncError]:
        return await self._mutate("add", lambda root: self.driver.add(root, ["."]))

    async def unstage_all(self) -> Result[None, TreeSyncError]:
        """
        Clear the index.

        A repository with no commits has no HEAD to reset against, so the
        bare ``git reset`` form is used there instead of ``git reset HEAD``.
        """

        async def run(root: Path) -> None:
            if await self._has_commits(root):
                await self.driver.reset(root, ["HEAD"])
            else:
                await self.driver.reset(root, [])

        return await self._mutate("reset", run)

    async def discard_all(self) -> Result[None, TreeSyncError]:
        """Discard all unstaged changes to tracked files."""
        return await self._mutate("checkout", lambda root: self.driver.checkout(root, ["--", "."]))

    async def commit(self, message: str) -> Result[None, TreeSyncError]:
        return await self._mutate("commit", lambda root: self.driver.commit(root, message))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_binding(self) -> RootBinding:
        if self._state is LifecycleState.DISPOSED:
            raise EngineDisposedError()
        if self._binding is None:
            raise NotInitializedError()
        return self._binding

    async def _call_driver(self, command: str, fn: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Await a driver call, turning any non-TreeSyncError into GitCommandError."""
        try:
            return await fn(*args)
        except TreeSyncError:
            raise
        except Exception as e:
            raise GitCommandError(f"git {command} failed: {e}", command=[command], cause=e) from e

    async def _query_status(self, root: Path) -> WorkingTreeStatus:
        raw = await self._call_driver("status", self.driver.status, root)
        return self.mapper.map_status(raw)

    async def _has_commits(self, root: Path) -> bool:
        log = await self._call_driver("log", self.driver.log, root, 1)
        return log.total > 0

    async def _unbind(self) -> None:
        """Close the current binding (if any) and cancel pending work."""
        self._coordinator.cancel()
        self._quiet_deferred = False
        binding, self._binding = self._binding, None
        if self._state is LifecycleState.BOUND:
            self._state = LifecycleState.UNINITIALIZED
        if binding is not None:
            logger.debug(f"Unbinding {binding.root_path}")
            await binding.close()

    async def _mutate(
        self, command: str, operation: Callable[[Path], Awaitable[None]]
    ) -> Result[None, TreeSyncError]:
        async with self._lock:
            try:
                binding = self._require_binding()
                await self._call_driver(command, operation, binding.root_path)
            except TreeSyncError as e:
                logger.warning(f"git {command} failed: {e}")
                return Err(e)

            self.stats.mutations_run += 1
            await self._refresh(binding)
            return Ok(None)

    def _on_quiet(self) -> None:
        if self._state is LifecycleState.DISPOSED:
            return
        binding = self._binding
        if binding is None:
            # initialize() is still querying the first status for a new root
            self._quiet_deferred = True
            return
        self._spawn(self._refresh(binding))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _is_current(self, binding: RootBinding) -> bool:
        return binding.active and binding is self._binding

    async def _refresh(self, binding: RootBinding) -> None:
        """
        Query status and publish one status-changed event.

        Failures are logged and published as error envelopes; they never
        propagate. Results for a binding that is no longer current are
        dropped, and so are results overtaken by a refresh that started
        later and has already published.
        """
        if not self._is_current(binding):
            return

        root = str(binding.root_path)
        self.stats.refreshes_triggered += 1
        self._refresh_seq += 1
        seq = self._refresh_seq
        try:
            status = await self._query_status(binding.root_path)
        except TreeSyncError as e:
            if not self._is_current(binding) or self._is_superseded(seq):
                return
            self.stats.refreshes_failed += 1
            self.stats.record_error(str(e))
            logger.warning(f"Status refresh for {root} failed: {e}")
            self._publish(StatusEvent.failure(root, e.to_envelope(root)))
            return

        if not self._is_current(binding) or self._is_superseded(seq):
            logger.debug(f"Dropping stale status for {root}")
            return
        self.stats.refreshes_succeeded += 1
        self._publish(StatusEvent.success(root, status))

    def _is_superseded(self, seq: int) -> bool:
        """True if a newer refresh already published; otherwise claim ``seq``."""
        if seq < self._published_seq:
            return True
        self._published_seq = seq
        return False

    def _publish(self, event: StatusEvent) -> None:
        try:
            self.notifier.publish(event)
        except Exception:
            logger.exception(f"Notifier failed to publish {event.name}")
