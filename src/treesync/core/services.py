"""
Service Factories - Composition of the sync engine.

Provides factory functions that wire the engine with production adapters.
Every call builds fresh instances; there is no module-level engine.

Usage:
    engine = create_sync_engine(config)
    result = await engine.initialize(path)

Testing:
    engine = create_sync_engine(
        config,
        driver=fake_driver,
        watcher=fake_watcher,
        scheduler=fake_scheduler,
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .ports.config_provider import AppConfig, EngineConfig
from .ports.file_watcher import FileWatcherPort
from .ports.scheduler import SchedulerPort
from .ports.status_notifier import StatusNotifierPort
from .ports.vcs_driver import VersionControlDriverPort


if TYPE_CHECKING:
    from treesync.application.sync import SyncEngine


logger = logging.getLogger("Services")


def create_driver(config: EngineConfig) -> VersionControlDriverPort:
    """Create the git CLI driver."""
    from treesync.adapters.git import GitCliDriver

    return GitCliDriver(git_binary=config.git_binary, timeout=config.git_timeout)


def create_watcher(config: EngineConfig) -> FileWatcherPort:
    """Create the watchfiles-backed watcher."""
    from treesync.adapters.watch import WatchfilesWatcher

    return WatchfilesWatcher(
        debounce_ms=config.watch_debounce_ms,
        force_polling=config.force_polling,
    )


def create_scheduler() -> SchedulerPort:
    """Create the event-loop scheduler."""
    from treesync.adapters.scheduling import AsyncioScheduler

    return AsyncioScheduler()


def create_sync_engine(
    config: AppConfig | EngineConfig | None = None,
    driver: VersionControlDriverPort | None = None,
    watcher: FileWatcherPort | None = None,
    scheduler: SchedulerPort | None = None,
    notifier: StatusNotifierPort | None = None,
) -> SyncEngine:
    """
    Create a SyncEngine with default adapters for anything not supplied.

    Args:
        config: Application or engine configuration (defaults if None)
        driver: Git driver override
        watcher: Filesystem watcher override
        scheduler: Debounce timer source override
        notifier: Status notifier override (default: StatusBroadcaster)

    Returns:
        Unbound SyncEngine
    """
    from treesync.application.sync import SyncEngine

    if isinstance(config, AppConfig):
        engine_config = config.engine
    else:
        engine_config = config or EngineConfig()

    engine = SyncEngine(
        driver=driver or create_driver(engine_config),
        watcher=watcher or create_watcher(engine_config),
        scheduler=scheduler or create_scheduler(),
        notifier=notifier,
        config=engine_config,
    )
    logger.debug(
        f"Created SyncEngine (driver={type(engine.driver).__name__}, "
        f"watcher={type(engine.watcher).__name__}, quiet_period={engine_config.quiet_period_ms}ms)"
    )
    return engine
