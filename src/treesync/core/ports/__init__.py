"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .config_provider import AppConfig, ConfigProviderPort, EngineConfig
from .file_watcher import DEFAULT_IGNORE_GLOBS, FileEventCallback, FileWatcherPort, WatchHandle
from .scheduler import ScheduledTask, SchedulerPort
from .status_notifier import STATUS_CHANGED, StatusEvent, StatusNotifierPort
from .vcs_driver import (
    GitCommandError,
    RawFileStatus,
    RawLog,
    RawLogEntry,
    RawStatus,
    VersionControlDriverPort,
)


__all__ = [
    "DEFAULT_IGNORE_GLOBS",
    "STATUS_CHANGED",
    "AppConfig",
    "ConfigProviderPort",
    "EngineConfig",
    "FileEventCallback",
    "FileWatcherPort",
    "GitCommandError",
    "RawFileStatus",
    "RawLog",
    "RawLogEntry",
    "RawStatus",
    "ScheduledTask",
    "SchedulerPort",
    "StatusEvent",
    "StatusNotifierPort",
    "VersionControlDriverPort",
    "WatchHandle",
]
