"""
Core Layer - domain model, Result type, exceptions and ports.

Nothing in this package talks to git, the filesystem or the event loop
directly; adapters implement the ports declared in ``core.ports``.
"""

from .domain import (
    CommitRecord,
    EngineStats,
    FileEvent,
    FileEventKind,
    FileStatusEntry,
    LifecycleState,
    WorkingTreeStatus,
)
from .exceptions import (
    ConfigError,
    ConfigFileError,
    ConfigValidationError,
    EngineDisposedError,
    GitCommandError,
    LifecycleError,
    NotARepositoryError,
    NotInitializedError,
    TreeSyncError,
    WatcherError,
)
from .result import Err, Ok, Result, ResultError


__all__ = [
    "CommitRecord",
    "ConfigError",
    "ConfigFileError",
    "ConfigValidationError",
    "EngineDisposedError",
    "EngineStats",
    "Err",
    "FileEvent",
    "FileEventKind",
    "FileStatusEntry",
    "GitCommandError",
    "LifecycleError",
    "LifecycleState",
    "NotARepositoryError",
    "NotInitializedError",
    "Ok",
    "Result",
    "ResultError",
    "TreeSyncError",
    "WatcherError",
    "WorkingTreeStatus",
]
