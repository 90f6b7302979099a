"""
Adapters - Concrete implementations of the core ports.

- git: VersionControlDriverPort over the git CLI
- watch: FileWatcherPort over watchfiles
- scheduling: SchedulerPort over the asyncio event loop
- config: ConfigProviderPort over env vars and YAML/TOML files
"""

from .config import EnvironmentConfigProvider, FileConfigProvider
from .git import GitCliDriver
from .scheduling import AsyncioScheduler
from .watch import WatchfilesWatcher


__all__ = [
    "AsyncioScheduler",
    "EnvironmentConfigProvider",
    "FileConfigProvider",
    "GitCliDriver",
    "WatchfilesWatcher",
]
