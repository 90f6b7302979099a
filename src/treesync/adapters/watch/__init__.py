"""
Watch adapter - FileWatcherPort implementation using watchfiles.
"""

from .watchfiles_watcher import IgnoreGlobFilter, WatchfilesHandle, WatchfilesWatcher


__all__ = ["IgnoreGlobFilter", "WatchfilesHandle", "WatchfilesWatcher"]
