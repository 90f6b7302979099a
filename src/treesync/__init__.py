"""
treesync - Keep a git working tree's status continuously up to date.

The SyncEngine binds to a repository root, watches it for changes, coalesces
bursts of filesystem events into single refreshes and pushes each new
WorkingTreeStatus to its subscribers.

Usage:
    from treesync.core.services import create_sync_engine

    engine = create_sync_engine()
    engine.subscribe(lambda event: print(event.to_dict()))
    result = await engine.initialize("/path/to/repo")
"""

__version__ = "0.1.0"
