"""
Application Layer - Use cases and orchestration.

This layer contains:
- sync/: SyncEngine, debounce coordination, status mapping and broadcasting
"""

from .sync import (
    ChangeCoordinator,
    RootBinding,
    StatusBroadcaster,
    StatusMapper,
    SyncEngine,
    open_root_binding,
)


__all__ = [
    "ChangeCoordinator",
    "RootBinding",
    "StatusBroadcaster",
    "StatusMapper",
    "SyncEngine",
    "open_root_binding",
]
