"""
Sync Module - Keeping a working tree status in step with the filesystem.
"""

from .binding import RootBinding, open_root_binding
from .coordinator import ChangeCoordinator
from .engine import SyncEngine
from .mapper import StatusMapper
from .notifier import StatusBroadcaster, StatusSubscriber


__all__ = [
    "ChangeCoordinator",
    "RootBinding",
    "StatusBroadcaster",
    "StatusMapper",
    "StatusSubscriber",
    "SyncEngine",
    "open_root_binding",
]
