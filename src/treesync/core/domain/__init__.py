"""
Domain Layer - entities and enums describing working-tree state.
"""

from .entities import CommitRecord, EngineStats, FileEvent, FileStatusEntry, WorkingTreeStatus
from .enums import FileEventKind, LifecycleState


__all__ = [
    "CommitRecord",
    "EngineStats",
    "FileEvent",
    "FileEventKind",
    "FileStatusEntry",
    "LifecycleState",
    "WorkingTreeStatus",
]
