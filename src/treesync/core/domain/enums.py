"""
Domain enums - lifecycle states and filesystem event kinds.
"""

from __future__ import annotations

from enum import Enum


class LifecycleState(Enum):
    """Lifecycle of a SyncEngine root binding."""

    UNINITIALIZED = "uninitialized"
    BOUND = "bound"
    DISPOSED = "disposed"

    @property
    def is_terminal(self) -> bool:
        """Disposed engines never come back."""
        return self is LifecycleState.DISPOSED


class FileEventKind(Enum):
    """Kinds of filesystem events forwarded by a watcher."""

    ADD = "add"
    CHANGE = "change"
    UNLINK = "unlink"

    @classmethod
    def from_string(cls, value: str) -> FileEventKind:
        """
        Parse an event kind, accepting a few common aliases.

        Raises:
            ValueError: If the value is not a known event kind.
        """
        value_lower = value.lower().strip()

        mappings = {
            "add": cls.ADD,
            "added": cls.ADD,
            "created": cls.ADD,
            "change": cls.CHANGE,
            "changed": cls.CHANGE,
            "modified": cls.CHANGE,
            "unlink": cls.UNLINK,
            "deleted": cls.UNLINK,
            "removed": cls.UNLINK,
        }

        if value_lower not in mappings:
            raise ValueError(f"Unknown file event kind: {value}")
        return mappings[value_lower]
