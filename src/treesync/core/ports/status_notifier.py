"""
Status Notifier Port - Outbound ``status-changed`` events.

Delivery is fire-and-forget: only the most recent status matters, so a
newer event superseding an older undelivered one is fine.

Implementations:
- StatusBroadcaster: in-process fan-out to registered subscribers
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from treesync.core.domain.entities import WorkingTreeStatus


__all__ = ["STATUS_CHANGED", "StatusEvent", "StatusNotifierPort"]


STATUS_CHANGED = "status-changed"


@dataclass(frozen=True)
class StatusEvent:
    """
    Payload of a ``status-changed`` event.

    Exactly one of ``status`` or ``error`` is set. ``error`` is an envelope
    built by ``TreeSyncError.to_envelope``.
    """

    root: str
    status: WorkingTreeStatus | None = None
    error: dict[str, Any] | None = None
    name: str = STATUS_CHANGED
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if (self.status is None) == (self.error is None):
            raise ValueError("StatusEvent needs exactly one of status or error")

    @classmethod
    def success(cls, root: str, status: WorkingTreeStatus) -> StatusEvent:
        return cls(root=root, status=status)

    @classmethod
    def failure(cls, root: str, error: dict[str, Any]) -> StatusEvent:
        return cls(root=root, error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transports (IPC, websockets, JSON logs)."""
        data: dict[str, Any] = {
            "event": self.name,
            "root": self.root,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.status is not None:
            data["status"] = self.status.to_dict()
        else:
            data["error"] = self.error
        return data


class StatusNotifierPort(ABC):
    """Abstract interface for publishing status events."""

    @abstractmethod
    def publish(self, event: StatusEvent) -> None:
        """
        Deliver an event to zero or more subscribers.

        Must not raise: a failing subscriber cannot break the engine.
        """
        ...
