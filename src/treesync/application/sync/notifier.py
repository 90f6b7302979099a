"""
Status Broadcaster - In-process fan-out of ``status-changed`` events.

Any transport (desktop IPC, websockets, the CLI printer) is just another
subscriber.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from treesync.core.ports.status_notifier import StatusEvent, StatusNotifierPort


logger = logging.getLogger("StatusBroadcaster")

StatusSubscriber = Callable[[StatusEvent], None]


class StatusBroadcaster(StatusNotifierPort):
    """
    Delivers each event to every registered subscriber.

    Subscribers are called synchronously in registration order. A subscriber
    that raises is logged and skipped; the others still receive the event.
    """

    def __init__(self) -> None:
        self._subscribers: list[StatusSubscriber] = []
        self.last_event: StatusEvent | None = None
        self.published = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: StatusSubscriber) -> Callable[[], None]:
        """
        Register a subscriber.

        Returns:
            Function that removes the subscription (safe to call twice)
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: StatusEvent) -> None:
        self.last_event = event
        self.published += 1
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed on {event.name}")
