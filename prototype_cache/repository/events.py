"""
Snapshot lifecycle notifications.

Listeners can observe when a fetch starts, completes or fails, e.g. to drive
a loading indicator or record metrics. A failing listener is logged and
skipped; it never affects the snapshot operation or other listeners.
"""

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)


SNAPSHOT_STARTED = "snapshot_started"
SNAPSHOT_COMPLETED = "snapshot_completed"
SNAPSHOT_FAILED = "snapshot_failed"

EVENT_NAMES = frozenset({SNAPSHOT_STARTED, SNAPSHOT_COMPLETED, SNAPSHOT_FAILED})

Listener = Callable[[Any], None]


class RepositoryEvents:
    """
    Minimal synchronous event emitter for repository lifecycle events.

    Events and their payloads:
        snapshot_started    operation name ("ensure" or "refresh")
        snapshot_completed  SnapshotStats after the store write
        snapshot_failed     FetchFailure describing the upstream error

    Example:
        repo.events.on("snapshot_completed", lambda stats: print(stats.size))
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def _check_name(self, event: str) -> None:
        if event not in EVENT_NAMES:
            raise ValueError(f"Unknown repository event: {event!r}")

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener for an event."""
        self._check_name(event)
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove a previously registered listener; unknown listeners are ignored."""
        self._check_name(event)
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def listener_count(self, event: str) -> int:
        self._check_name(event)
        return len(self._listeners[event])

    def emit(self, event: str, payload: Any) -> None:
        """Call every listener for `event`, logging (not raising) listener errors."""
        self._check_name(event)
        for listener in list(self._listeners[event]):
            try:
                listener(payload)
            except Exception as e:
                logger.error(
                    "Repository event listener failed",
                    extra={
                        "event": event,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
