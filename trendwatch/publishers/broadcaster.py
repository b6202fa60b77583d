"""Event log fan-out to dashboard subscribers."""

import logging
import threading
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)

Subscriber = Callable[[List[dict]], None]


class Broadcaster(Protocol):
    """Receives the full event log snapshot after every trend event."""

    def emit(self, events: List[dict]) -> None:
        ...


class LoggingBroadcaster:
    """Broadcaster that only logs the update."""

    def emit(self, events: List[dict]) -> None:
        latest = events[-1] if events else None
        logger.info(f"📤 Event log update ({len(events)} entries), latest: {latest}")


class FanoutBroadcaster:
    """Pushes event log snapshots to in-process subscribers.

    A failing subscriber is logged and skipped so the others still receive
    the update.
    """

    def __init__(self):
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber, initial: Optional[List[dict]] = None) -> None:
        """Register a subscriber.

        Args:
            callback: Called with each snapshot
            initial: Current snapshot to replay to the new subscriber
        """
        with self._lock:
            self._subscribers.append(callback)
        if initial is not None:
            self._deliver(callback, initial)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def emit(self, events: List[dict]) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            self._deliver(callback, events)
        logger.debug(f"Broadcast {len(events)} events to {len(subscribers)} subscribers")

    def _deliver(self, callback: Subscriber, events: List[dict]) -> None:
        try:
            callback(list(events))
        except Exception as e:
            logger.error(f"Event log subscriber {callback!r} failed: {e}", exc_info=True)
