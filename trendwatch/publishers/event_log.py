"""Bounded in-memory history of trend events."""

import threading
from collections import deque
from typing import Deque, List, Optional

from ..models.trend import TrendEvent


class EventLog:
    """FIFO log of trend events capped at ``max_entries``.

    Only the monitor appends. Readers on other threads receive copies.
    """

    def __init__(self, max_entries: int = 50):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.max_entries = max_entries
        self._events: Deque[TrendEvent] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def append(self, event: TrendEvent) -> List[TrendEvent]:
        """Append an event, evicting the oldest when full.

        Returns:
            Snapshot of the log after the append
        """
        with self._lock:
            self._events.append(event)
            return list(self._events)

    def snapshot(self) -> List[TrendEvent]:
        with self._lock:
            return list(self._events)

    def to_dicts(self) -> List[dict]:
        return [event.to_dict() for event in self.snapshot()]

    def latest(self) -> Optional[TrendEvent]:
        with self._lock:
            return self._events[-1] if self._events else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
