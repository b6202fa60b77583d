"""Fixed-interval ticker with an external stop signal."""

import logging
import threading
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


class PollScheduler:
    """Yields one tick per poll interval until stopped.

    The first tick is immediate. Waiting is done on the stop event, so
    setting it from a signal handler or a test ends the wait early.
    """

    def __init__(self, interval_seconds: float, stop_event: Optional[threading.Event] = None):
        """Initialize scheduler.

        Args:
            interval_seconds: Seconds to wait between ticks
            stop_event: Event that ends the schedule when set
        """
        self.interval_seconds = interval_seconds
        self.stop_event = stop_event or threading.Event()

    @property
    def stopped(self) -> bool:
        return self.stop_event.is_set()

    def stop(self) -> None:
        self.stop_event.set()

    def ticks(self, max_ticks: Optional[int] = None) -> Iterator[int]:
        """Generate tick numbers starting at 1.

        Args:
            max_ticks: Stop after this many ticks (default: run until stopped)
        """
        tick = 0
        while not self.stopped:
            tick += 1
            yield tick
            if max_ticks is not None and tick >= max_ticks:
                break
            if self.stop_event.wait(self.interval_seconds):
                break
        logger.debug(f"Scheduler finished after {tick} ticks")
