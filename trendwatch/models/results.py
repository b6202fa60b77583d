"""Result models for monitor cycles."""

from dataclasses import dataclass
from typing import List, Optional

from .trend import Trend, TrendEvent


@dataclass
class CycleResult:
    """Result of one evaluation cycle."""

    status: str  # "no_data", "insufficient_history", "stale_bar", "no_signal", "unchanged", "flipped", "error"
    candles_fetched: int = 0
    bar_ts: Optional[int] = None
    trend: Optional[Trend] = None
    event: Optional[TrendEvent] = None
    execution_time_ms: int = 0
    errors: Optional[List[str]] = None

    def __post_init__(self):
        """Initialize errors list if None."""
        if self.errors is None:
            self.errors = []
