"""Trend classification models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BarColor(str, Enum):
    """Direction of one smoothed-series value relative to its predecessor."""

    NEUTRAL = "neutral"
    RISING = "rising"
    FALLING = "falling"


class Trend(str, Enum):
    """Confirmed trend direction."""

    UPTREND = "UPTREND"
    DOWNTREND = "DOWNTREND"

    @property
    def icon(self) -> str:
        return "🟢" if self is Trend.UPTREND else "🔴"


@dataclass
class TrendState:
    """Mutable detection state owned by the trend monitor."""

    current_trend: Optional[Trend] = None
    last_bar_ts: Optional[int] = None


@dataclass(frozen=True)
class TrendEvent:
    """A confirmed trend flip on a completed bar."""

    trend: Trend
    time: str
    bar_ts: int
    close: float

    def to_dict(self) -> dict:
        """Convert to the event feed message format."""
        return {
            "trend": self.trend.value,
            "time": self.time,
            "bar_ts": self.bar_ts,
            "close": self.close,
        }
