"""Canonical candle model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Candle:
    """OHLC candle data keyed by bar open time in epoch milliseconds."""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
