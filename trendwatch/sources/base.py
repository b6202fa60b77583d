"""Base classes for exchange adapters."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.candle import Candle


class ExchangeError(Exception):
    """Base exception for exchange-related errors."""

    pass


class ExchangeAdapter(ABC):
    """Base class for exchange adapters.

    Adapters never raise to the caller. Failures are reported by returning
    None and recording the reason in ``last_error``.
    """

    def __init__(self, symbol: str, resolution: str, bar_seconds: int):
        """Initialize exchange adapter.

        Args:
            symbol: Exchange symbol (e.g., "BTC_USDT")
            resolution: Exchange resolution string (e.g., "2h")
            bar_seconds: Duration of one bar in seconds
        """
        self.symbol = symbol
        self.resolution = resolution
        self.bar_seconds = bar_seconds
        self.last_error: Optional[str] = None

    @abstractmethod
    def get_candles(self, limit: int) -> Optional[List[Candle]]:
        """Get the most recent candles.

        Args:
            limit: Number of bars of history to request

        Returns:
            Candles sorted ascending by timestamp, or None on any failure
        """
        pass
