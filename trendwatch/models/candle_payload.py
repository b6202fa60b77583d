"""Validated payload models for the candle history API."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .candle import Candle


class CandleRow(BaseModel):
    """One raw candle row as returned by the exchange."""

    time: int = Field(..., gt=0, description="Bar open time in epoch seconds")
    open: float = Field(..., gt=0, allow_inf_nan=False, description="Open price")
    high: float = Field(..., gt=0, allow_inf_nan=False, description="High price")
    low: float = Field(..., gt=0, allow_inf_nan=False, description="Low price")
    close: float = Field(..., gt=0, allow_inf_nan=False, description="Close price")

    def to_candle(self) -> Candle:
        """Convert to a Candle with a millisecond timestamp."""
        return Candle(
            timestamp=self.time * 1000,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
        )


class CandleHistoryResponse(BaseModel):
    """Envelope of the candle history endpoint."""

    success: bool = False
    result: Optional[List[Any]] = None
