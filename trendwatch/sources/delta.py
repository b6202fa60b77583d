"""Delta Exchange candle history adapter."""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

import requests
from pydantic import ValidationError

from ..models.candle import Candle
from ..models.candle_payload import CandleHistoryResponse, CandleRow
from .base import ExchangeAdapter, ExchangeError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.delta.exchange/v2/history/candles"


class DeltaExchangeAdapter(ExchangeAdapter):
    """Delta Exchange public candle history adapter."""

    def __init__(
        self,
        symbol: str = "BTC_USDT",
        resolution: str = "2h",
        bar_seconds: int = 7200,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        """Initialize Delta Exchange adapter.

        Args:
            symbol: Exchange symbol
            resolution: Candle resolution string
            bar_seconds: Duration of one bar in seconds
            base_url: Candle history endpoint
            timeout: Request timeout in seconds
            session: Optional HTTP session for testing
        """
        super().__init__(symbol, resolution, bar_seconds)
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _build_params(self, limit: int) -> Dict[str, str]:
        """Build the query for the window ``[now - limit bars, now]``."""
        end = int(datetime.now(timezone.utc).timestamp())
        start = end - limit * self.bar_seconds
        return {
            "resolution": self.resolution,
            "symbol": self.symbol,
            "start": str(start),
            "end": str(end),
        }

    def get_candles(self, limit: int) -> Optional[List[Candle]]:
        """Fetch and normalize the most recent candles.

        Args:
            limit: Number of bars of history to request

        Returns:
            Candles sorted ascending by timestamp, or None on any failure
        """
        try:
            params = self._build_params(limit)
            logger.debug(f"Fetching {self.symbol} {self.resolution} candles: {params}")
            payload = self._request(params)
            candles = self._parse_candles(payload)
        except Exception as e:
            self.last_error = str(e)
            logger.warning(f"Failed to fetch candles for {self.symbol}: {e}")
            return None

        self.last_error = None
        logger.debug(f"Fetched {len(candles)} candles for {self.symbol}")
        return candles

    def _request(self, params: Dict[str, str]) -> object:
        """Issue the HTTP request and decode the JSON body."""
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise ExchangeError(f"Candle request failed: {e}") from e
        except ValueError as e:
            raise ExchangeError(f"Candle response is not valid JSON: {e}") from e

    def _parse_candles(self, payload: object) -> List[Candle]:
        """Validate the envelope and normalize its rows."""
        try:
            envelope = CandleHistoryResponse.model_validate(payload)
        except ValidationError as e:
            raise ExchangeError(f"Malformed candle response: {e}") from e

        if not envelope.success or not envelope.result:
            raise ExchangeError("Candle response unsuccessful or empty")

        by_timestamp: Dict[int, Candle] = {}
        skipped = 0
        for row in envelope.result:
            try:
                candle = CandleRow.model_validate(row).to_candle()
            except ValidationError:
                skipped += 1
                continue
            by_timestamp[candle.timestamp] = candle

        if skipped:
            logger.debug(f"Skipped {skipped} incomplete candle rows for {self.symbol}")

        if not by_timestamp:
            raise ExchangeError("No complete candle rows in response")

        return sorted(by_timestamp.values(), key=lambda c: c.timestamp)
