"""Shared test fixtures and utilities."""

from unittest.mock import MagicMock

import pytest

from trendwatch.config import StrategyConfig
from trendwatch.models.candle import Candle
from trendwatch.monitor.leader_guard import LeaderGuard

# 2025-01-01 00:00 UTC, aligned to a 2h bar boundary
BASE_TS_MS = 1735689600000
BAR_MS = 7200 * 1000


def make_candles(closes: list[float], last_ts: int = BASE_TS_MS, spread: float = 10.0) -> list[Candle]:
    """Build ascending 2h candles ending at ``last_ts``.

    Args:
        closes: Close prices, oldest first
        last_ts: Timestamp of the final candle in epoch ms
        spread: Distance of high and low from close

    Returns:
        List of Candle objects
    """
    count = len(closes)
    return [
        Candle(
            timestamp=last_ts - (count - 1 - i) * BAR_MS,
            open=close,
            high=close + spread,
            low=close - spread,
            close=close,
        )
        for i, close in enumerate(closes)
    ]


def make_api_row(time_s, open_price, high, low, close) -> dict:
    """Helper to create a raw candle row as the exchange returns it."""
    return {"time": time_s, "open": open_price, "high": high, "low": low, "close": close}


@pytest.fixture
def ascending_candles():
    """200 candles rising by 10 per bar, last one at BASE_TS_MS."""
    return make_candles([50000.0 + i * 10 for i in range(200)])


@pytest.fixture
def descending_candles():
    """200 candles falling by 10 per bar, last one a bar after BASE_TS_MS."""
    return make_candles([60000.0 - i * 10 for i in range(200)], last_ts=BASE_TS_MS + BAR_MS)


@pytest.fixture
def strategy():
    """Production strategy constants with no wait between polls."""
    return StrategyConfig(poll_interval_seconds=0)


@pytest.fixture
def mock_exchange():
    """Create a mock exchange adapter."""
    exchange = MagicMock()
    exchange.last_error = None
    return exchange


@pytest.fixture
def mock_notifier():
    """Create a mock notifier."""
    notifier = MagicMock()
    notifier.send.return_value = True
    return notifier


@pytest.fixture
def mock_broadcaster():
    """Create a mock broadcaster."""
    return MagicMock()


@pytest.fixture
def mock_session():
    """Create a mock requests session."""
    return MagicMock()


@pytest.fixture(autouse=True)
def reset_leader_guard():
    """Clear leader claims between tests."""
    LeaderGuard.reset()
    yield
    LeaderGuard.reset()
