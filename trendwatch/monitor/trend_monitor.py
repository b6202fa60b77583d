"""Trend flip detection over completed bars."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from ..config import StrategyConfig, T3Params
from ..indicators.t3 import bar_colors, tillson_t3_series
from ..models.candle import Candle
from ..models.results import CycleResult
from ..models.trend import BarColor, Trend, TrendEvent, TrendState
from ..publishers.broadcaster import Broadcaster
from ..publishers.event_log import EventLog
from ..publishers.telegram_notifier import TelegramNotifier
from ..sources.base import ExchangeAdapter
from .leader_guard import LeaderGuard
from .scheduler import PollScheduler

logger = logging.getLogger(__name__)

Indicator = Callable[[Sequence[float], Sequence[float], Sequence[float], int, float], List[float]]


@dataclass
class MonitorHealth:
    """Counters that distinguish a quiet market from a failing feed."""

    cycles: int = 0
    consecutive_failures: int = 0
    total_failures: int = 0
    last_error: Optional[str] = None
    last_success_at: Optional[datetime] = None

    def record_success(self) -> None:
        self.consecutive_failures = 0
        self.last_success_at = datetime.now(timezone.utc)

    def record_failure(self, error: str) -> None:
        self.consecutive_failures += 1
        self.total_failures += 1
        self.last_error = error


def signal_from_colors(slow: BarColor, fast: BarColor) -> Optional[Trend]:
    """Return a trend only when both series agree on direction."""
    if slow == BarColor.RISING and fast == BarColor.RISING:
        return Trend.UPTREND
    if slow == BarColor.FALLING and fast == BarColor.FALLING:
        return Trend.DOWNTREND
    return None


def format_price(value: float) -> str:
    """Group thousands and keep at most three decimals, dropping trailing zeros."""
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def bar_boundary(timestamp_ms: int, bar_ms: int) -> int:
    """Floor a millisecond timestamp to the start of its bar."""
    return (timestamp_ms // bar_ms) * bar_ms


class TrendMonitor:
    """Polls candles and emits an event on every confirmed trend flip.

    Each completed bar is evaluated at most once, and an event fires only
    when the agreed direction differs from the recorded trend.
    """

    def __init__(
        self,
        exchange: ExchangeAdapter,
        notifier: TelegramNotifier,
        event_log: EventLog,
        broadcaster: Broadcaster,
        strategy: Optional[StrategyConfig] = None,
        leader: Optional[LeaderGuard] = None,
        indicator: Indicator = tillson_t3_series,
    ):
        """Initialize trend monitor.

        Args:
            exchange: Candle source
            notifier: Alert delivery
            event_log: Bounded trend event history
            broadcaster: Receives the event log after each flip
            strategy: Strategy constants (default: production values)
            leader: Leader guard of this worker, reported in status
            indicator: Smoothing function applied to both parameter pairs
        """
        self.exchange = exchange
        self.notifier = notifier
        self.event_log = event_log
        self.broadcaster = broadcaster
        self.strategy = strategy or StrategyConfig()
        self.leader = leader
        self.indicator = indicator
        self.state = TrendState()
        self.health = MonitorHealth()
        self._tz = ZoneInfo(self.strategy.display_timezone)

    def _series(self, candles: List[Candle], params: T3Params) -> List[float]:
        return self.indicator(
            [c.high for c in candles],
            [c.low for c in candles],
            [c.close for c in candles],
            params.length,
            params.a,
        )

    def format_time(self, bar_ts: int) -> str:
        local = datetime.fromtimestamp(bar_ts / 1000, self._tz)
        return f"{local.strftime('%Y-%m-%d %H:%M')} {self.strategy.display_timezone_label}"

    def format_message(self, event: TrendEvent) -> str:
        """Build the HTML alert text for a trend event."""
        return (
            f"{event.trend.icon} <b>{event.trend.value}</b>\n"
            f"{self.strategy.symbol}: ${format_price(event.close)}\n"
            f"{self.strategy.resolution} {event.time}"
        )

    def run_cycle(self) -> CycleResult:
        """Fetch, evaluate the latest bar, and emit on a trend flip.

        Returns:
            Result describing what the cycle decided
        """
        start_time = datetime.now(timezone.utc)

        def result(status: str, **kwargs) -> CycleResult:
            elapsed = datetime.now(timezone.utc) - start_time
            return CycleResult(
                status=status,
                execution_time_ms=int(elapsed.total_seconds() * 1000),
                **kwargs,
            )

        candles = self.exchange.get_candles(self.strategy.limit)
        if not candles:
            error = self.exchange.last_error or "no candles returned"
            self.health.record_failure(error)
            logger.warning(f"No candle data ({error}), retrying next cycle")
            return result("no_data", errors=[error])

        self.health.record_success()
        fetched = len(candles)
        if fetched < self.strategy.min_candles:
            logger.info(
                f"Insufficient history: {fetched} candles, need {self.strategy.min_candles}"
            )
            return result("insufficient_history", candles_fetched=fetched)

        slow_colors = bar_colors(self._series(candles, self.strategy.slow))
        fast_colors = bar_colors(self._series(candles, self.strategy.fast))

        last = candles[-1]
        bar_ts = bar_boundary(last.timestamp, self.strategy.bar_ms)
        if bar_ts == self.state.last_bar_ts:
            logger.debug(f"Bar {bar_ts} already evaluated")
            return result("stale_bar", candles_fetched=fetched, bar_ts=bar_ts)

        self.state.last_bar_ts = bar_ts
        trend = signal_from_colors(slow_colors[-1], fast_colors[-1])
        if trend is None:
            logger.info(
                f"No signal on bar {bar_ts}: slow={slow_colors[-1].value} fast={fast_colors[-1].value}"
            )
            return result("no_signal", candles_fetched=fetched, bar_ts=bar_ts)

        if trend == self.state.current_trend:
            logger.info(f"Trend unchanged on bar {bar_ts}: {trend.value}")
            return result("unchanged", candles_fetched=fetched, bar_ts=bar_ts, trend=trend)

        self.state.current_trend = trend
        event = TrendEvent(trend=trend, time=self.format_time(bar_ts), bar_ts=bar_ts, close=last.close)
        snapshot = self.event_log.append(event)

        message = self.format_message(event)
        logger.info(f"🔔 Trend flip: {message!r}")
        self.notifier.send(message)
        self.broadcaster.emit([e.to_dict() for e in snapshot])

        return result("flipped", candles_fetched=fetched, bar_ts=bar_ts, trend=trend, event=event)

    def _run_guarded(self) -> CycleResult:
        try:
            return self.run_cycle()
        except Exception as e:
            self.health.record_failure(str(e))
            logger.error(f"Error in monitor cycle: {e}", exc_info=True)
            return CycleResult(status="error", errors=[str(e)])
        finally:
            self.health.cycles += 1

    def run(
        self,
        stop_event: Optional[threading.Event] = None,
        max_cycles: Optional[int] = None,
    ) -> List[CycleResult]:
        """Run cycles on the poll interval until stopped.

        Args:
            stop_event: Event that ends the loop when set
            max_cycles: Stop after this many cycles (default: run until stopped)

        Returns:
            Results of the cycles that ran
        """
        scheduler = PollScheduler(self.strategy.poll_interval_seconds, stop_event)
        logger.info(
            f"🚀 Monitoring {self.strategy.symbol} {self.strategy.resolution} "
            f"every {self.strategy.poll_interval_seconds:g}s"
        )

        results = []
        for _ in scheduler.ticks(max_cycles):
            result = self._run_guarded()
            # Unbounded runs keep no history.
            if max_cycles is not None:
                results.append(result)

        logger.info(f"Monitor stopped after {self.health.cycles} cycles")
        return results

    def status(self) -> dict:
        """Health summary for the read-only API."""
        degraded = self.health.consecutive_failures >= self.strategy.degraded_after_failures
        current = self.state.current_trend
        return {
            "status": "degraded" if degraded else "ok",
            "current_trend": current.value if current else None,
            "log_count": len(self.event_log),
            "last_bar_ts": self.state.last_bar_ts,
            "leader": self.leader.describe() if self.leader else None,
            "cycles": self.health.cycles,
            "consecutive_failures": self.health.consecutive_failures,
            "total_failures": self.health.total_failures,
            "last_error": self.health.last_error,
        }
