"""T3 trend alert service.

Polls 2h BTC_USDT candles and alerts on Tillson T3 trend flips.
"""

import logging
import signal
import sys
import threading
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if it exists
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Imports after logging setup (required for proper logging configuration)
from trendwatch.config import StrategyConfig, SystemConfig  # noqa: E402
from trendwatch.monitor.leader_guard import LeaderGuard  # noqa: E402
from trendwatch.monitor.trend_monitor import TrendMonitor  # noqa: E402
from trendwatch.publishers.broadcaster import FanoutBroadcaster, LoggingBroadcaster  # noqa: E402
from trendwatch.publishers.event_log import EventLog  # noqa: E402
from trendwatch.publishers.telegram_notifier import TelegramNotifier  # noqa: E402
from trendwatch.sources.delta import DeltaExchangeAdapter  # noqa: E402


def build_monitor(
    system_config: SystemConfig,
    strategy: StrategyConfig,
    leader: LeaderGuard,
    broadcaster: FanoutBroadcaster,
) -> TrendMonitor:
    """Wire the exchange adapter, notifier, and event log into a monitor."""
    exchange = DeltaExchangeAdapter(
        symbol=strategy.symbol,
        resolution=strategy.resolution,
        bar_seconds=strategy.bar_seconds,
        base_url=strategy.base_url,
        timeout=strategy.fetch_timeout_seconds,
    )
    notifier = TelegramNotifier(
        bot_token=system_config.bot_token,
        chat_id=system_config.chat_id,
        cooldown_seconds=strategy.alert_cooldown_seconds,
        timeout=strategy.notify_timeout_seconds,
    )
    return TrendMonitor(
        exchange=exchange,
        notifier=notifier,
        event_log=EventLog(max_entries=strategy.max_log_entries),
        broadcaster=broadcaster,
        strategy=strategy,
        leader=leader,
    )


def main():
    """Main entry point for the trend alert service."""
    logger.info("🚀 Starting T3 trend alert service...")
    stop_event = threading.Event()

    def signal_handler(sig, frame):
        """Handle shutdown signals gracefully."""
        logger.info("🛑 Shutting down...")
        stop_event.set()

    try:
        system_config = SystemConfig.from_env()
        system_config.validate()
        logging.getLogger().setLevel(system_config.log_level)
        logger.info("✅ Configuration loaded")
        logger.info(f"   - Port: {system_config.port}")
        logger.info(f"   - Telegram alerts: {'enabled' if system_config.alerts_enabled else 'disabled'}")
    except ValueError as e:
        logger.error(f"❌ CRITICAL: Configuration invalid: {e}")
        sys.exit(1)

    try:
        strategy = StrategyConfig()
        leader = LeaderGuard.claim()
        logger.info(f"   - Leader: {'YES' if leader.is_leader else 'NO'} (PID {leader.pid})")

        broadcaster = FanoutBroadcaster()
        broadcaster.subscribe(LoggingBroadcaster().emit)
        monitor = build_monitor(system_config, strategy, leader, broadcaster)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        if leader.is_leader:
            monitor.run(stop_event=stop_event)
        else:
            logger.info("👤 Follower mode, dashboard only")
            stop_event.wait()

    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        logger.info("✅ Service stopped")


if __name__ == "__main__":
    main()
