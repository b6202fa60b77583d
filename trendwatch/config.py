"""Configuration management."""

import logging
import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class T3Params:
    """Tillson T3 smoothing parameters."""

    length: int
    a: float

    def __post_init__(self):
        if self.length < 1:
            raise ValueError(f"T3 length must be >= 1, got {self.length}")
        if not 0 < self.a < 1:
            raise ValueError(f"T3 volume factor must be in (0, 1), got {self.a}")


@dataclass(frozen=True)
class StrategyConfig:
    """Fixed strategy constants.

    These are not read from the environment. Tests construct smaller
    instances to shorten intervals.
    """

    base_url: str = "https://api.delta.exchange/v2/history/candles"
    symbol: str = "BTC_USDT"
    resolution: str = "2h"
    bar_seconds: int = 7200
    limit: int = 200
    min_candles: int = 20
    poll_interval_seconds: float = 30.0
    slow: T3Params = field(default_factory=lambda: T3Params(length=8, a=0.7))
    fast: T3Params = field(default_factory=lambda: T3Params(length=5, a=0.618))
    alert_cooldown_seconds: float = 600.0
    max_log_entries: int = 50
    fetch_timeout_seconds: float = 15.0
    notify_timeout_seconds: float = 10.0
    display_timezone: str = "Asia/Kolkata"
    display_timezone_label: str = "IST"
    degraded_after_failures: int = 10

    @property
    def bar_ms(self) -> int:
        return self.bar_seconds * 1000


@dataclass
class SystemConfig:
    """System configuration from environment variables."""

    bot_token: str = ""
    chat_id: str = ""
    port: int = 10000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "SystemConfig":
        """Load configuration from environment variables.

        Telegram credentials are optional; without both of them alerts are
        disabled but the monitor still runs.
        """
        port_str = os.getenv("PORT", "10000").strip()
        try:
            port = int(port_str)
        except ValueError as e:
            raise ValueError(
                f"Invalid PORT value: {port_str!r}\n"
                f"  - PORT must be an integer between 1 and 65535"
            ) from e

        return cls(
            bot_token=(os.getenv("BOT_TOKEN") or "").strip(),
            chat_id=(os.getenv("CHAT_ID") or "").strip(),
            port=port,
            log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        )

    @property
    def alerts_enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def validate(self) -> None:
        """Validate configuration."""
        if not 1 <= self.port <= 65535:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.port}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {self.log_level!r}")
