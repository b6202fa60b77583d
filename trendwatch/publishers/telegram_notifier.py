"""Telegram alert delivery with a send cooldown."""

import logging
import time
from typing import Callable, Optional

import requests

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


class TelegramNotifier:
    """Sends alert messages to a Telegram chat.

    Delivery is skipped while the cooldown since the last successful send is
    active. Failures are logged and never raised.
    """

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        cooldown_seconds: float = 600.0,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize Telegram notifier.

        Args:
            bot_token: Telegram bot token
            chat_id: Destination chat ID
            cooldown_seconds: Minimum seconds between successful sends
            timeout: Request timeout in seconds
            session: Optional HTTP session for testing
            clock: Time source returning epoch seconds
        """
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.cooldown_seconds = cooldown_seconds
        self.timeout = timeout
        self.session = session or requests.Session()
        self.clock = clock
        self.last_sent_at: Optional[float] = None

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def in_cooldown(self, now: Optional[float] = None) -> bool:
        if self.last_sent_at is None:
            return False
        now = self.clock() if now is None else now
        return now - self.last_sent_at < self.cooldown_seconds

    def send(self, text: str) -> bool:
        """Send a message.

        Args:
            text: HTML-formatted message text

        Returns:
            True if the message was delivered, False if skipped or failed
        """
        now = self.clock()
        if self.in_cooldown(now):
            remaining = self.cooldown_seconds - (now - self.last_sent_at)
            logger.info(f"⏳ Alert cooldown active ({remaining:.0f}s left), skipping send")
            return False

        if not self.enabled:
            logger.warning("BOT_TOKEN or CHAT_ID not set, skipping Telegram send")
            return False

        try:
            response = self.session.post(
                f"{TELEGRAM_API_URL}/bot{self.bot_token}/sendMessage",
                json={
                    "chat_id": self.chat_id,
                    "text": text,
                    "parse_mode": "HTML",
                    "disable_web_page_preview": True,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
            if not body.get("ok", False):
                logger.error(f"Telegram rejected message: {body.get('description')}")
                return False
        except Exception as e:
            logger.error(f"Telegram send failed: {e}")
            return False

        self.last_sent_at = now
        logger.info("✅ Telegram alert sent")
        return True
