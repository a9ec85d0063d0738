"""Telegram notification service."""
from __future__ import annotations

import html
import logging
import ssl

import aiohttp
import certifi

from ..config import TelegramConfig

logger = logging.getLogger(__name__)

# Telegram rejects messages longer than this many characters.
MAX_MESSAGE_LENGTH = 4096


def split_message(message: str, limit: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Split on line boundaries so each chunk fits in one Telegram message.

    A single line longer than ``limit`` is hard-wrapped.
    """
    chunks: list[str] = []
    current = ""
    for line in message.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current or not chunks:
        chunks.append(current)
    return chunks


class TelegramNotifier:
    """Send health alerts and observation logs via two Telegram bots."""

    def __init__(self, config: TelegramConfig) -> None:
        self.alert_bot_token = config.alert_bot_token
        self.log_bot_token = config.log_bot_token
        self.chat_id = config.chat_id

    async def _send_message(
        self, message: str, bot_token: str, silent: bool = False
    ) -> bool:
        """Send a (possibly multi-part) message; True only if every part went out."""
        if not bot_token or not self.chat_id:
            logger.warning("Telegram credentials not configured")
            return False

        url = f"https://api.telegram.org/bot{bot_token}/sendMessage"
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            for part in split_message(html.escape(message, quote=False)):
                payload = {
                    "chat_id": self.chat_id,
                    "text": part,
                    "parse_mode": "HTML",
                    "disable_notification": silent,
                }
                async with session.post(url, json=payload) as response:
                    if response.status != 200:
                        logger.error(
                            "Failed to send Telegram message: %s", response.status
                        )
                        return False
        return True

    async def send_alert(self, message: str, subject: str = "") -> bool:
        """Send an alert through the unmuted bot, prefixed with its subject."""
        text = f"{subject}\n\n{message}" if subject else message
        if await self._send_message(text, self.alert_bot_token, silent=False):
            logger.info("Telegram alert sent")
            return True
        return False

    async def send_log(self, message: str, silent: bool = True) -> bool:
        """Send an observation log through the logs bot."""
        if await self._send_message(message, self.log_bot_token, silent=silent):
            logger.info("Telegram log sent")
            return True
        return False
