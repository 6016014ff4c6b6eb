"""
Staff notifications for new bookings.

Each unit posts to its own Telegram chat through the Bot API. Delivery is
best-effort: callers catch DeliveryError and carry on.
"""

import logging
from typing import Optional, Protocol

import httpx

from src.config import NotificationConfig, UnitConfig
from src.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def notify(self, unit: str, summary: str) -> None:
        ...


class TelegramNotifier:
    """Posts booking summaries to a per-unit Telegram chat."""

    def __init__(
        self,
        config: NotificationConfig,
        units: tuple[UnitConfig, ...],
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not config.telegram_bot_token:
            raise ValueError("TelegramNotifier requires TELEGRAM_BOT_TOKEN")
        self._config = config
        self._chat_ids = {u.unit: u.notify_chat_id for u in units if u.notify_chat_id}
        self._client = client

    @property
    def _url(self) -> str:
        return f"{self._config.telegram_api_base}/bot{self._config.telegram_bot_token}/sendMessage"

    async def notify(self, unit: str, summary: str) -> None:
        chat_id = self._chat_ids.get(unit)
        if chat_id is None:
            logger.debug("No staff chat configured for unit '%s'", unit)
            return

        payload = {"chat_id": chat_id, "text": summary}
        try:
            if self._client is not None:
                response = await self._client.post(
                    self._url, json=payload, timeout=self._config.timeout_seconds
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        self._url, json=payload, timeout=self._config.timeout_seconds
                    )
        except httpx.HTTPError as e:
            raise DeliveryError(f"Telegram sendMessage failed for {unit}: {e}") from e

        if response.status_code != 200:
            raise DeliveryError(
                f"Telegram sendMessage returned status {response.status_code} for {unit}"
            )
        logger.info("Staff notified for unit '%s'", unit)


def build_notifier(
    config: NotificationConfig, units: tuple[UnitConfig, ...]
) -> Optional[Notifier]:
    """Return a notifier, or None when notifications are not configured."""
    if not config.enabled:
        logger.info("Telegram notifications disabled (no TELEGRAM_BOT_TOKEN)")
        return None
    return TelegramNotifier(config, units)
