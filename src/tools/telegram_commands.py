"""
Operator command channel over the Telegram Bot API.

Long-polls ``getUpdates`` and hands each text message from a unit's staff
chat to the admin command handler, answering in the same chat with
``sendMessage``. The chat a message arrives from decides the unit; chats
that are not configured for any unit are ignored.
"""

import asyncio
import logging
import re
from typing import Any, Callable, Optional

import httpx

from src.config import NotificationConfig, UnitConfig
from src.exceptions import DeliveryError
from src.schemas.booking_schema import Unit

logger = logging.getLogger(__name__)

CommandHandler = Callable[[Unit, str], Optional[str]]

# Group chats send "/vagas@SomeBot 2025-03-15".
_BOT_MENTION_RE = re.compile(r"^(/\w+)@\w+")


class TelegramCommandPoller:
    """Receives staff commands from the per-unit Telegram chats."""

    def __init__(
        self,
        config: NotificationConfig,
        units: tuple[UnitConfig, ...],
        handle_command: CommandHandler,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not config.telegram_bot_token:
            raise ValueError("TelegramCommandPoller requires TELEGRAM_BOT_TOKEN")
        self._config = config
        self._units_by_chat = {
            u.notify_chat_id: Unit(u.unit) for u in units if u.notify_chat_id
        }
        self._handle_command = handle_command
        self._client = client
        self._owns_client = client is None
        self._offset: Optional[int] = None
        self._task: Optional[asyncio.Task] = None

    def _url(self, method: str) -> str:
        return f"{self._config.telegram_api_base}/bot{self._config.telegram_bot_token}/{method}"

    def start(self) -> None:
        if self._task is not None:
            return
        if self._client is None:
            self._client = httpx.AsyncClient()
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Polling Telegram for staff commands (%d chats)", len(self._units_by_chat))

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def poll_once(self) -> int:
        """Fetch one batch of updates and answer the commands in it.

        Returns the number of updates consumed.

        Raises:
            DeliveryError: If ``getUpdates`` fails or returns a bad response.
        """
        params: dict[str, Any] = {"timeout": self._config.poll_timeout_seconds}
        if self._offset is not None:
            params["offset"] = self._offset
        try:
            response = await self._http().get(
                self._url("getUpdates"),
                params=params,
                timeout=self._config.poll_timeout_seconds + self._config.timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"Telegram getUpdates failed: {e}") from e

        if response.status_code != 200:
            raise DeliveryError(f"Telegram getUpdates returned status {response.status_code}")
        try:
            updates = response.json().get("result", [])
        except ValueError as e:
            raise DeliveryError(f"Telegram getUpdates returned invalid JSON: {e}") from e

        for update in updates:
            # The offset moves past each update before it is handled.
            self._offset = update["update_id"] + 1
            await self._handle_update(update)
        return len(updates)

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except DeliveryError as e:
                logger.warning(
                    "Command polling failed, retrying in %ss: %s",
                    self._config.poll_retry_seconds, e,
                )
                await asyncio.sleep(self._config.poll_retry_seconds)

    async def _handle_update(self, update: dict[str, Any]) -> None:
        message = update.get("message") or {}
        text = message.get("text")
        if not text:
            return
        chat_id = str(message.get("chat", {}).get("id", ""))
        unit = self._units_by_chat.get(chat_id)
        if unit is None:
            logger.warning("Ignoring message from unconfigured chat %s", chat_id)
            return

        reply = self._handle_command(unit, _BOT_MENTION_RE.sub(r"\1", text.strip()))
        if reply is None:
            return
        try:
            await self._send(chat_id, reply)
        except DeliveryError as e:
            logger.error("Could not answer staff command in chat %s: %s", chat_id, e)

    async def _send(self, chat_id: str, text: str) -> None:
        try:
            response = await self._http().post(
                self._url("sendMessage"),
                json={"chat_id": chat_id, "text": text},
                timeout=self._config.timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"Telegram sendMessage failed for chat {chat_id}: {e}") from e
        if response.status_code != 200:
            raise DeliveryError(
                f"Telegram sendMessage returned status {response.status_code} for chat {chat_id}"
            )

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("TelegramCommandPoller used before start()")
        return self._client


def build_command_poller(
    config: NotificationConfig,
    units: tuple[UnitConfig, ...],
    handle_command: CommandHandler,
) -> Optional[TelegramCommandPoller]:
    """Return a poller, or None when the Telegram channel is not configured."""
    if not config.enabled:
        return None
    return TelegramCommandPoller(config, units, handle_command)
