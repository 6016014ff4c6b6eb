"""Tests for the Telegram operator command poller."""

import asyncio
import json

import httpx
import pytest

from src.admin import AdminCommands
from src.config import NotificationConfig
from src.exceptions import DeliveryError
from src.schemas.booking_schema import Unit
from src.tools.telegram_commands import TelegramCommandPoller, build_command_poller
from tests.conftest import BANGU, RECREIO

CONFIG = NotificationConfig(
    telegram_bot_token="123:abc",
    telegram_api_base="https://api.telegram.test",
    timeout_seconds=5,
    poll_timeout_seconds=0,
    poll_retry_seconds=0,
)


def _update(update_id, chat_id, text):
    return {"update_id": update_id, "message": {"chat": {"id": int(chat_id)}, "text": text}}


class FakeTelegram:
    """MockTransport handler serving queued getUpdates batches and recording replies."""

    def __init__(self, *batches, send_status=200, drained_status=200):
        self.batches = list(batches)
        self.send_status = send_status
        self.drained_status = drained_status
        self.offsets = []
        self.sent = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/getUpdates"):
            self.offsets.append(request.url.params.get("offset"))
            if not self.batches and self.drained_status != 200:
                return httpx.Response(self.drained_status)
            result = self.batches.pop(0) if self.batches else []
            return httpx.Response(200, json={"ok": True, "result": result})
        if request.url.path.endswith("/sendMessage"):
            self.sent.append(json.loads(request.content))
            return httpx.Response(self.send_status, json={"ok": self.send_status == 200})
        return httpx.Response(404)


class RecordingCommands:
    def __init__(self, reply="ok"):
        self.reply = reply
        self.calls = []

    def __call__(self, unit, text):
        self.calls.append((unit, text))
        return self.reply


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_command_routed_by_chat(self):
        telegram = FakeTelegram([_update(1, "-100222", "/relatorio")])
        commands = RecordingCommands(reply="Relatório")

        async with _client(telegram) as client:
            poller = TelegramCommandPoller(CONFIG, (RECREIO, BANGU), commands, client=client)
            assert await poller.poll_once() == 1

        assert commands.calls == [(Unit.BANGU, "/relatorio")]
        assert telegram.sent == [{"chat_id": "-100222", "text": "Relatório"}]

    @pytest.mark.asyncio
    async def test_offset_advances_past_handled_updates(self):
        telegram = FakeTelegram(
            [_update(7, "-100111", "/vagas"), _update(8, "-100111", "/relatorio")],
            [],
        )
        async with _client(telegram) as client:
            poller = TelegramCommandPoller(CONFIG, (RECREIO,), RecordingCommands(), client=client)
            await poller.poll_once()
            await poller.poll_once()

        assert telegram.offsets == [None, "9"]

    @pytest.mark.asyncio
    async def test_unconfigured_chat_is_ignored(self):
        telegram = FakeTelegram([_update(1, "555", "/reset 2025-03-15")])
        commands = RecordingCommands()

        async with _client(telegram) as client:
            poller = TelegramCommandPoller(CONFIG, (RECREIO, BANGU), commands, client=client)
            await poller.poll_once()

        assert commands.calls == []
        assert telegram.sent == []

    @pytest.mark.asyncio
    async def test_non_command_gets_no_reply(self):
        telegram = FakeTelegram([_update(1, "-100111", "bom dia")])
        async with _client(telegram) as client:
            poller = TelegramCommandPoller(
                CONFIG, (RECREIO,), RecordingCommands(reply=None), client=client
            )
            await poller.poll_once()
        assert telegram.sent == []

    @pytest.mark.asyncio
    async def test_bot_mention_is_stripped(self):
        telegram = FakeTelegram([_update(1, "-100111", "/vagas@CtLkBot 2025-03-15")])
        commands = RecordingCommands()
        async with _client(telegram) as client:
            poller = TelegramCommandPoller(CONFIG, (RECREIO,), commands, client=client)
            await poller.poll_once()
        assert commands.calls == [(Unit.RECREIO, "/vagas 2025-03-15")]

    @pytest.mark.asyncio
    async def test_updates_without_text_are_skipped(self):
        telegram = FakeTelegram([{"update_id": 1, "edited_message": {}}])
        commands = RecordingCommands()
        async with _client(telegram) as client:
            poller = TelegramCommandPoller(CONFIG, (RECREIO,), commands, client=client)
            assert await poller.poll_once() == 1
        assert commands.calls == []

    @pytest.mark.asyncio
    async def test_reply_failure_is_not_fatal(self):
        telegram = FakeTelegram([_update(1, "-100111", "/relatorio")], send_status=500)
        async with _client(telegram) as client:
            poller = TelegramCommandPoller(CONFIG, (RECREIO,), RecordingCommands(), client=client)
            assert await poller.poll_once() == 1
        assert len(telegram.sent) == 1

    @pytest.mark.asyncio
    async def test_get_updates_error_raises_delivery_error(self):
        async with _client(lambda request: httpx.Response(502)) as client:
            poller = TelegramCommandPoller(CONFIG, (RECREIO,), RecordingCommands(), client=client)
            with pytest.raises(DeliveryError, match="502"):
                await poller.poll_once()


class TestWithAdminCommands:
    @pytest.mark.asyncio
    async def test_cancel_command_changes_ledger(self, ledger, gate, metrics, clock):
        ledger.add(Unit.RECREIO, "2025-03-15", "17:30", "Maria Silva", "(21) 99988-7766")
        admin = AdminCommands(ledger, gate, metrics, clock)
        telegram = FakeTelegram([_update(1, "-100111", "/cancelar 1")])

        async with _client(telegram) as client:
            poller = TelegramCommandPoller(CONFIG, (RECREIO, BANGU), admin.handle, client=client)
            await poller.poll_once()

        assert ledger.count_for(Unit.RECREIO, "2025-03-15") == 0
        assert telegram.sent[0]["text"] == "✅ Reserva cancelada: Maria Silva - 17:30"


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_polls_until_stopped(self):
        telegram = FakeTelegram([_update(1, "-100111", "/relatorio")], drained_status=502)
        commands = RecordingCommands()

        async with _client(telegram) as client:
            poller = TelegramCommandPoller(CONFIG, (RECREIO,), commands, client=client)
            poller.start()
            for _ in range(50):
                if commands.calls:
                    break
                await asyncio.sleep(0)
            await poller.stop()

        assert commands.calls == [(Unit.RECREIO, "/relatorio")]

    def test_requires_token(self):
        with pytest.raises(ValueError, match="TELEGRAM_BOT_TOKEN"):
            TelegramCommandPoller(
                NotificationConfig(telegram_bot_token=None), (RECREIO,), RecordingCommands()
            )


class TestBuildCommandPoller:
    def test_disabled_without_token(self):
        poller = build_command_poller(
            NotificationConfig(telegram_bot_token=None), (RECREIO,), RecordingCommands()
        )
        assert poller is None

    def test_enabled_with_token(self):
        poller = build_command_poller(CONFIG, (RECREIO,), RecordingCommands())
        assert isinstance(poller, TelegramCommandPoller)
