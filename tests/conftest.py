"""Shared test fixtures and helpers."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from src.config import (
    AppConfig,
    NotificationConfig,
    PauseConfig,
    PersistenceConfig,
    RateLimitConfig,
    SessionConfig,
    UnitConfig,
)
from src.conversation.admission import AdmissionGate
from src.conversation.dialogue import DialogueEngine
from src.conversation.session_store import SessionStore
from src.exceptions import DeliveryError
from src.router import Router
from src.schemas.booking_schema import BotMetrics
from src.schemas.conversation_schema import InboundEvent
from src.tools.ledger import CapacityLedger

START = datetime(2025, 3, 15, 10, 0, tzinfo=timezone.utc)

RECREIO = UnitConfig(
    unit="recreio",
    token="A",
    display_name="Recreio",
    max_per_slot=2,
    time_slots=("17:30", "18:30", "19:30"),
    notify_chat_id="-100111",
)
BANGU = UnitConfig(
    unit="bangu",
    token="B",
    display_name="Bangu",
    notify_chat_id="-100222",
)


class ManualClock:
    """Clock that only moves when a test says so."""

    def __init__(self, start: datetime = START) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class ManualTimer:
    def __init__(self, due: datetime, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose timers fire when the shared clock is advanced."""

    def __init__(self, clock: ManualClock) -> None:
        self.clock = clock
        self.timers: list[ManualTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.clock.now() + timedelta(seconds=delay), callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        self.clock.advance(seconds)
        due = sorted(
            (t for t in self.timers if not t.cancelled and t.due <= self.clock.now()),
            key=lambda t: t.due,
        )
        for timer in due:
            self.timers.remove(timer)
            timer.callback()

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]


class RecordingSender:
    """ReplySender that keeps every message it was asked to deliver."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def send_text(self, conversation_id: str, text: str) -> None:
        self.sent.append((conversation_id, text))

    def texts_for(self, conversation_id: str) -> list[str]:
        return [text for cid, text in self.sent if cid == conversation_id]

    def clear(self) -> None:
        self.sent.clear()


class FailingSender:
    def __init__(self) -> None:
        self.attempts = 0

    async def send_text(self, conversation_id: str, text: str) -> None:
        self.attempts += 1
        raise DeliveryError("network down")


class RecordingNotifier:
    def __init__(self) -> None:
        self.notifications: list[tuple[str, str]] = []

    async def notify(self, unit: str, summary: str) -> None:
        self.notifications.append((unit, summary))


class FailingNotifier:
    def __init__(self) -> None:
        self.attempts = 0

    async def notify(self, unit: str, summary: str) -> None:
        self.attempts += 1
        raise DeliveryError("telegram unreachable")


def make_config(data_dir: str = "./data", **overrides) -> AppConfig:
    """AppConfig with fixed test values, independent of the environment."""
    config = AppConfig(
        units=(RECREIO, BANGU),
        rate_limit=RateLimitConfig(max_messages=10, window_seconds=60),
        pause=PauseConfig(reactivation_minutes=30),
        session=SessionConfig(ttl_minutes=30),
        persistence=PersistenceConfig(
            data_dir=data_dir, ledger_file="ledger.json", save_interval_seconds=300
        ),
        notification=NotificationConfig(telegram_bot_token=None),
        log_level="INFO",
    )
    return replace(config, **overrides)


def user_event(text: str, conversation_id: str = "chat-1", sender_id: Optional[str] = None) -> InboundEvent:
    return InboundEvent(
        sender_id=sender_id or conversation_id,
        conversation_id=conversation_id,
        text=text,
    )


def staff_event(text: str, conversation_id: str = "chat-1") -> InboundEvent:
    """A staff member typing on the business account."""
    return InboundEvent(
        sender_id="business",
        conversation_id=conversation_id,
        text=text,
        from_business_account=True,
    )


def bot_echo(text: str, conversation_id: str = "chat-1") -> InboundEvent:
    """The bot's own reply reflected back by the transport."""
    return InboundEvent(
        sender_id="business",
        conversation_id=conversation_id,
        text=text,
        from_business_account=True,
        is_from_automated_actor=True,
    )


@pytest.fixture
def config(tmp_path):
    return make_config(data_dir=str(tmp_path))


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def ledger(config, clock):
    return CapacityLedger(config.units, clock)


@pytest.fixture
def gate(config, clock, scheduler):
    return AdmissionGate(config.rate_limit, config.pause, clock, scheduler)


@pytest.fixture
def sessions(clock):
    return SessionStore(clock)


@pytest.fixture
def engine(ledger, config, clock):
    return DialogueEngine(ledger, config.units, clock)


@pytest.fixture
def metrics():
    return BotMetrics()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def router(gate, sessions, engine, sender, metrics, notifier):
    return Router(gate, sessions, engine, sender, metrics, notifier=notifier)
