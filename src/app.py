"""
Application wiring.

Builds every component from an AppConfig and exposes the pieces a
transport needs: ``router`` for inbound chat events, ``admin`` for staff
commands, and ``start``/``stop`` for the periodic ledger saver and the
Telegram command poller (when a bot token is configured).
"""

import logging
from datetime import timedelta
from typing import Optional

from src.admin import AdminCommands
from src.config import AppConfig
from src.conversation.admission import AdmissionGate
from src.conversation.dialogue import DialogueEngine
from src.conversation.session_store import SessionStore
from src.exceptions import PersistenceError
from src.router import ReplySender, Router
from src.scheduling import AsyncioScheduler, Clock, Scheduler, SystemClock
from src.schemas.booking_schema import BotMetrics, LedgerSnapshot
from src.tools.ledger import CapacityLedger
from src.tools.notifications import Notifier, build_notifier
from src.tools.persistence import JsonLedgerStore, LedgerStore, PeriodicSaver
from src.tools.telegram_commands import build_command_poller

logger = logging.getLogger(__name__)


class BookingApp:
    """All components of one running bot, wired from an AppConfig.

    Collaborators left unset fall back to the configured defaults: the
    wall clock in the business timezone, the asyncio scheduler, the
    Telegram notifier (if a token is set) and the JSON ledger file.
    """

    def __init__(
        self,
        config: AppConfig,
        sender: ReplySender,
        clock: Optional[Clock] = None,
        scheduler: Optional[Scheduler] = None,
        notifier: Optional[Notifier] = None,
        store: Optional[LedgerStore] = None,
    ) -> None:
        self.config = config
        self.clock = clock or SystemClock(config.business.timezone)
        if notifier is None:
            notifier = build_notifier(config.notification, config.units)
        self.store = store or JsonLedgerStore(config.persistence.ledger_path)

        self.ledger = CapacityLedger(config.units, self.clock)
        self.metrics = BotMetrics()
        self.gate = AdmissionGate(
            config.rate_limit, config.pause, self.clock, scheduler or AsyncioScheduler()
        )
        self.sessions = SessionStore(self.clock)
        self.engine = DialogueEngine(self.ledger, config.units, self.clock)
        self.saver = PeriodicSaver(
            self.store,
            self.snapshot,
            config.persistence.save_interval_seconds,
            on_tick=self.housekeeping,
        )
        self.router = Router(
            self.gate,
            self.sessions,
            self.engine,
            sender,
            self.metrics,
            notifier=notifier,
            on_booking_change=self.persist,
        )
        self.admin = AdminCommands(
            self.ledger, self.gate, self.metrics, self.clock, on_change=self.persist
        )
        self.command_poller = build_command_poller(
            config.notification, config.units, self.admin.handle
        )

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            saved_at=self.clock.now(),
            bookings=self.ledger.snapshot(),
            metrics=self.metrics.model_copy(),
        )

    def load_state(self) -> bool:
        """Restore the ledger from the store. Returns False on a fresh start."""
        try:
            snapshot = self.store.load()
        except PersistenceError as e:
            logger.error("Could not restore ledger, starting empty: %s", e)
            return False
        if snapshot is None:
            logger.info("No saved ledger found, starting empty")
            return False
        self.ledger.restore(snapshot)
        for name, value in snapshot.metrics.model_dump().items():
            setattr(self.metrics, name, value)
        logger.info("Ledger restored (saved at %s)", snapshot.saved_at)
        return True

    def housekeeping(self) -> None:
        """Drop abandoned sessions and expired rate-limit windows."""
        self.sessions.prune_idle(timedelta(minutes=self.config.session.ttl_minutes))
        self.gate.rate_limiter.prune_expired()

    def persist(self) -> None:
        self.saver.save_now()

    def start(self) -> None:
        self.saver.start()
        if self.command_poller is not None:
            self.command_poller.start()

    async def stop(self) -> None:
        if self.command_poller is not None:
            await self.command_poller.stop()
        await self.saver.stop()
