"""
Router — top-level entry point for inbound messages.

Sequences one turn: Admission Gate -> turn lock -> Session Store ->
Dialogue Engine -> reply emission -> staff notification -> persistence.
Transport failures are logged and never roll back a committed transition.
"""

from typing import Callable, Optional, Protocol

from src.conversation.admission import AdmissionGate
from src.conversation.dialogue import DialogueEngine, TurnResult
from src.conversation.session_store import SessionStore
from src.exceptions import DeliveryError
from src.logging_context import get_conversation_logger, set_conversation_id
from src.prompts.messages import MAIN_MENU
from src.prompts.prompt_templates import build_staff_notification
from src.schemas.booking_schema import BotMetrics
from src.schemas.conversation_schema import AdmissionReason, InboundEvent, PauseReason
from src.tools.notifications import Notifier

logger = get_conversation_logger(__name__)


class ReplySender(Protocol):
    async def send_text(self, conversation_id: str, text: str) -> None:
        """Deliver ``text`` to the chat; raises DeliveryError on failure."""
        ...


class Router:
    """Routes inbound events through admission, dialogue and delivery."""

    def __init__(
        self,
        gate: AdmissionGate,
        sessions: SessionStore,
        engine: DialogueEngine,
        sender: ReplySender,
        metrics: BotMetrics,
        notifier: Optional[Notifier] = None,
        on_booking_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._gate = gate
        self._sessions = sessions
        self._engine = engine
        self._sender = sender
        self._metrics = metrics
        self._notifier = notifier
        self._on_booking_change = on_booking_change

    async def handle_event(self, event: InboundEvent) -> None:
        """Process one inbound message end to end."""
        if not event.text.strip():
            return

        set_conversation_id(event.conversation_id)
        conversation_id = event.conversation_id

        decision = self._gate.admit(event)
        if decision.reason == AdmissionReason.OWN_ECHO:
            return

        self._metrics.messages_received += 1

        if decision.reason == AdmissionReason.HUMAN_TAKEOVER:
            self._metrics.human_takeovers += 1
            logger.info("Human takeover detected, bot paused")
            return

        if not decision.allowed:
            if decision.notice:
                await self._reply(conversation_id, decision.notice)
            return

        if decision.reason == AdmissionReason.REACTIVATED:
            # The user lands on the main menu, so any half-finished booking is dropped.
            async with self._sessions.turn_lock(conversation_id):
                self._sessions.delete(conversation_id)
            self._metrics.menus_shown += 1
            await self._reply(conversation_id, MAIN_MENU)
            return

        async with self._sessions.turn_lock(conversation_id):
            session = self._sessions.load(conversation_id)
            result = self._engine.handle(session, event.text)
            self._sessions.save(conversation_id, result.session)
            self._apply_side_effects(conversation_id, result)

            for reply in result.replies:
                await self._reply(conversation_id, reply)

            if result.booking is not None:
                await self._notify_staff(result)
                if self._on_booking_change is not None:
                    self._on_booking_change()

    def _apply_side_effects(self, conversation_id: str, result: TurnResult) -> None:
        if result.menu_shown:
            self._metrics.menus_shown += 1
        if result.pause_requested:
            self._gate.pause(conversation_id, PauseReason.USER_REQUESTED)
        if result.booking is not None:
            self._metrics.trial_bookings += 1

    async def _reply(self, conversation_id: str, text: str) -> None:
        try:
            await self._sender.send_text(conversation_id, text)
        except DeliveryError as e:
            logger.error("Error sending message to %s: %s", conversation_id, e)

    async def _notify_staff(self, result: TurnResult) -> None:
        if self._notifier is None:
            return
        booking = result.booking
        try:
            await self._notifier.notify(booking.unit.value, build_staff_notification(booking))
        except DeliveryError as e:
            logger.warning("Failed to send staff notification: %s", e)
