"""
Dialogue engine: interprets one user message against the session state.

Menu browsing is stateless: each option maps to a fixed reply. Only the
trial-class booking flow creates a session, which walks
unit -> date -> time -> name -> phone -> companion and ends with an atomic
check-and-insert into the capacity ledger.

The engine performs no I/O. It returns a TurnResult describing the
replies, the session to store, and any booking or pause the router must
act on.
"""

from dataclasses import dataclass, replace
from typing import Optional

from src.config import UnitConfig
from src.conversation.slot_manager import (
    SLOT_DEFINITIONS,
    parse_booking_date,
    parse_companion_choice,
    parse_free_time,
    parse_slot_choice,
    parse_unit,
)
from src.conversation.state_machine import BookingStateMachine, TransitionTrigger
from src.exceptions import CapacityExceeded, ValidationError
from src.logging_context import get_conversation_logger
from src.prompts import messages
from src.prompts.prompt_templates import (
    build_confirmation,
    build_free_time_prompt,
    build_no_slots_message,
    build_slot_list_prompt,
)
from src.scheduling import Clock
from src.schemas.booking_schema import Booking, Unit
from src.schemas.session_schema import (
    IDLE,
    ActiveSession,
    DialogueState,
    Idle,
    SessionState,
)
from src.tools.ledger import CapacityLedger

logger = get_conversation_logger(__name__)

MENU_RETURN_KEYWORD = "MENU"
MAIN_MENU_KEYWORDS = frozenset({"MENU", "INICIO", "INÍCIO", "OLÁ", "OLA", "OI"})
START_BOOKING_OPTION = "4"
HUMAN_HANDOFF_OPTION = "9"

STATIC_REPLIES: dict[str, str] = {
    "1": messages.UNITS_OVERVIEW,
    "A": messages.RECREIO_INFO,
    "B": messages.BANGU_INFO,
    "2": messages.SCHEDULES,
    "3": messages.PRICES,
    "5": messages.CHECKIN_PLATFORMS,
    "6": messages.LOCATIONS,
    "7": messages.LEVELS,
    "8": messages.FAQ,
}


@dataclass
class TurnResult:
    """Everything the router needs to finish a turn."""
    replies: list[str]
    session: SessionState
    booking: Optional[Booking] = None
    pause_requested: bool = False
    menu_shown: bool = False


class DialogueEngine:
    """Stateless interpreter over (session, text) pairs."""

    def __init__(
        self,
        ledger: CapacityLedger,
        units: tuple[UnitConfig, ...],
        clock: Clock,
    ) -> None:
        self._ledger = ledger
        self._units = units
        self._clock = clock

    def handle(self, session: SessionState, text: str) -> TurnResult:
        text = text.strip()
        if isinstance(session, Idle):
            return self._handle_idle(text)

        # Work on a copy so the stored session only changes via the router.
        session = replace(session, draft=replace(session.draft))

        if text.upper() == MENU_RETURN_KEYWORD:
            self._advance(session, TransitionTrigger.MENU_RETURN)
            return TurnResult([messages.MAIN_MENU], IDLE, menu_shown=True)

        try:
            return self._handle_booking_step(session, text)
        except ValidationError as e:
            logger.debug("Re-prompting in %s: %r", session.state.value, text)
            return TurnResult([str(e)], session)

    # ------------------------------------------------------------------ #
    # Menu browsing
    # ------------------------------------------------------------------ #

    def _handle_idle(self, text: str) -> TurnResult:
        upper = text.upper()

        if upper in MAIN_MENU_KEYWORDS:
            return TurnResult([messages.MAIN_MENU], IDLE, menu_shown=True)

        if upper == START_BOOKING_OPTION:
            state = BookingStateMachine.transition(
                DialogueState.IDLE, TransitionTrigger.START_BOOKING
            )
            session = ActiveSession(state=state, last_activity=self._clock.now())
            logger.info("Trial-class booking started")
            return TurnResult([messages.TRIAL_CLASS_INTRO], session)

        if upper == HUMAN_HANDOFF_OPTION:
            return TurnResult([messages.HUMAN_HANDOFF], IDLE, pause_requested=True)

        reply = STATIC_REPLIES.get(upper, messages.NOT_UNDERSTOOD)
        return TurnResult([reply], IDLE)

    # ------------------------------------------------------------------ #
    # Booking flow
    # ------------------------------------------------------------------ #

    def _handle_booking_step(self, session: ActiveSession, text: str) -> TurnResult:
        state = session.state

        if state == DialogueState.AWAIT_UNIT:
            return self._handle_unit(session, text)
        if state == DialogueState.AWAIT_DATE:
            return self._handle_date(session, text)
        if state == DialogueState.AWAIT_TIME:
            return self._handle_time(session, text)
        if state == DialogueState.AWAIT_COMPANION_CHOICE:
            return self._handle_companion_choice(session, text)

        definition = SLOT_DEFINITIONS[state]
        setattr(session.draft, definition.field, definition.parser(text))
        self._advance(session, definition.trigger)
        if session.state == DialogueState.COMPLETE:
            return self._complete(session)
        return TurnResult([definition.next_prompt], session)

    def _handle_unit(self, session: ActiveSession, text: str) -> TurnResult:
        unit_config = parse_unit(text, self._units)
        session.draft.unit = unit_config.unit
        self._advance(session, TransitionTrigger.UNIT_CHOSEN)
        return TurnResult([messages.ASK_DATE], session)

    def _handle_date(self, session: ActiveSession, text: str) -> TurnResult:
        iso_date = parse_booking_date(text, self._clock.now().date())
        unit_config = self._unit_config(session)
        session.draft.date = iso_date

        if not unit_config.has_enumerable_slots:
            self._advance(session, TransitionTrigger.DATE_ACCEPTED)
            return TurnResult([build_free_time_prompt(unit_config.display_name)], session)

        available = self._ledger.available_slots(Unit(unit_config.unit), iso_date)
        if not available:
            self._advance(session, TransitionTrigger.NO_SLOTS_LEFT)
            logger.info("No slots left for %s on %s", unit_config.unit, iso_date)
            return TurnResult(
                [build_no_slots_message(unit_config.display_name, iso_date)], IDLE
            )

        self._advance(session, TransitionTrigger.DATE_ACCEPTED)
        return self._offer_slots(session, unit_config, available)

    def _handle_time(self, session: ActiveSession, text: str) -> TurnResult:
        unit_config = self._unit_config(session)

        if not unit_config.has_enumerable_slots:
            session.draft.time = parse_free_time(text)
            self._advance(session, TransitionTrigger.TIME_CHOSEN)
            return TurnResult([messages.ASK_NAME], session)

        chosen = parse_slot_choice(text, list(session.draft.offered_slots))
        unit = Unit(unit_config.unit)
        if not self._ledger.has_capacity(unit, session.draft.date, chosen):
            available = self._ledger.available_slots(unit, session.draft.date)
            logger.info("Offered slot %s filled before it was picked", chosen)
            if not available:
                self._advance(session, TransitionTrigger.NO_SLOTS_LEFT)
                return TurnResult(
                    [build_no_slots_message(unit_config.display_name, session.draft.date)],
                    IDLE,
                )
            offer = self._offer_slots(session, unit_config, available)
            offer.replies.insert(0, messages.OFFERED_SLOT_FILLED)
            return offer

        session.draft.time = chosen
        self._advance(session, TransitionTrigger.TIME_CHOSEN)
        return TurnResult([messages.ASK_NAME], session)

    def _offer_slots(
        self, session: ActiveSession, unit_config: UnitConfig, available: list[str]
    ) -> TurnResult:
        session.draft.offered_slots = tuple(available)
        return TurnResult(
            [build_slot_list_prompt(unit_config.display_name, available)], session
        )

    def _handle_companion_choice(self, session: ActiveSession, text: str) -> TurnResult:
        if parse_companion_choice(text):
            self._advance(session, TransitionTrigger.COMPANION_YES)
            return TurnResult([messages.ASK_COMPANION_NAME], session)
        self._advance(session, TransitionTrigger.COMPANION_NO)
        return self._complete(session)

    def _complete(self, session: ActiveSession) -> TurnResult:
        """Commit the draft. The capacity re-check and insert are atomic."""
        draft = session.draft
        unit_config = self._unit_config(session)
        try:
            booking = self._ledger.book_if_available(
                unit=Unit(draft.unit),
                date=draft.date,
                time=draft.time,
                name=draft.name,
                phone=draft.phone,
                companion=draft.companion,
            )
        except CapacityExceeded:
            return TurnResult([messages.SLOT_FILLED], IDLE)

        logger.info("Trial class booked: %s %s %s", booking.unit.value, booking.date, booking.time)
        return TurnResult(
            [build_confirmation(booking, unit_config.display_name)], IDLE, booking=booking
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _advance(self, session: ActiveSession, trigger: TransitionTrigger) -> None:
        # Terminal states are never stored, so only the local copy is updated.
        session.state = BookingStateMachine.transition(session.state, trigger)

    def _unit_config(self, session: ActiveSession) -> UnitConfig:
        for unit_config in self._units:
            if unit_config.unit == session.draft.unit:
                return unit_config
        raise KeyError(f"Unknown unit in draft: {session.draft.unit}")
