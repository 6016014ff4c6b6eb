"""
Finite state machine for the trial-class booking dialogue.

Declares the booking sub-states and every legal transition between them.
The dialogue engine never assigns a state directly; it asks the machine
for the next state given a trigger, so an undeclared jump fails loudly
instead of leaving a session in an unreachable state.

Usage:
    state = BookingStateMachine.transition(DialogueState.AWAIT_UNIT,
                                           TransitionTrigger.UNIT_CHOSEN)
    assert state == DialogueState.AWAIT_DATE
"""

import logging
from dataclasses import dataclass
from enum import Enum

from src.schemas.session_schema import BOOKING_STATES, DialogueState

logger = logging.getLogger(__name__)


class TransitionTrigger(str, Enum):
    """Events that cause state transitions."""
    START_BOOKING = "start_booking"
    UNIT_CHOSEN = "unit_chosen"
    DATE_ACCEPTED = "date_accepted"
    NO_SLOTS_LEFT = "no_slots_left"
    TIME_CHOSEN = "time_chosen"
    NAME_GIVEN = "name_given"
    PHONE_GIVEN = "phone_given"
    COMPANION_YES = "companion_yes"
    COMPANION_NO = "companion_no"
    COMPANION_NAMED = "companion_named"
    MENU_RETURN = "menu_return"


@dataclass(frozen=True)
class Transition:
    """A single valid state transition."""
    from_state: DialogueState
    to_state: DialogueState
    trigger: TransitionTrigger


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


class BookingStateMachine:
    """Transition table for the booking flow."""

    TRANSITIONS: list[Transition] = [
        # --- Entry ---
        Transition(DialogueState.IDLE, DialogueState.AWAIT_UNIT,
                   TransitionTrigger.START_BOOKING),

        # --- Slot collection ---
        Transition(DialogueState.AWAIT_UNIT, DialogueState.AWAIT_DATE,
                   TransitionTrigger.UNIT_CHOSEN),
        Transition(DialogueState.AWAIT_DATE, DialogueState.AWAIT_TIME,
                   TransitionTrigger.DATE_ACCEPTED),
        Transition(DialogueState.AWAIT_DATE, DialogueState.IDLE,
                   TransitionTrigger.NO_SLOTS_LEFT),
        Transition(DialogueState.AWAIT_TIME, DialogueState.AWAIT_NAME,
                   TransitionTrigger.TIME_CHOSEN),
        Transition(DialogueState.AWAIT_TIME, DialogueState.IDLE,
                   TransitionTrigger.NO_SLOTS_LEFT),
        Transition(DialogueState.AWAIT_NAME, DialogueState.AWAIT_PHONE,
                   TransitionTrigger.NAME_GIVEN),
        Transition(DialogueState.AWAIT_PHONE, DialogueState.AWAIT_COMPANION_CHOICE,
                   TransitionTrigger.PHONE_GIVEN),

        # --- Companion ---
        Transition(DialogueState.AWAIT_COMPANION_CHOICE, DialogueState.AWAIT_COMPANION_NAME,
                   TransitionTrigger.COMPANION_YES),
        Transition(DialogueState.AWAIT_COMPANION_CHOICE, DialogueState.COMPLETE,
                   TransitionTrigger.COMPANION_NO),
        Transition(DialogueState.AWAIT_COMPANION_NAME, DialogueState.COMPLETE,
                   TransitionTrigger.COMPANION_NAMED),
    ] + [
        # --- Menu return from anywhere in the flow ---
        Transition(state, DialogueState.IDLE, TransitionTrigger.MENU_RETURN)
        for state in sorted(BOOKING_STATES, key=lambda s: s.value)
    ]

    @classmethod
    def transition(cls, current: DialogueState, trigger: TransitionTrigger) -> DialogueState:
        """
        Resolve the next state.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in cls.TRANSITIONS:
            if t.from_state == current and t.trigger == trigger:
                logger.debug(
                    "State transition: %s -> %s (trigger: %s)",
                    current.value, t.to_state.value, trigger.value,
                )
                return t.to_state

        valid = [t.value for t in cls.get_valid_triggers(current)]
        raise InvalidTransitionError(
            f"No valid transition from '{current.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    @classmethod
    def get_valid_triggers(cls, current: DialogueState) -> list[TransitionTrigger]:
        """Return all triggers valid from the given state."""
        return [t.trigger for t in cls.TRANSITIONS if t.from_state == current]

    @staticmethod
    def is_terminal(state: DialogueState) -> bool:
        """True when the state ends the flow and the session must be dropped."""
        return state in (DialogueState.IDLE, DialogueState.COMPLETE)
