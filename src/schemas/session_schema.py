"""Per-conversation dialogue state."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class DialogueState(str, Enum):
    """All states of the booking dialogue.

    IDLE and COMPLETE are never stored in a session: IDLE is the absence
    of a session and COMPLETE deletes it right after the ledger write.
    """
    IDLE = "idle"
    AWAIT_UNIT = "await-unit"
    AWAIT_DATE = "await-date"
    AWAIT_TIME = "await-time"
    AWAIT_NAME = "await-name"
    AWAIT_PHONE = "await-phone"
    AWAIT_COMPANION_CHOICE = "await-companion-choice"
    AWAIT_COMPANION_NAME = "await-companion-name"
    COMPLETE = "complete"


BOOKING_STATES: frozenset[DialogueState] = frozenset({
    DialogueState.AWAIT_UNIT,
    DialogueState.AWAIT_DATE,
    DialogueState.AWAIT_TIME,
    DialogueState.AWAIT_NAME,
    DialogueState.AWAIT_PHONE,
    DialogueState.AWAIT_COMPANION_CHOICE,
    DialogueState.AWAIT_COMPANION_NAME,
})


@dataclass
class BookingDraft:
    """
    Booking data accumulated across dialogue turns.

    Every field stays None until its step accepts input; on completion the
    draft is turned into a ledger Booking.
    ``offered_slots`` is the numbered slot list the user was last shown.
    """
    unit: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    companion: Optional[str] = None
    offered_slots: tuple[str, ...] = ()


@dataclass(frozen=True)
class Idle:
    """No session: the conversation is browsing the menu."""


@dataclass
class ActiveSession:
    """A conversation in the middle of the booking flow."""
    state: DialogueState
    last_activity: datetime
    draft: BookingDraft = field(default_factory=BookingDraft)

    def __post_init__(self) -> None:
        if self.state not in BOOKING_STATES:
            raise ValueError(f"Session cannot be stored in state '{self.state.value}'")


SessionState = Union[Idle, ActiveSession]

IDLE = Idle()
