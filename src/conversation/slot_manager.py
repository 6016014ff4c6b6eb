"""
Input parsing for each step of the booking flow.

Every parser takes the raw user text and either returns the normalized
value to store in the draft or raises ValidationError carrying the
re-prompt to send back. Steps that need no context beyond the text are
described declaratively in SLOT_DEFINITIONS.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from src.config import UnitConfig
from src.conversation.state_machine import TransitionTrigger
from src.exceptions import ValidationError
from src.prompts import messages
from src.prompts.prompt_templates import build_invalid_slot_choice
from src.schemas.session_schema import DialogueState
from src.utils import normalize_phone, normalize_time, parse_date

# Validation thresholds
MIN_NAME_LENGTH = 3

TODAY_KEYWORD = "HOJE"
AFFIRMATIVE = frozenset({"SIM"})
NEGATIVE = frozenset({"NÃO", "NAO"})


def parse_unit(text: str, units: tuple[UnitConfig, ...]) -> UnitConfig:
    token = text.strip().upper()
    for unit_config in units:
        if unit_config.token.upper() == token:
            return unit_config
    raise ValidationError(messages.INVALID_UNIT)


def parse_booking_date(text: str, today: date) -> str:
    """``HOJE`` or a ``D/M/YYYY`` calendar date, returned in ISO form."""
    if text.strip().upper() == TODAY_KEYWORD:
        return today.isoformat()
    parsed = parse_date(text)
    if parsed is None:
        raise ValidationError(messages.INVALID_DATE)
    return parsed


def parse_slot_choice(text: str, available: list[str]) -> str:
    """1-based index into the slots the user was shown."""
    raw = text.strip()
    if raw.isdigit():
        index = int(raw) - 1
        if 0 <= index < len(available):
            return available[index]
    raise ValidationError(build_invalid_slot_choice(len(available)))


def parse_free_time(text: str) -> str:
    parsed = normalize_time(text)
    if parsed is None:
        raise ValidationError(messages.INVALID_TIME)
    return parsed


def _parse_name(text: str, error: str) -> str:
    name = text.strip()
    if len(name) < MIN_NAME_LENGTH:
        raise ValidationError(error)
    return name


def parse_person_name(text: str) -> str:
    return _parse_name(text, messages.NAME_TOO_SHORT)


def parse_companion_name(text: str) -> str:
    return _parse_name(text, messages.COMPANION_NAME_TOO_SHORT)


def parse_phone(text: str) -> str:
    phone = normalize_phone(text)
    if phone is None:
        raise ValidationError(messages.INVALID_PHONE)
    return phone


def parse_companion_choice(text: str) -> bool:
    """True for SIM, False for NÃO/NAO (case-insensitive)."""
    answer = text.strip().upper()
    if answer in AFFIRMATIVE:
        return True
    if answer in NEGATIVE:
        return False
    raise ValidationError(messages.INVALID_COMPANION_CHOICE)


@dataclass(frozen=True)
class SlotDefinition:
    """A booking step whose input is parsed from the text alone."""

    state: DialogueState
    field: str
    parser: Callable[[str], str]
    trigger: TransitionTrigger
    next_prompt: Optional[str] = None


SLOT_DEFINITIONS: dict[DialogueState, SlotDefinition] = {
    d.state: d
    for d in (
        SlotDefinition(
            state=DialogueState.AWAIT_NAME,
            field="name",
            parser=parse_person_name,
            trigger=TransitionTrigger.NAME_GIVEN,
            next_prompt=messages.ASK_PHONE,
        ),
        SlotDefinition(
            state=DialogueState.AWAIT_PHONE,
            field="phone",
            parser=parse_phone,
            trigger=TransitionTrigger.PHONE_GIVEN,
            next_prompt=messages.ASK_COMPANION,
        ),
        SlotDefinition(
            state=DialogueState.AWAIT_COMPANION_NAME,
            field="companion",
            parser=parse_companion_name,
            trigger=TransitionTrigger.COMPANION_NAMED,
        ),
    )
}
