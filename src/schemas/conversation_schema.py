"""Inbound events and admission-control records."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class InboundEvent(BaseModel):
    """One message delivered by the transport.

    ``from_business_account`` is True for messages typed on the business's
    own account, either by the bot (``is_from_automated_actor``) or by a
    staff member taking over the chat.
    """

    sender_id: str
    conversation_id: str
    text: str
    is_from_automated_actor: bool = False
    from_business_account: bool = False

    @property
    def is_human_agent(self) -> bool:
        return self.from_business_account and not self.is_from_automated_actor


class PauseReason(str, Enum):
    HUMAN_TAKEOVER = "human-takeover"
    USER_REQUESTED = "user-requested"


class AdmissionReason(str, Enum):
    ALLOWED = "allowed"
    REACTIVATED = "reactivated"
    RATE_LIMITED = "rate-limited"
    PAUSED = "paused"
    HUMAN_TAKEOVER = "human-takeover"
    OWN_ECHO = "own-echo"


@dataclass
class PauseRecord:
    conversation_id: str
    paused_at: datetime
    reason: PauseReason


@dataclass
class RateLimitWindow:
    count: int
    reset_at: datetime


@dataclass
class AdmissionResult:
    """Outcome of the admission check for one inbound event."""
    allowed: bool
    reason: AdmissionReason
    notice: Optional[str] = None
