"""Booking, ledger snapshot and metrics data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Unit(str, Enum):
    """Physical locations that accept trial-class bookings."""
    RECREIO = "recreio"
    BANGU = "bangu"


class Booking(BaseModel):
    """A committed trial-class booking. Immutable; cancelling deletes it."""

    model_config = ConfigDict(frozen=True)

    id: int
    unit: Unit
    date: str
    time: str
    name: str
    phone: str
    companion: Optional[str] = None
    created_at: datetime


class BotMetrics(BaseModel):
    """Running counters shown in the daily report."""
    messages_received: int = 0
    trial_bookings: int = 0
    menus_shown: int = 0
    human_takeovers: int = 0


class LedgerSnapshot(BaseModel):
    """Serializable copy of the ledger plus counters for durable storage."""
    saved_at: Optional[datetime] = None
    bookings: dict[Unit, dict[str, list[Booking]]] = Field(default_factory=dict)
    metrics: BotMetrics = Field(default_factory=BotMetrics)
