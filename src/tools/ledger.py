"""
Capacity ledger: the authoritative record of trial-class bookings.

Bookings are grouped per unit and date in insertion order, which is also
the order operators see and cancel by. ``add`` is pure bookkeeping;
``book_if_available`` is the check-and-insert the dialogue uses at
completion time.
"""

import logging
import threading
from typing import Optional

from src.config import UnitConfig
from src.exceptions import CapacityExceeded
from src.scheduling import Clock, SystemClock
from src.schemas.booking_schema import Booking, LedgerSnapshot, Unit

logger = logging.getLogger(__name__)


class CapacityLedger:
    """Bookings per unit/date with per-slot capacity checks."""

    def __init__(self, units: tuple[UnitConfig, ...], clock: Optional[Clock] = None) -> None:
        self._units: dict[Unit, UnitConfig] = {Unit(u.unit): u for u in units}
        self._bookings: dict[Unit, dict[str, list[Booking]]] = {
            unit: {} for unit in self._units
        }
        self._lock = threading.RLock()
        self._last_id = 0
        self._clock = clock or SystemClock()

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def unit_config(self, unit: Unit) -> UnitConfig:
        return self._units[Unit(unit)]

    def has_capacity(self, unit: Unit, date: str, time: str) -> bool:
        """True when (date, time) still has a seat; always True if unbounded."""
        max_per_slot = self.unit_config(unit).max_per_slot
        if max_per_slot is None:
            return True
        with self._lock:
            taken = sum(1 for b in self._day(unit, date) if b.time == time)
        return taken < max_per_slot

    def available_slots(self, unit: Unit, date: str) -> list[str]:
        """Configured slots of ``unit`` that still have a seat on ``date``."""
        return [
            slot for slot in self.unit_config(unit).time_slots
            if self.has_capacity(unit, date, slot)
        ]

    def list_bookings(self, unit: Unit, date: str) -> list[Booking]:
        with self._lock:
            return list(self._day(unit, date))

    def count_for(self, unit: Unit, date: str) -> int:
        with self._lock:
            return len(self._day(unit, date))

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def add(
        self,
        unit: Unit,
        date: str,
        time: str,
        name: str,
        phone: str,
        companion: Optional[str] = None,
    ) -> Booking:
        """Append a booking without checking capacity."""
        unit = Unit(unit)
        with self._lock:
            booking = Booking(
                id=self._next_id(),
                unit=unit,
                date=date,
                time=time,
                name=name,
                phone=phone,
                companion=companion,
                created_at=self._clock.now(),
            )
            self._bookings[unit].setdefault(date, []).append(booking)
        logger.info("New booking added: %s - %s - %s %s", unit.value, name, date, time)
        return booking

    def book_if_available(
        self,
        unit: Unit,
        date: str,
        time: str,
        name: str,
        phone: str,
        companion: Optional[str] = None,
    ) -> Booking:
        """
        Check capacity and insert under one lock.

        Raises:
            CapacityExceeded: If the slot filled up since it was offered.
        """
        with self._lock:
            if not self.has_capacity(unit, date, time):
                logger.info("Slot full at completion: %s %s %s", Unit(unit).value, date, time)
                raise CapacityExceeded(Unit(unit).value, date, time)
            return self.add(unit, date, time, name, phone, companion)

    def cancel_by_id(self, unit: Unit, date: str, index: int) -> Optional[Booking]:
        """Remove the booking at 0-based ``index`` of the date's listing."""
        with self._lock:
            day = self._day(unit, date)
            if not 0 <= index < len(day):
                return None
            cancelled = day.pop(index)
            self._drop_if_empty(unit, date)
        logger.info("Booking cancelled: %s - %s %s", cancelled.name, date, cancelled.time)
        return cancelled

    def cancel_by_name(self, unit: Unit, date: str, name_substring: str) -> Optional[Booking]:
        """Remove the first booking whose name contains ``name_substring``."""
        needle = name_substring.strip().lower()
        if not needle:
            return None
        with self._lock:
            for index, booking in enumerate(self._day(unit, date)):
                if needle in booking.name.lower():
                    return self.cancel_by_id(unit, date, index)
        return None

    def reset(self, unit: Unit, date: str) -> int:
        """Drop every booking of ``unit`` on ``date``; returns how many."""
        with self._lock:
            removed = self._bookings[Unit(unit)].pop(date, [])
        logger.info("Bookings reset: %s %s (%d removed)", Unit(unit).value, date, len(removed))
        return len(removed)

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def snapshot(self) -> dict[Unit, dict[str, list[Booking]]]:
        with self._lock:
            return {
                unit: {date: list(day) for date, day in dates.items()}
                for unit, dates in self._bookings.items()
            }

    def restore(self, snapshot: LedgerSnapshot) -> None:
        """Replace the in-memory ledger with a persisted copy."""
        with self._lock:
            self._bookings = {unit: {} for unit in self._units}
            for unit, dates in snapshot.bookings.items():
                if unit not in self._units:
                    logger.warning("Ignoring bookings for unknown unit '%s'", unit)
                    continue
                for date, day in dates.items():
                    if day:
                        self._bookings[unit][date] = list(day)
                        self._last_id = max(self._last_id, *(b.id for b in day))

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _day(self, unit: Unit, date: str) -> list[Booking]:
        return self._bookings[Unit(unit)].get(date, [])

    def _drop_if_empty(self, unit: Unit, date: str) -> None:
        dates = self._bookings[Unit(unit)]
        if date in dates and not dates[date]:
            del dates[date]

    def _next_id(self) -> int:
        # Millisecond timestamp, bumped to stay strictly increasing.
        self._last_id = max(int(self._clock.now().timestamp() * 1000), self._last_id + 1)
        return self._last_id
