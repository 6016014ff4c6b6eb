"""
Operator commands over the capacity ledger.

Staff use these from a privileged channel (one per unit), separate from the
end-user dialogue:

    /vagas [YYYY-MM-DD]   list bookings (default: today)
    /cancelar N           cancel the N-th booking of today
    /cancelar_nome NOME   cancel today's first booking matching NOME
    /reset YYYY-MM-DD     drop every booking of that date
    /relatorio            daily report

In production the commands arrive through the Telegram command poller,
which picks the unit from the staff chat a message comes from; the console
demo passes ``--unit``.
"""

import logging
import re
from typing import Callable, Optional

from src.conversation.admission import AdmissionGate
from src.prompts.prompt_templates import build_booking_listing, build_daily_report
from src.scheduling import Clock
from src.schemas.booking_schema import BotMetrics, Unit
from src.tools.ledger import CapacityLedger

logger = logging.getLogger(__name__)

_LIST_RE = re.compile(r"^/vagas(?:\s+(\d{4}-\d{2}-\d{2}))?$")
_CANCEL_INDEX_RE = re.compile(r"^/cancelar\s+(\d+)$")
_CANCEL_NAME_RE = re.compile(r"^/cancelar_nome\s+(.+)$")
_RESET_RE = re.compile(r"^/reset\s+(\d{4}-\d{2}-\d{2})$")
_REPORT_RE = re.compile(r"^/relatorio$")


class AdminCommands:
    """Parses operator commands and applies them to the ledger."""

    def __init__(
        self,
        ledger: CapacityLedger,
        gate: AdmissionGate,
        metrics: BotMetrics,
        clock: Clock,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._ledger = ledger
        self._gate = gate
        self._metrics = metrics
        self._clock = clock
        self._on_change = on_change

    def handle(self, unit: Unit, text: str) -> Optional[str]:
        """Run one command for ``unit``; None when ``text`` is not a command."""
        unit = Unit(unit)
        text = text.strip()
        if text.startswith("/"):
            logger.info("Admin command for %s: %s", unit.value, text)

        match = _LIST_RE.match(text)
        if match:
            date = match.group(1) or self._today()
            return build_booking_listing(
                unit.value, date, self._ledger.list_bookings(unit, date)
            )

        match = _CANCEL_INDEX_RE.match(text)
        if match:
            cancelled = self._ledger.cancel_by_id(unit, self._today(), int(match.group(1)) - 1)
            if cancelled is None:
                return "❌ Reserva não encontrada"
            self._changed()
            return f"✅ Reserva cancelada: {cancelled.name} - {cancelled.time}"

        match = _CANCEL_NAME_RE.match(text)
        if match:
            today = self._today()
            if not self._ledger.count_for(unit, today):
                return "❌ Nenhuma reserva encontrada para hoje"
            cancelled = self._ledger.cancel_by_name(unit, today, match.group(1))
            if cancelled is None:
                return "❌ Reserva não encontrada para este nome"
            self._changed()
            return f"✅ Reserva cancelada: {cancelled.name} - {cancelled.time}"

        match = _RESET_RE.match(text)
        if match:
            date = match.group(1)
            self._ledger.reset(unit, date)
            self._changed()
            return f"✅ Reservas resetadas para {date}"

        if _REPORT_RE.match(text):
            return self.report()

        return None

    def report(self) -> str:
        today = self._today()
        bookings_today = {
            self._ledger.unit_config(u).display_name: self._ledger.count_for(u, today)
            for u in Unit
        }
        return build_daily_report(
            self._clock.now().date(),
            self._metrics,
            bookings_today,
            self._gate.pauses.paused_count,
        )

    def _today(self) -> str:
        return self._clock.now().date().isoformat()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
