"""
Admission control for inbound events.

Two independent layers decide whether the dialogue engine runs at all:
1. PauseTracker — human takeover and user-requested staff attention
2. RateLimiter  — fixed-window message budget per sender

These are composed into an AdmissionGate that the router consults before
touching any session state.
"""

import logging
from datetime import timedelta
from typing import Optional

from src.config import PauseConfig, RateLimitConfig
from src.prompts.messages import RATE_LIMITED
from src.scheduling import Clock, Scheduler, TimerHandle
from src.schemas.conversation_schema import (
    AdmissionReason,
    AdmissionResult,
    InboundEvent,
    PauseReason,
    PauseRecord,
    RateLimitWindow,
)

logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed-window counter keyed by sender id."""

    def __init__(self, config: RateLimitConfig, clock: Clock) -> None:
        self._config = config
        self._clock = clock
        self._windows: dict[str, RateLimitWindow] = {}

    def check(self, sender_id: str) -> bool:
        """Count one message for ``sender_id``; False when over budget."""
        now = self._clock.now()
        window = self._windows.get(sender_id)

        if window is None or now > window.reset_at:
            self._windows[sender_id] = RateLimitWindow(
                count=1, reset_at=now + timedelta(seconds=self._config.window_seconds)
            )
            return True

        if window.count >= self._config.max_messages:
            return False

        window.count += 1
        return True

    def prune_expired(self) -> int:
        """Drop windows whose reset time has passed."""
        now = self._clock.now()
        expired = [sid for sid, w in self._windows.items() if now > w.reset_at]
        for sender_id in expired:
            del self._windows[sender_id]
        return len(expired)

    def get_window(self, sender_id: str) -> Optional[RateLimitWindow]:
        return self._windows.get(sender_id)


class PauseTracker:
    """
    Per-conversation pause records with self-expiring timers.

    Each pause owns exactly one pending removal timer. Pausing an already
    paused conversation cancels the old timer and arms a new one.
    """

    def __init__(self, config: PauseConfig, clock: Clock, scheduler: Scheduler) -> None:
        self._config = config
        self._clock = clock
        self._scheduler = scheduler
        self._records: dict[str, PauseRecord] = {}
        self._timers: dict[str, TimerHandle] = {}

    def pause(self, conversation_id: str, reason: PauseReason) -> PauseRecord:
        record = PauseRecord(
            conversation_id=conversation_id,
            paused_at=self._clock.now(),
            reason=reason,
        )
        self._records[conversation_id] = record
        self._cancel_timer(conversation_id)
        self._timers[conversation_id] = self._scheduler.call_later(
            self._config.reactivation_seconds,
            lambda: self._expire(conversation_id, record),
        )
        logger.info("Bot paused for chat %s (%s)", conversation_id, reason.value)
        return record

    def resume(self, conversation_id: str) -> bool:
        """Remove the pause manually. Returns False when nothing was paused."""
        self._cancel_timer(conversation_id)
        if self._records.pop(conversation_id, None) is None:
            return False
        logger.info("Bot manually reactivated for chat %s", conversation_id)
        return True

    def is_paused(self, conversation_id: str) -> bool:
        return conversation_id in self._records

    def get(self, conversation_id: str) -> Optional[PauseRecord]:
        return self._records.get(conversation_id)

    @property
    def paused_count(self) -> int:
        return len(self._records)

    def _expire(self, conversation_id: str, record: PauseRecord) -> None:
        # A refreshed pause replaces the record; an old timer must not clear it.
        if self._records.get(conversation_id) is not record:
            return
        del self._records[conversation_id]
        self._timers.pop(conversation_id, None)
        logger.info("Bot auto-reactivated for chat %s", conversation_id)

    def _cancel_timer(self, conversation_id: str) -> None:
        handle = self._timers.pop(conversation_id, None)
        if handle is not None:
            handle.cancel()


class AdmissionGate:
    """Composes pause tracking and rate limiting into one admission decision."""

    def __init__(
        self,
        rate_config: RateLimitConfig,
        pause_config: PauseConfig,
        clock: Clock,
        scheduler: Scheduler,
    ) -> None:
        self.rate_limiter = RateLimiter(rate_config, clock)
        self.pauses = PauseTracker(pause_config, clock, scheduler)
        self._reactivation_keywords = {k.upper() for k in pause_config.reactivation_keywords}

    def admit(self, event: InboundEvent) -> AdmissionResult:
        """Decide whether the dialogue engine may respond to ``event``."""
        conversation_id = event.conversation_id

        if event.from_business_account:
            if event.is_from_automated_actor:
                return AdmissionResult(allowed=False, reason=AdmissionReason.OWN_ECHO)
            self.pauses.pause(conversation_id, PauseReason.HUMAN_TAKEOVER)
            return AdmissionResult(allowed=False, reason=AdmissionReason.HUMAN_TAKEOVER)

        if self.pauses.is_paused(conversation_id):
            if self.is_reactivation(event.text):
                self.pauses.resume(conversation_id)
                return AdmissionResult(allowed=True, reason=AdmissionReason.REACTIVATED)
            return AdmissionResult(allowed=False, reason=AdmissionReason.PAUSED)

        if not self.rate_limiter.check(event.sender_id):
            logger.warning("Rate limit exceeded for sender %s", event.sender_id)
            return AdmissionResult(
                allowed=False, reason=AdmissionReason.RATE_LIMITED, notice=RATE_LIMITED
            )

        return AdmissionResult(allowed=True, reason=AdmissionReason.ALLOWED)

    def pause(self, conversation_id: str, reason: PauseReason) -> PauseRecord:
        return self.pauses.pause(conversation_id, reason)

    def resume(self, conversation_id: str) -> bool:
        return self.pauses.resume(conversation_id)

    def is_reactivation(self, text: str) -> bool:
        return text.strip().upper() in self._reactivation_keywords
