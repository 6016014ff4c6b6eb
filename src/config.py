"""
Centralized configuration with environment variable overrides.

All business-specific values, limits, and timers are configurable here.
Components receive the section they need; ``settings`` is only the default
wiring used by the entry point.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from src.logging_context import LOG_FORMAT, install_conversation_filter

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _optional_int(env_var: str, default: str = "") -> Optional[int]:
    """Parse an optional integer; an empty value means "not configured"."""
    raw = os.getenv(env_var, default).strip()
    if not raw:
        return None
    return _safe_int(env_var, raw)


def _csv(env_var: str, default: str = "") -> tuple[str, ...]:
    raw = os.getenv(env_var, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class BusinessConfig:
    """Business-specific settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "CT LK Futevôlei")
    timezone: str = os.getenv("TIMEZONE", "America/Sao_Paulo")


@dataclass(frozen=True)
class UnitConfig:
    """Capacity policy and notification target for one unit.

    ``max_per_slot`` of None means the unit is unbounded. When
    ``time_slots`` is non-empty the user picks from that list; otherwise the
    time is typed freely.
    """

    unit: str
    token: str
    display_name: str
    max_per_slot: Optional[int] = None
    time_slots: tuple[str, ...] = ()
    notify_chat_id: Optional[str] = None

    @property
    def has_enumerable_slots(self) -> bool:
        return bool(self.time_slots)


def _default_units() -> tuple[UnitConfig, ...]:
    return (
        UnitConfig(
            unit="recreio",
            token="A",
            display_name="Recreio",
            max_per_slot=_optional_int("RECREIO_MAX_PER_SLOT", "2"),
            time_slots=_csv("RECREIO_TIME_SLOTS", "17:30,18:30,19:30"),
            notify_chat_id=os.getenv("TELEGRAM_RECREIO_CHAT_ID") or None,
        ),
        UnitConfig(
            unit="bangu",
            token="B",
            display_name="Bangu",
            max_per_slot=_optional_int("BANGU_MAX_PER_SLOT"),
            time_slots=_csv("BANGU_TIME_SLOTS"),
            notify_chat_id=os.getenv("TELEGRAM_BANGU_CHAT_ID") or None,
        ),
    )


@dataclass(frozen=True)
class RateLimitConfig:
    """Per-sender message rate limit."""

    max_messages: int = _safe_int("RATE_LIMIT_MAX_MESSAGES", "10")
    window_seconds: float = _safe_float("RATE_LIMIT_WINDOW_SEC", "60")


@dataclass(frozen=True)
class PauseConfig:
    """Human-takeover pause settings."""

    reactivation_minutes: float = _safe_float("PAUSE_REACTIVATION_MINUTES", "30")
    reactivation_keywords: tuple[str, ...] = ("MENU", "/REATIVAR")

    @property
    def reactivation_seconds(self) -> float:
        return self.reactivation_minutes * 60


@dataclass(frozen=True)
class SessionConfig:
    """In-progress dialogue retention."""

    ttl_minutes: float = _safe_float("SESSION_TTL_MINUTES", "30")


@dataclass(frozen=True)
class PersistenceConfig:
    """Durable ledger storage."""

    data_dir: str = os.getenv("DATA_DIR", "./data")
    ledger_file: str = os.getenv("LEDGER_FILE", "ledger.json")
    save_interval_seconds: float = _safe_float("SAVE_INTERVAL_SEC", "300")

    @property
    def ledger_path(self) -> str:
        return os.path.join(self.data_dir, self.ledger_file)


@dataclass(frozen=True)
class NotificationConfig:
    """Staff Telegram channel: booking notifications and operator commands."""

    telegram_bot_token: Optional[str] = os.getenv("TELEGRAM_BOT_TOKEN") or None
    telegram_api_base: str = os.getenv("TELEGRAM_API_BASE", "https://api.telegram.org")
    timeout_seconds: float = _safe_float("TELEGRAM_TIMEOUT_SEC", "10")
    poll_timeout_seconds: int = _safe_int("TELEGRAM_POLL_TIMEOUT_SEC", "30")
    poll_retry_seconds: float = _safe_float("TELEGRAM_POLL_RETRY_SEC", "5")

    @property
    def enabled(self) -> bool:
        return bool(self.telegram_bot_token)


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    units: tuple[UnitConfig, ...] = field(default_factory=_default_units)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    pause: PauseConfig = field(default_factory=PauseConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    notification: NotificationConfig = field(default_factory=NotificationConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def unit(self, unit: str) -> UnitConfig:
        for unit_config in self.units:
            if unit_config.unit == unit:
                return unit_config
        raise KeyError(f"Unknown unit: {unit}")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.rate_limit.max_messages < 1:
        raise ValueError(
            f"RATE_LIMIT_MAX_MESSAGES must be >= 1, got {config.rate_limit.max_messages}"
        )
    if config.rate_limit.window_seconds <= 0:
        raise ValueError(
            f"RATE_LIMIT_WINDOW_SEC must be > 0, got {config.rate_limit.window_seconds}"
        )
    if config.pause.reactivation_minutes <= 0:
        raise ValueError(
            "PAUSE_REACTIVATION_MINUTES must be > 0, "
            f"got {config.pause.reactivation_minutes}"
        )
    if config.session.ttl_minutes <= 0:
        raise ValueError(
            f"SESSION_TTL_MINUTES must be > 0, got {config.session.ttl_minutes}"
        )
    if config.persistence.save_interval_seconds <= 0:
        raise ValueError(
            "SAVE_INTERVAL_SEC must be > 0, "
            f"got {config.persistence.save_interval_seconds}"
        )
    if config.notification.poll_timeout_seconds < 0:
        raise ValueError(
            "TELEGRAM_POLL_TIMEOUT_SEC must be >= 0, "
            f"got {config.notification.poll_timeout_seconds}"
        )

    tokens = [u.token.upper() for u in config.units]
    if len(set(tokens)) != len(tokens):
        raise ValueError(f"Unit tokens must be unique, got {tokens}")

    for unit_config in config.units:
        name = unit_config.unit.upper()
        if unit_config.max_per_slot is not None and unit_config.max_per_slot < 1:
            raise ValueError(
                f"{name}_MAX_PER_SLOT must be >= 1, got {unit_config.max_per_slot}"
            )
        for slot in unit_config.time_slots:
            hour, sep, minute = slot.partition(":")
            if (
                not sep
                or not (hour.isdigit() and minute.isdigit())
                or len(minute) != 2
                or not 0 <= int(hour) <= 23
                or not 0 <= int(minute) <= 59
            ):
                raise ValueError(f"{name}_TIME_SLOTS has an invalid time: {slot!r}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_conversation_filter()
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
