"""Tests for configuration loading and validation."""

from dataclasses import replace

import pytest

from src.config import (
    AppConfig,
    NotificationConfig,
    PauseConfig,
    PersistenceConfig,
    RateLimitConfig,
    SessionConfig,
    UnitConfig,
    _csv,
    _optional_int,
    _safe_float,
    _safe_int,
    _validate_config,
)
from tests.conftest import BANGU, RECREIO, make_config


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        _validate_config(AppConfig())  # should not raise

    def test_test_config_passes_validation(self):
        _validate_config(make_config())

    def test_rate_limit_max_must_be_positive(self):
        config = make_config(rate_limit=RateLimitConfig(max_messages=0, window_seconds=60))
        with pytest.raises(ValueError, match="RATE_LIMIT_MAX_MESSAGES"):
            _validate_config(config)

    def test_rate_limit_window_must_be_positive(self):
        config = make_config(rate_limit=RateLimitConfig(max_messages=10, window_seconds=0))
        with pytest.raises(ValueError, match="RATE_LIMIT_WINDOW_SEC"):
            _validate_config(config)

    def test_pause_window_must_be_positive(self):
        config = make_config(pause=PauseConfig(reactivation_minutes=-1))
        with pytest.raises(ValueError, match="PAUSE_REACTIVATION_MINUTES"):
            _validate_config(config)

    def test_session_ttl_must_be_positive(self):
        config = make_config(session=SessionConfig(ttl_minutes=0))
        with pytest.raises(ValueError, match="SESSION_TTL_MINUTES"):
            _validate_config(config)

    def test_save_interval_must_be_positive(self):
        config = make_config(
            persistence=PersistenceConfig(data_dir=".", ledger_file="l.json", save_interval_seconds=0)
        )
        with pytest.raises(ValueError, match="SAVE_INTERVAL_SEC"):
            _validate_config(config)

    def test_poll_timeout_must_not_be_negative(self):
        config = make_config(notification=NotificationConfig(poll_timeout_seconds=-1))
        with pytest.raises(ValueError, match="TELEGRAM_POLL_TIMEOUT_SEC"):
            _validate_config(config)

    def test_unit_tokens_must_be_unique(self):
        config = make_config(units=(RECREIO, replace(BANGU, token="a")))
        with pytest.raises(ValueError, match="tokens must be unique"):
            _validate_config(config)

    def test_max_per_slot_must_be_positive(self):
        config = make_config(units=(replace(RECREIO, max_per_slot=0), BANGU))
        with pytest.raises(ValueError, match="RECREIO_MAX_PER_SLOT"):
            _validate_config(config)

    @pytest.mark.parametrize("slot", ["1730", "25:00", "17:5", "17:60", "aa:bb"])
    def test_time_slots_must_be_valid(self, slot):
        config = make_config(units=(replace(RECREIO, time_slots=("18:30", slot)), BANGU))
        with pytest.raises(ValueError, match="RECREIO_TIME_SLOTS"):
            _validate_config(config)


class TestDefaults:
    def test_recreio_has_enumerable_slots(self):
        assert RECREIO.has_enumerable_slots

    def test_bangu_is_free_form(self):
        assert not BANGU.has_enumerable_slots
        assert BANGU.max_per_slot is None

    def test_pause_seconds(self):
        assert PauseConfig(reactivation_minutes=30).reactivation_seconds == 1800

    def test_default_reactivation_keywords(self):
        assert PauseConfig().reactivation_keywords == ("MENU", "/REATIVAR")

    def test_ledger_path(self):
        config = PersistenceConfig(data_dir="/var/bot", ledger_file="ledger.json")
        assert config.ledger_path == "/var/bot/ledger.json"

    def test_lookup_unit(self):
        assert make_config().unit("bangu") is BANGU

    def test_lookup_unknown_unit(self):
        with pytest.raises(KeyError):
            make_config().unit("centro")

    def test_unit_config_is_frozen(self):
        with pytest.raises(AttributeError):
            RECREIO.max_per_slot = 5  # type: ignore[misc]

    def test_unit_defaults(self):
        unit = UnitConfig(unit="centro", token="C", display_name="Centro")
        assert unit.max_per_slot is None
        assert unit.time_slots == ()
        assert unit.notify_chat_id is None


class TestEnvParsing:
    def test_safe_int_reads_env(self, monkeypatch):
        monkeypatch.setenv("TEST_INT", "7")
        assert _safe_int("TEST_INT", "1") == 7

    def test_safe_int_bad_value(self, monkeypatch):
        monkeypatch.setenv("TEST_INT", "seven")
        with pytest.raises(ValueError, match="TEST_INT"):
            _safe_int("TEST_INT", "1")

    def test_safe_float_default(self, monkeypatch):
        monkeypatch.delenv("TEST_FLOAT", raising=False)
        assert _safe_float("TEST_FLOAT", "2.5") == 2.5

    def test_optional_int_empty_is_none(self, monkeypatch):
        monkeypatch.setenv("TEST_OPT", "  ")
        assert _optional_int("TEST_OPT") is None

    def test_optional_int_value(self, monkeypatch):
        monkeypatch.setenv("TEST_OPT", "3")
        assert _optional_int("TEST_OPT") == 3

    def test_csv_strips_and_skips_blanks(self, monkeypatch):
        monkeypatch.setenv("TEST_CSV", " 17:30, ,18:30 ,")
        assert _csv("TEST_CSV") == ("17:30", "18:30")
