"""Tests for shared parsing and formatting helpers."""

import pytest

from src.utils import format_date, normalize_phone, normalize_time, parse_date


class TestNormalizePhone:
    def test_eleven_digits(self):
        assert normalize_phone("21999887766") == "(21) 99988-7766"

    def test_ten_digits(self):
        assert normalize_phone("2133334444") == "(21) 3333-4444"

    def test_non_digits_are_ignored(self):
        assert normalize_phone("+(21) 99988-7766") == "(21) 99988-7766"

    @pytest.mark.parametrize("value", ["", "123", "021999887766", "abc"])
    def test_wrong_digit_count(self, value):
        assert normalize_phone(value) is None


class TestParseDate:
    def test_unpadded(self):
        assert parse_date("5/4/2025") == "2025-04-05"

    def test_leap_day(self):
        assert parse_date("29/02/2024") == "2024-02-29"

    def test_impossible_date(self):
        assert parse_date("31/02/2024") is None

    def test_non_leap_year(self):
        assert parse_date("29/02/2023") is None

    @pytest.mark.parametrize("value", ["2025-04-05", "5-4-2025", "05/04/25", ""])
    def test_wrong_format(self, value):
        assert parse_date(value) is None


class TestFormatDate:
    def test_iso_to_display(self):
        assert format_date("2025-04-05") == "05/04/2025"


class TestNormalizeTime:
    def test_pads(self):
        assert normalize_time("7:05") == "07:05"

    def test_keeps_padded(self):
        assert normalize_time("18:30") == "18:30"

    @pytest.mark.parametrize("value", ["24:00", "12:60", "1830", "18h30"])
    def test_invalid(self, value):
        assert normalize_time(value) is None


class TestPhoneScenario:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("21999887766", "(21) 99988-7766"),
            ("2199887766", "(21) 9988-7766"),
            ("abc123", None),
        ],
    )
    def test_documented_examples(self, value, expected):
        assert normalize_phone(value) == expected
