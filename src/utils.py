"""Shared parsing and formatting helpers for user-typed values."""

import re
from datetime import date
from typing import Optional

_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def normalize_phone(value: str) -> Optional[str]:
    """Normalize a Brazilian phone number to its display form.

    Returns None when the value does not hold 10 or 11 digits.

    Examples:
        >>> normalize_phone("21999887766")
        '(21) 99988-7766'
        >>> normalize_phone("(21) 9988-7766")
        '(21) 9988-7766'
    """
    digits = re.sub(r"\D", "", value)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return None


def parse_date(value: str) -> Optional[str]:
    """Parse a ``D/M/YYYY`` date into ISO ``YYYY-MM-DD``.

    Returns None for malformed input or impossible calendar dates.

    Examples:
        >>> parse_date("29/02/2024")
        '2024-02-29'
        >>> parse_date("31/02/2024") is None
        True
    """
    match = _DATE_RE.match(value.strip())
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def format_date(iso_date: str) -> str:
    """Format an ISO date back to ``DD/MM/YYYY`` for display."""
    year, month, day = iso_date.split("-")
    return f"{day}/{month}/{year}"


def normalize_time(value: str) -> Optional[str]:
    """Normalize ``H:MM`` / ``HH:MM`` to zero-padded ``HH:MM``.

    Examples:
        >>> normalize_time("7:05")
        '07:05'
        >>> normalize_time("24:00") is None
        True
    """
    match = _TIME_RE.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return f"{hour:02d}:{minute:02d}"
