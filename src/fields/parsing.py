"""Lenient parsing of extracted field values."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

_NUMERIC_NOISE = str.maketrans("", "", "$,% \u00a0")


def is_blank(value: Any) -> bool:
    """True for None and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_decimal(value: Any) -> Decimal | None:
    """Parse a numeric field value.

    Accepts numbers and strings such as ``"$1,234.50"`` or ``"12.5%"``.

    Returns:
        The value as a finite Decimal, or None when it is not numeric.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip().translate(_NUMERIC_NOISE)
    else:
        return None
    if not text:
        return None
    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def parse_us_date(value: Any) -> date | None:
    """Parse an MM/DD/YYYY date, returning None when malformed or not a real day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if len(text) != 10 or text[2] != "/" or text[5] != "/":
        return None
    try:
        return datetime.strptime(text, "%m/%d/%Y").date()
    except ValueError:
        return None
