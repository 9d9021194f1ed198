"""Calendar helpers for day/month/year clusters."""

from __future__ import annotations

import re
from datetime import date

_DIGITS_RE = re.compile(r"^[0-9]+$")
_EMPTY_PARTS = {"day": "", "month": "", "year": ""}
# Years stop at 9999, so no calendar part needs more significant digits.
_MAX_PART_DIGITS = 4


def parse_date_parts(day: str, month: str, year: str) -> date | None:
    """
    Build a date from three text inputs.

    Each part must be made of digits only; anything else, or a combination
    that is not on the calendar (31 April, 29 February 2023), gives None.
    """
    parts = (day.strip(), month.strip(), year.strip())
    if not all(_DIGITS_RE.match(p) for p in parts):
        return None
    if any(len(p.lstrip("0")) > _MAX_PART_DIGITS for p in parts):
        return None
    d, m, y = (int(p) for p in parts)
    try:
        return date(y, m, d)
    except (ValueError, OverflowError):
        return None


def is_real_date(day: str, month: str, year: str) -> bool:
    return parse_date_parts(day, month, year) is not None


def is_future_date(day: str, month: str, year: str, today: date) -> bool:
    """True when the date is after `today`. Dates that are not real are never "future"."""
    parsed = parse_date_parts(day, month, year)
    if parsed is None:
        return False
    return parsed > today


def split_iso_date(value: str | None) -> dict[str, str]:
    """
    Split a stored ISO date into un-padded form values.

    "1985-03-07" -> {"day": "7", "month": "3", "year": "1985"}

    This is the representation the baseline snapshot uses, so change detection
    compares like with like. Empty or unparseable input gives empty strings.
    """
    if not value or not str(value).strip():
        return dict(_EMPTY_PARTS)
    text = str(value).strip()[:10]
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        return dict(_EMPTY_PARTS)
    return {"day": str(parsed.day), "month": str(parsed.month), "year": str(parsed.year)}
