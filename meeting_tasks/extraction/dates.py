"""Resolve relative and named date expressions to ISO calendar dates."""

from __future__ import annotations

import re
from datetime import date, timedelta

_MONTHS: dict[str, int] = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

_WEEKDAYS: dict[str, int] = {
    "monday": 0, "tuesday": 1, "wednesday": 2, "thursday": 3,
    "friday": 4, "saturday": 5, "sunday": 6,
}

_FRIDAY = 4

_MONTH_DAY_RE = re.compile(
    r"\b(january|february|march|april|may|june|july|august|september|october|november|december"
    r"|jan|feb|mar|apr|jun|jul|aug|sept|sep|oct|nov|dec)\.?\s+(\d{1,2})(?:st|nd|rd|th)?\b",
    re.IGNORECASE,
)
_TOMORROW_RE = re.compile(r"\btomorrow\b", re.IGNORECASE)
_TODAY_RE = re.compile(
    r"\b(?:today|tonight|eod|end\s+of\s+(?:the\s+)?day|before\s+evening|after\s+(?:our\s+|the\s+)?meeting)\b"
    r"|\bby\s+\d{1,2}\s*(?:am|pm)\b",
    re.IGNORECASE,
)
_END_OF_WEEK_RE = re.compile(r"\b(?:end\s+of\s+(?:the\s+)?week|eow)\b", re.IGNORECASE)
_WEEKDAY_RE = re.compile(
    r"\b(?:by|on|before|until|till|next|this|due)\s+"
    r"(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
    re.IGNORECASE,
)
_NUMERIC_RE = re.compile(r"(?<![\d/.-])(\d{1,2})[/-](\d{1,2})(?![\d/.-])")


def _next_weekday(d: date, target_weekday: int) -> date:
    """Next occurrence of *target_weekday* strictly after *d* (same day rolls a week)."""
    days_ahead = (target_weekday - d.weekday()) % 7
    if days_ahead == 0:
        days_ahead = 7
    return d + timedelta(days=days_ahead)


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def resolve_due_date(text: str, today: date | None = None) -> str | None:
    """Resolve the first recognised date expression in *text*.

    Precedence: named month + day, ``tomorrow``, today/EOD, end of week,
    a named weekday, then a numeric ``M/D`` pattern.  Anything else is
    "unknown" and yields ``None``.

    Args:
        text: Free text that may contain a temporal expression.
        today: Reference date (defaults to the current local date).

    Returns:
        An ISO ``YYYY-MM-DD`` string, or ``None``.
    """
    if not text:
        return None
    ref = today or date.today()

    for match in _MONTH_DAY_RE.finditer(text):
        resolved = _safe_date(ref.year, _MONTHS[match.group(1).lower()], int(match.group(2)))
        if resolved:
            return resolved.isoformat()

    if _TOMORROW_RE.search(text):
        return (ref + timedelta(days=1)).isoformat()

    if _TODAY_RE.search(text):
        return ref.isoformat()

    if _END_OF_WEEK_RE.search(text):
        # On a Friday "end of week" means next Friday, matching the weekday rule.
        return _next_weekday(ref, _FRIDAY).isoformat()

    weekday = _WEEKDAY_RE.search(text)
    if weekday:
        return _next_weekday(ref, _WEEKDAYS[weekday.group(1).lower()]).isoformat()

    for match in _NUMERIC_RE.finditer(text):
        first, second = int(match.group(1)), int(match.group(2))
        resolved = _safe_date(ref.year, first, second) or _safe_date(ref.year, second, first)
        if resolved:
            return resolved.isoformat()

    return None


def is_iso_date(value: str | None) -> bool:
    """True when *value* is a ``YYYY-MM-DD`` string naming a real date."""
    if not value or not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True
