"""Conversions between HH:MM strings, minute offsets and calendar dates."""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import List

from .errors import FormatError

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def time_to_minutes(value: str) -> int:
    match = _TIME_RE.match(value or "")
    if not match:
        raise FormatError(f"Invalid time '{value}', expected HH:MM.")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise FormatError(f"Invalid time '{value}', expected HH:MM.")
    return hours * 60 + minutes


def minutes_to_time(total_minutes: int) -> str:
    """Format minutes since midnight as HH:MM. Callers clamp to [0, 1440)."""

    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def parse_iso_date(value: str) -> date:
    if not _DATE_RE.match(value or ""):
        raise FormatError(f"Invalid date '{value}', expected YYYY-MM-DD.")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as exc:
        raise FormatError(f"Invalid date '{value}', expected YYYY-MM-DD.") from exc


def to_iso_date(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def format_display_date(day: date) -> str:
    return f"{day.day:02d}/{day.month:02d}/{day.year}"


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""

    return day - timedelta(days=day.weekday())


def week_dates(day: date) -> List[str]:
    monday = week_start(day)
    return [to_iso_date(monday + timedelta(days=offset)) for offset in range(7)]


def week_label(day: date) -> str:
    monday = week_start(day)
    sunday = monday + timedelta(days=6)
    return f"{format_display_date(monday)} – {format_display_date(sunday)}"
