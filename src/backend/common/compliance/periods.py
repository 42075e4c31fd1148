"""Period bucketing.

Keys are year-first and zero-padded so plain string ordering is chronological.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo

from .normalize import parse_date

_MONTH_NAMES = {
    name: idx
    for idx, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}
_YEAR_MONTH = re.compile(r"^(\d{4})[-/.](\d{1,2})$")
_MONTH_YEAR = re.compile(r"^(\d{1,2})[-/.](\d{4})$")
_NAMED_MONTH_YEAR = re.compile(r"^([A-Za-z]{3,9})[\s,\-']+(\d{4})$")


class PeriodType(str, Enum):
    MONTH = "month"
    WEEK = "week"


def local_date(value: datetime, tz: str) -> date:
    return value.astimezone(ZoneInfo(tz)).date()


def month_key(value: datetime, tz: str) -> str:
    d = local_date(value, tz)
    return f"{d.year:04d}-{d.month:02d}"


def week_key(value: datetime, tz: str) -> str:
    iso = local_date(value, tz).isocalendar()
    return f"{iso[0]:04d}-W{iso[1]:02d}"


def period_key(value: datetime, period_type: PeriodType, tz: str) -> str:
    if period_type is PeriodType.WEEK:
        return week_key(value, tz)
    return month_key(value, tz)


def pay_period_key(value: Any, tz: str) -> str | None:
    """Normalize a pay period ("Jan 2024", "01/2024", "2024-01", a date) to "YYYY-MM".

    Strings that do not look like a month are returned stripped, unchanged.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return month_key(parse_date(value, tz), tz)
    text = str(value).strip()
    if not text:
        return None

    match = _YEAR_MONTH.match(text)
    if match and 1 <= int(match.group(2)) <= 12:
        return f"{int(match.group(1)):04d}-{int(match.group(2)):02d}"
    match = _MONTH_YEAR.match(text)
    if match and 1 <= int(match.group(1)) <= 12:
        return f"{int(match.group(2)):04d}-{int(match.group(1)):02d}"
    match = _NAMED_MONTH_YEAR.match(text)
    if match:
        month = _MONTH_NAMES.get(match.group(1)[:3].lower())
        if month:
            return f"{int(match.group(2)):04d}-{month:02d}"

    parsed = parse_date(text, tz)
    if parsed is not None:
        return month_key(parsed, tz)
    return text
