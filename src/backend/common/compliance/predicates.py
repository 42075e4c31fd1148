"""Pure anomaly predicates shared by the rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Generic, Iterable, Optional, Pattern, Sequence, TypeVar

from .periods import local_date

T = TypeVar("T")

HUNDRED = Decimal("100")
CENT = Decimal("0.01")
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_TRAILING_NUMBER = re.compile(r"(\d+)$")
_WORD = re.compile(r"\w+")


# Deviation


def percentage_change(current: Decimal, baseline: Decimal) -> Optional[Decimal]:
    """((current - baseline) / baseline) * 100, or None for a zero baseline."""
    if baseline == 0:
        return None
    return (current - baseline) / baseline * HUNDRED


def exceeds_threshold(pct: Optional[Decimal], threshold: Decimal) -> bool:
    # Strictly greater: a deviation equal to the threshold is not flagged.
    if pct is None:
        return False
    return abs(pct) > threshold


def round2(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def mean(values: Iterable[Decimal]) -> Optional[Decimal]:
    items = list(values)
    if not items:
        return None
    return sum(items, Decimal("0")) / Decimal(len(items))


# Digit patterns


def plain_digits(amount: Decimal) -> str:
    return format(abs(amount).normalize(), "f")


def trailing_digits(amount: Optional[Decimal], digit_count: int) -> Optional[str]:
    if digit_count < 1:
        raise ValueError("digit_count must be at least 1")
    if amount is None:
        return None
    text = plain_digits(amount)
    if len(text) < digit_count:
        return None
    return text[-digit_count:]


def is_round_number(amount: Optional[Decimal], digit_count: int) -> bool:
    tail = trailing_digits(amount, digit_count)
    return tail is not None and tail == "0" * digit_count


def repeating_digits(amount: Optional[Decimal], digit_count: int) -> Optional[str]:
    """The trailing run when the last `digit_count` characters are one repeated digit."""
    tail = trailing_digits(amount, digit_count)
    if tail is None or not tail.isdigit() or len(set(tail)) != 1:
        return None
    return tail


# Sequences


@dataclass(frozen=True)
class SequenceGap(Generic[T]):
    # Position of `after` within the ordered sequence.
    position: int
    before: str
    after: str
    before_item: T
    after_item: T
    missing_count: int
    missing: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Numbered(Generic[T]):
    identifier: str
    stem: str
    digits: str
    value: int
    item: T


def _numbered(identifier: str, prefix: str, item: T) -> Optional[Numbered[T]]:
    if prefix and not identifier.startswith(prefix):
        return None
    remainder = identifier[len(prefix):]
    match = _TRAILING_NUMBER.search(remainder)
    if not match:
        return None
    digits = match.group(1)
    return Numbered(identifier, remainder[: match.start()], digits, int(digits), item)


def numbered_identifiers(items: Iterable[tuple[str, T]], prefix: str = "") -> list[Numbered[T]]:
    """Identifiers carrying the prefix and a trailing number, ordered by that number."""
    numbered = [n for n in (_numbered(ident, prefix, item) for ident, item in items) if n is not None]
    numbered.sort(key=lambda n: n.value)
    return numbered


def sequence_gaps(
    items: Iterable[tuple[str, T]],
    prefix: str = "",
    *,
    max_listed: Optional[int] = None,
) -> list[SequenceGap[T]]:
    """Report every integer gap between consecutive numeric suffixes.

    Identifiers without the prefix, or without a trailing number, are ignored.
    Missing identifiers are rebuilt with the earlier identifier's stem and
    zero-padding.
    """
    numbered = numbered_identifiers(items, prefix)

    gaps: list[SequenceGap[T]] = []
    for idx in range(1, len(numbered)):
        prev, cur = numbered[idx - 1], numbered[idx]
        missing_count = cur.value - prev.value - 1
        if missing_count < 1:
            continue
        stop = cur.value
        if max_listed is not None:
            stop = min(stop, prev.value + 1 + max_listed)
        width = len(prev.digits)
        missing = [f"{prefix}{prev.stem}{str(n).zfill(width)}" for n in range(prev.value + 1, stop)]
        gaps.append(
            SequenceGap(
                position=idx,
                before=prev.identifier,
                after=cur.identifier,
                before_item=prev.item,
                after_item=cur.item,
                missing_count=missing_count,
                missing=missing,
            )
        )
    return gaps


# Keywords


def compile_keyword(keyword: str, case_sensitive: bool = False) -> Optional[Pattern[str]]:
    words = _WORD.findall(keyword)
    if not words:
        return None
    body = r"[\W_]+".join(re.escape(word) for word in words)
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(rf"(?<![^\W_]){body}(?![^\W_])", flags)


def match_keywords(text: Optional[str], keywords: Sequence[str], case_sensitive: bool = False) -> list[str]:
    if not text:
        return []
    matched: list[str] = []
    for keyword in keywords:
        pattern = compile_keyword(keyword, case_sensitive)
        if pattern is not None and pattern.search(text) and keyword not in matched:
            matched.append(keyword)
    return matched


# Calendar


def weekday_index(value: datetime, tz: str) -> int:
    """Day of week in `tz`, 0 = Sunday."""
    return (local_date(value, tz).weekday() + 1) % 7


def is_holiday(
    value: datetime,
    tz: str,
    holiday_days: Iterable[int] = (),
    holiday_dates: Iterable[date | str] = (),
) -> bool:
    if weekday_index(value, tz) in set(holiday_days):
        return True
    dates = {d if isinstance(d, date) else date.fromisoformat(d) for d in holiday_dates}
    return local_date(value, tz) in dates


def is_before(earlier: Optional[datetime], later: Optional[datetime]) -> bool:
    if earlier is None or later is None:
        return False
    return earlier < later


def ageing_days(cut_off: date, due: datetime, tz: str) -> int:
    return (cut_off - local_date(due, tz)).days
