"""Decode raw dataset rows into typed values once, at the rule boundary.

Rows stay open label->value mappings on the way in; each rule declares the
fields it reads as `FieldSpec`s and gets back `Row`s whose `values` are
already coerced (dates to aware datetimes, with date-only cells placed in
the rule timezone, amounts to Decimal, codes and names to stripped
strings). Problems are collected as
`ValidationIssue`s and never stop decoding of the remaining rows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterable, Mapping, Optional
from zoneinfo import ZoneInfo

from .models import Record, ValidationIssue

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d/%m/%Y", "%Y/%m/%d", "%d-%b-%Y", "%d %b %Y")
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class FieldKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind = FieldKind.STRING
    required: bool = True


@dataclass(frozen=True)
class Row:
    index: int
    raw: Record
    values: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        return self.values.get(name)

    def get(self, name: str, default: Any = None) -> Any:
        value = self.values.get(name)
        return default if value is None else value


@dataclass
class DecodedDataset:
    rows: list[Row] = field(default_factory=list)
    errors: list[ValidationIssue] = field(default_factory=list)


def is_dataset(data: Any) -> bool:
    return isinstance(data, (list, tuple))


def dataset_error_message(label: str | None = None) -> str:
    if label:
        return f"{label} data must be an array"
    return "Data must be an array"


def ensure_dataset(data: Any, label: str | None = None) -> ValidationIssue | None:
    if is_dataset(data):
        return None
    return ValidationIssue(message=dataset_error_message(label))


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def parse_date(value: Any, tz: str | None = None) -> datetime | None:
    """Parse a date cell into an aware datetime.

    Values carrying an offset (and epoch milliseconds) are instants and come
    back in UTC. Values without one (`date` objects, date-only strings, naive
    datetimes) are wall-clock readings and are placed in `tz`, UTC when unset,
    so their calendar day survives conversion to that zone.
    """
    if value is None or isinstance(value, bool):
        return None
    zone = ZoneInfo(tz) if tz else timezone.utc
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=zone)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=zone)
    if isinstance(value, (int, float)):
        # Numeric dates are epoch milliseconds.
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        iso = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s
        try:
            return parse_date(datetime.fromisoformat(iso), tz)
        except ValueError:
            pass
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(s, fmt).replace(tzinfo=zone)
            except ValueError:
                continue
    return None


def parse_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return Decimal(str(value))
    if isinstance(value, str):
        s = value.strip().replace(",", "")
        if not s:
            return None
        try:
            parsed = Decimal(s)
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    return None


def parse_text(value: Any) -> str | None:
    if is_missing(value):
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def date_sort_key(value: datetime | None) -> datetime:
    # Undated rows sort first.
    return _EARLIEST if value is None else value


def strip_leading_zeros(code: Optional[str]) -> str:
    """Identifier comparison key: "007" and "7" are the same code."""
    if not code:
        return ""
    stripped = code.lstrip("0")
    return stripped or "0"


def decode_row(
    index: int,
    record: Record,
    fields: Iterable[FieldSpec],
    errors: list[ValidationIssue],
    *,
    label: str | None = None,
    tz: str | None = None,
) -> Row:
    suffix = f" in {label}" if label else ""
    values: dict[str, Any] = {}
    for column in fields:
        raw = record.get(column.name)
        if is_missing(raw):
            values[column.name] = None
            if column.required:
                errors.append(_issue(f"{column.name} is missing{suffix}", record))
            continue

        if column.kind is FieldKind.DATE:
            parsed: Any = parse_date(raw, tz)
            if parsed is None:
                errors.append(_issue(f"{column.name} is invalid{suffix}", record))
        elif column.kind is FieldKind.NUMBER:
            parsed = parse_decimal(raw)
            if parsed is None:
                errors.append(_issue(f"{column.name} must be a number{suffix}", record))
        else:
            parsed = parse_text(raw)
        values[column.name] = parsed
    return Row(index=index, raw=record, values=values)


def decode_rows(
    data: Iterable[Any],
    fields: Iterable[FieldSpec],
    *,
    label: str | None = None,
    tz: str | None = None,
) -> DecodedDataset:
    fields = tuple(fields)
    out = DecodedDataset()
    for index, record in enumerate(data):
        if not isinstance(record, Mapping):
            out.errors.append(ValidationIssue(message=f"Row {index + 1} is not a record"))
            continue
        out.rows.append(decode_row(index, record, fields, out.errors, label=label, tz=tz))
    return out


def _issue(message: str, record: Record) -> ValidationIssue:
    return ValidationIssue(message=message, row=dict(record))
