from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, Hashable, Iterable, Iterator, Optional, Sequence, TypeVar

from .normalize import Row

K = TypeVar("K", bound=Hashable)
J = TypeVar("J", bound=Hashable)
T = TypeVar("T")


@dataclass
class Group:
    """Rows folded under one key, with running aggregates."""

    rows: list[Row] = field(default_factory=list)
    total: Decimal = Decimal("0")
    amount_count: int = 0
    minimum: Optional[Decimal] = None
    maximum: Optional[Decimal] = None
    latest: Optional[Row] = None
    latest_at: Optional[datetime] = None

    @property
    def count(self) -> int:
        return len(self.rows)

    @property
    def first(self) -> Row:
        return self.rows[0]

    @property
    def row_numbers(self) -> list[int]:
        return [row.index for row in self.rows]

    def add(self, row: Row, amount: Optional[Decimal] = None, when: Optional[datetime] = None) -> None:
        self.rows.append(row)
        if amount is not None:
            self.total += amount
            self.amount_count += 1
            self.minimum = amount if self.minimum is None else min(self.minimum, amount)
            self.maximum = amount if self.maximum is None else max(self.maximum, amount)
        if when is not None and (self.latest_at is None or when > self.latest_at):
            self.latest = row
            self.latest_at = when

    def mean(self) -> Optional[Decimal]:
        if not self.amount_count:
            return None
        return self.total / Decimal(self.amount_count)


KeyFn = Callable[[Row], Optional[K]]
AmountFn = Callable[[Row], Optional[Decimal]]
WhenFn = Callable[[Row], Optional[datetime]]


def _fold(group: Group, row: Row, amount: Optional[AmountFn], when: Optional[WhenFn]) -> None:
    group.add(
        row,
        amount(row) if amount is not None else None,
        when(row) if when is not None else None,
    )


def group_rows(
    rows: Iterable[Row],
    key: KeyFn[K],
    *,
    amount: Optional[AmountFn] = None,
    when: Optional[WhenFn] = None,
) -> dict[K, Group]:
    """Group rows by `key`; rows whose key is None (or empty) are skipped."""
    groups: dict[K, Group] = {}
    for row in rows:
        k = key(row)
        if k is None or k == "":
            continue
        _fold(groups.setdefault(k, Group()), row, amount, when)
    return groups


def group_rows_nested(
    rows: Iterable[Row],
    outer: KeyFn[K],
    inner: KeyFn[J],
    *,
    amount: Optional[AmountFn] = None,
    when: Optional[WhenFn] = None,
) -> dict[K, dict[J, Group]]:
    """Two-level grouping: outer key -> inner key -> rows."""
    groups: dict[K, dict[J, Group]] = {}
    for row in rows:
        o = outer(row)
        i = inner(row)
        if o is None or o == "" or i is None or i == "":
            continue
        _fold(groups.setdefault(o, {}).setdefault(i, Group()), row, amount, when)
    return groups


def sorted_periods(groups: dict[K, T]) -> list[tuple[K, T]]:
    return sorted(groups.items(), key=lambda item: item[0])


def pairwise(items: Sequence[T]) -> Iterator[tuple[T, T]]:
    for idx in range(1, len(items)):
        yield items[idx - 1], items[idx]


def flatten(groups: Iterable[Group]) -> list[Row]:
    out: list[Row] = []
    for group in groups:
        out.extend(group.rows)
    return out
