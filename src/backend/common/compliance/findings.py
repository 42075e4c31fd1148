from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from .models import RuleResult, SummaryEntry, ValidationIssue
from .normalize import Row


@dataclass
class FindingSet:
    """Pairs each summary entry with the rows backing it.

    `results` is always built by flattening the backing rows in summary
    order, so a summary entry can never be orphaned from its records.
    """

    rule_id: str
    _items: list[tuple[SummaryEntry, list[Row]]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._items)

    def add(self, entry: SummaryEntry, rows: Iterable[Row]) -> None:
        backing = list(rows)
        if not backing:
            raise ValueError(f"{self.rule_id}: summary entry has no backing records")
        entry.row_numbers = [row.index for row in backing]
        self._items.append((entry, backing))

    def sort(self, key: Callable[[Any], Any], *, reverse: bool = False) -> None:
        self._items.sort(key=lambda item: key(item[0]), reverse=reverse)

    def to_result(self, errors: Optional[list[ValidationIssue]] = None) -> RuleResult:
        results: list[dict[str, Any]] = []
        for _, rows in self._items:
            results.extend(dict(row.raw) for row in rows)
        return RuleResult(
            rule_id=self.rule_id,
            results=results,
            summary=[entry for entry, _ in self._items],
            errors=list(errors or []),
        )
