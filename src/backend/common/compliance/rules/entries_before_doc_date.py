from __future__ import annotations

from datetime import datetime
from typing import Any

from ..config import EntriesBeforeDocDateRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec
from ..predicates import is_before
from ..registry import register_rule
from ..rule import Rule
from . import labels


class EntryBeforeDocumentSummary(SummaryEntry):
    journal_entry_number: str
    entry_date: datetime
    document_date: datetime
    line_count: int


@register_rule
class ENTRIES_BEFORE_DOC_DATE(Rule):
    """Journal lines posted before the date of their supporting document.

    One summary entry per journal, reporting its earliest offending line.
    Lines without a document date are not comparable and are skipped quietly.
    """

    rule_id = "entries_before_doc_date"
    name = "Entries Before Document Date"
    description = "Identifies entries recorded before their document date"
    category = Category.MANAGEMENT_OVERRIDE
    config_model = EntriesBeforeDocDateRuleConfig
    required_templates = (TemplateName.GENERAL_LEDGER,)
    fields = (
        FieldSpec(labels.JOURNAL_ENTRY_NUMBER),
        FieldSpec(labels.ENTRY_DATE, FieldKind.DATE),
        FieldSpec(labels.DOCUMENT_DATE, FieldKind.DATE, required=False),
    )

    def evaluate(self, data: Any, cfg: EntriesBeforeDocDateRuleConfig) -> RuleResult:
        decoded = self.decode(data, cfg)

        violations = [
            row
            for row in decoded.rows
            if row[labels.JOURNAL_ENTRY_NUMBER] and is_before(row[labels.ENTRY_DATE], row[labels.DOCUMENT_DATE])
        ]
        groups = group_rows(violations, lambda r: r[labels.JOURNAL_ENTRY_NUMBER])

        findings = FindingSet(self.rule_id)
        for number, group in groups.items():
            earliest = min(group.rows, key=lambda r: r[labels.ENTRY_DATE])
            findings.add(
                EntryBeforeDocumentSummary(
                    journal_entry_number=number,
                    entry_date=earliest[labels.ENTRY_DATE],
                    document_date=earliest[labels.DOCUMENT_DATE],
                    line_count=group.count,
                ),
                group.rows,
            )

        findings.sort(key=lambda e: (e.entry_date, e.journal_entry_number))
        return findings.to_result(decoded.errors)
