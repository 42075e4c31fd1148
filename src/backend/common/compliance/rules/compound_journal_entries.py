from __future__ import annotations

from typing import Any

from ..config import CompoundJournalEntriesRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldSpec
from ..registry import register_rule
from ..rule import Rule
from . import labels


class CompoundJournalSummary(SummaryEntry):
    journal_entry_number: str
    line_count: int
    distinct_gl_codes: int


@register_rule
class COMPOUND_JOURNAL_ENTRIES(Rule):
    rule_id = "compound_journal_entries"
    name = "Compound Journal Entries"
    description = "Identifies complex journal entries with multiple line items (more than {threshold} items)"
    category = Category.MANAGEMENT_OVERRIDE
    config_model = CompoundJournalEntriesRuleConfig
    required_templates = (TemplateName.GENERAL_LEDGER,)
    fields = (
        FieldSpec(labels.JOURNAL_ENTRY_NUMBER),
        FieldSpec(labels.GL_CODE),
    )

    def evaluate(self, data: Any, cfg: CompoundJournalEntriesRuleConfig) -> RuleResult:
        decoded = self.decode(data, cfg)
        groups = group_rows(decoded.rows, lambda r: r[labels.JOURNAL_ENTRY_NUMBER])

        findings = FindingSet(self.rule_id)
        for number, group in groups.items():
            # Every line counts, not just distinct GL codes.
            if group.count <= cfg.threshold:
                continue
            codes = {r[labels.GL_CODE] for r in group.rows if r[labels.GL_CODE]}
            findings.add(
                CompoundJournalSummary(
                    journal_entry_number=number,
                    line_count=group.count,
                    distinct_gl_codes=len(codes),
                ),
                group.rows,
            )

        findings.sort(key=lambda e: (-e.line_count, e.journal_entry_number))
        return findings.to_result(decoded.errors)
