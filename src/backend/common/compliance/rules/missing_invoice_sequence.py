from __future__ import annotations

from typing import Any, List

from ..config import MissingInvoiceSequenceRuleConfig
from ..findings import FindingSet
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec
from ..predicates import numbered_identifiers, sequence_gaps
from ..registry import register_rule
from ..rule import Rule
from . import labels

# Invoices listed for context: the one after the gap and up to four before it.
_RECENT = 5


class MissingSequenceSummary(SummaryEntry):
    before: str
    after: str
    missing_range: List[str]
    missing_count: int
    recent_invoices: List[str]


@register_rule
class MISSING_INVOICE_SEQUENCE(Rule):
    rule_id = "missing_invoice_sequence"
    name = "Missing Invoice Sequence"
    description = "Identifies gaps in invoice number sequences that could indicate missing transactions"
    category = Category.REVENUE
    config_model = MissingInvoiceSequenceRuleConfig
    required_templates = (TemplateName.SALES_REGISTER,)
    fields = (
        FieldSpec(labels.INVOICE_NUMBER),
        FieldSpec(labels.INVOICE_DATE, FieldKind.DATE),
        FieldSpec(labels.TAXABLE_VALUE, FieldKind.NUMBER),
    )

    def evaluate(self, data: Any, cfg: MissingInvoiceSequenceRuleConfig) -> RuleResult:
        decoded = self.decode(data, cfg)
        items = [(row[labels.INVOICE_NUMBER], row) for row in decoded.rows if row[labels.INVOICE_NUMBER]]
        ordered = numbered_identifiers(items, cfg.prefix)

        findings = FindingSet(self.rule_id)
        for gap in sequence_gaps(items, cfg.prefix, max_listed=cfg.max_missing_listed):
            recent = ordered[max(0, gap.position - _RECENT + 1) : gap.position + 1]
            findings.add(
                MissingSequenceSummary(
                    before=gap.before,
                    after=gap.after,
                    missing_range=gap.missing,
                    missing_count=gap.missing_count,
                    recent_invoices=[n.identifier for n in recent],
                ),
                [gap.before_item, gap.after_item],
            )

        return findings.to_result(decoded.errors)
