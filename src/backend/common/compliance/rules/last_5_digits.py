from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ..config import LastDigitsRuleConfig
from ..findings import FindingSet
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec
from ..predicates import is_round_number
from ..registry import register_rule
from ..rule import Rule
from . import labels


class RoundNumberSummary(SummaryEntry):
    journal_entry_number: Optional[str] = None
    debit_amount: Optional[Decimal] = None
    credit_amount: Optional[Decimal] = None
    is_debit_round_number: bool = False
    is_credit_round_number: bool = False


@register_rule
class LAST_5_DIGITS(Rule):
    """Round amounts: the last `digit_count` digits of a debit or credit are all zero."""

    rule_id = "last_5_digits"
    name = "Last 5 Digits Analysis"
    description = (
        "Analyzes the last {digit_count} digits of transaction amounts to detect potential "
        "anomalies or manual manipulation"
    )
    category = Category.MANAGEMENT_OVERRIDE
    config_model = LastDigitsRuleConfig
    required_templates = (TemplateName.GENERAL_LEDGER,)
    fields = (
        FieldSpec(labels.JOURNAL_ENTRY_NUMBER),
        FieldSpec(labels.DEBIT, FieldKind.NUMBER, required=False),
        FieldSpec(labels.CREDIT, FieldKind.NUMBER, required=False),
    )

    def evaluate(self, data: Any, cfg: LastDigitsRuleConfig) -> RuleResult:
        decoded = self.decode(data, cfg)
        findings = FindingSet(self.rule_id)

        for row in decoded.rows:
            debit_round = is_round_number(row[labels.DEBIT], cfg.digit_count)
            credit_round = is_round_number(row[labels.CREDIT], cfg.digit_count)
            if not (debit_round or credit_round):
                continue
            findings.add(
                RoundNumberSummary(
                    journal_entry_number=row[labels.JOURNAL_ENTRY_NUMBER],
                    debit_amount=row[labels.DEBIT],
                    credit_amount=row[labels.CREDIT],
                    is_debit_round_number=debit_round,
                    is_credit_round_number=credit_round,
                ),
                [row],
            )

        findings.sort(key=lambda e: e.journal_entry_number or "")
        return findings.to_result(decoded.errors)
