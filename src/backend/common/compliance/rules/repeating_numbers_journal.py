from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel

from ..config import RepeatingNumbersJournalRuleConfig
from ..findings import FindingSet
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec, date_sort_key
from ..predicates import repeating_digits
from ..registry import register_rule
from ..rule import Rule
from . import labels


class RepeatingDigits(BaseModel):
    debit: Optional[str] = None
    credit: Optional[str] = None


class RepeatingNumberSummary(SummaryEntry):
    journal_entry_number: Optional[str] = None
    entry_date: Optional[datetime] = None
    user_prepared: Optional[str] = None
    debit_amount: Optional[Decimal] = None
    credit_amount: Optional[Decimal] = None
    repeating_digits: RepeatingDigits


@register_rule
class REPEATING_NUMBERS_JOURNAL(Rule):
    rule_id = "repeating_numbers_journal"
    name = "Repeating Numbers in Journal"
    description = (
        "Identifies journal entries with suspicious repeating number patterns in amounts "
        "(at least {digit_count} digits)"
    )
    category = Category.MANAGEMENT_OVERRIDE
    config_model = RepeatingNumbersJournalRuleConfig
    required_templates = (TemplateName.GENERAL_LEDGER,)
    fields = (
        FieldSpec(labels.JOURNAL_ENTRY_NUMBER),
        FieldSpec(labels.ENTRY_DATE, FieldKind.DATE),
        FieldSpec(labels.DEBIT, FieldKind.NUMBER, required=False),
        FieldSpec(labels.CREDIT, FieldKind.NUMBER, required=False),
        FieldSpec(labels.USER_PREPARED, required=False),
    )

    def evaluate(self, data: Any, cfg: RepeatingNumbersJournalRuleConfig) -> RuleResult:
        decoded = self.decode(data, cfg)
        findings = FindingSet(self.rule_id)

        for row in decoded.rows:
            debit = repeating_digits(row[labels.DEBIT], cfg.digit_count)
            credit = repeating_digits(row[labels.CREDIT], cfg.digit_count)
            if debit is None and credit is None:
                continue
            findings.add(
                RepeatingNumberSummary(
                    journal_entry_number=row[labels.JOURNAL_ENTRY_NUMBER],
                    entry_date=row[labels.ENTRY_DATE],
                    user_prepared=row[labels.USER_PREPARED],
                    debit_amount=row[labels.DEBIT],
                    credit_amount=row[labels.CREDIT],
                    repeating_digits=RepeatingDigits(debit=debit, credit=credit),
                ),
                [row],
            )

        findings.sort(key=lambda e: (date_sort_key(e.entry_date), e.journal_entry_number or ""))
        return findings.to_result(decoded.errors)
