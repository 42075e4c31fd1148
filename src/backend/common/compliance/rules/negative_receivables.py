from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ..config import NegativeReceivablesRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec, strip_leading_zeros
from ..registry import register_rule
from ..rule import Rule
from . import labels


class NegativeReceivableSummary(SummaryEntry):
    customer_code: str
    customer_name: Optional[str] = None
    receivable_balance: Decimal


@register_rule
class NEGATIVE_RECEIVABLES(Rule):
    rule_id = "negative_receivables"
    name = "Negative Receivable Balances"
    description = "Lists customer-wise negative receivable balances"
    category = Category.CUSTOMERS
    config_model = NegativeReceivablesRuleConfig
    required_templates = (TemplateName.CUSTOMER_LISTING,)
    fields = (
        FieldSpec(labels.CUSTOMER_CODE),
        FieldSpec(labels.CUSTOMER_NAME),
        FieldSpec(labels.OUTSTANDING_VALUE, FieldKind.NUMBER),
    )

    def evaluate(self, data: Any, cfg: NegativeReceivablesRuleConfig) -> RuleResult:
        decoded = self.decode(data, cfg)
        groups = group_rows(
            (row for row in decoded.rows if row[labels.OUTSTANDING_VALUE] is not None),
            lambda r: strip_leading_zeros(r[labels.CUSTOMER_CODE]),
            amount=lambda r: r[labels.OUTSTANDING_VALUE],
        )

        findings = FindingSet(self.rule_id)
        for group in groups.values():
            if group.total >= 0:
                continue
            findings.add(
                NegativeReceivableSummary(
                    customer_code=group.first[labels.CUSTOMER_CODE],
                    customer_name=group.first[labels.CUSTOMER_NAME],
                    receivable_balance=group.total,
                ),
                group.rows,
            )

        # Most negative balance first.
        findings.sort(key=lambda e: (e.receivable_balance, e.customer_code))
        return findings.to_result(decoded.errors)
