from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from zoneinfo import ZoneInfo

from ..config import LongOutstandingCustomersRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec, strip_leading_zeros
from ..predicates import ageing_days
from ..registry import register_rule
from ..rule import Rule
from . import labels


class LongOutstandingSummary(SummaryEntry):
    customer_code: str
    customer_name: Optional[str] = None
    cut_off_date: date
    outstanding_amount: Decimal
    max_ageing_days: int
    invoice_count: int


@register_rule
class LONG_OUTSTANDING_CUSTOMERS(Rule):
    rule_id = "long_outstanding_customers"
    name = "Long-outstanding Customers with Sales"
    description = (
        "Identifies customers with sales transactions who have balances outstanding for more than "
        "{cut_off_days} days at the cut off date"
    )
    category = Category.CUSTOMERS
    config_model = LongOutstandingCustomersRuleConfig
    required_templates = (TemplateName.CUSTOMER_LISTING,)
    fields = (
        FieldSpec(labels.CUSTOMER_CODE),
        FieldSpec(labels.CUSTOMER_NAME),
        FieldSpec(labels.OUTSTANDING_VALUE, FieldKind.NUMBER),
        FieldSpec(labels.DUE_DATE, FieldKind.DATE),
    )

    def evaluate(self, data: Any, cfg: LongOutstandingCustomersRuleConfig) -> RuleResult:
        tz = self.timezone(cfg)
        cut_off = cfg.cut_off_date or datetime.now(ZoneInfo(tz)).date()
        decoded = self.decode(data, cfg)

        ageing = {}
        for row in decoded.rows:
            if row[labels.DUE_DATE] is None or row[labels.OUTSTANDING_VALUE] is None:
                continue
            days = ageing_days(cut_off, row[labels.DUE_DATE], tz)
            if days > cfg.cut_off_days:
                ageing[row.index] = days

        overdue = [row for row in decoded.rows if row.index in ageing]
        groups = group_rows(
            overdue,
            lambda r: strip_leading_zeros(r[labels.CUSTOMER_CODE]),
            amount=lambda r: r[labels.OUTSTANDING_VALUE],
        )

        findings = FindingSet(self.rule_id)
        for group in groups.values():
            findings.add(
                LongOutstandingSummary(
                    customer_code=group.first[labels.CUSTOMER_CODE],
                    customer_name=group.first[labels.CUSTOMER_NAME],
                    cut_off_date=cut_off,
                    outstanding_amount=group.total,
                    max_ageing_days=max(ageing[r.index] for r in group.rows),
                    invoice_count=group.count,
                ),
                group.rows,
            )

        findings.sort(key=lambda e: (-e.max_ageing_days, e.customer_code))
        return findings.to_result(decoded.errors)
