from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel

from ..config import DuplicateInvoicesRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec, strip_leading_zeros
from ..periods import local_date
from ..registry import register_rule
from ..rule import Rule
from . import labels


class InvoiceOccurrence(BaseModel):
    invoice_date: Optional[date] = None
    taxable_value: Optional[Decimal] = None
    party: str = "Unknown"


class DuplicateInvoiceSummary(SummaryEntry):
    invoice_number: str
    count: int
    dates: List[date]
    details: List[InvoiceOccurrence]


@register_rule
class DUPLICATE_INVOICES(Rule):
    """The same invoice number (ignoring leading zeros) issued on more than one date."""

    rule_id = "duplicate_invoices"
    name = "Duplicate Invoice Numbers"
    description = (
        "Identifies journal entries with duplicate invoice numbers that may indicate double-posting or fraud"
    )
    category = Category.REVENUE
    config_model = DuplicateInvoicesRuleConfig
    required_templates = (TemplateName.SALES_REGISTER,)
    fields = (
        FieldSpec(labels.INVOICE_NUMBER),
        FieldSpec(labels.INVOICE_DATE, FieldKind.DATE),
        FieldSpec(labels.TAXABLE_VALUE, FieldKind.NUMBER),
        FieldSpec(labels.CUSTOMER_CODE, required=False),
    )

    def evaluate(self, data: Any, cfg: DuplicateInvoicesRuleConfig) -> RuleResult:
        tz = self.timezone(cfg)
        decoded = self.decode(data, cfg)
        groups = group_rows(decoded.rows, lambda r: strip_leading_zeros(r[labels.INVOICE_NUMBER]))

        findings = FindingSet(self.rule_id)
        for number, group in groups.items():
            if group.count <= 1:
                continue
            dates: List[date] = []
            for row in group.rows:
                when = row[labels.INVOICE_DATE]
                if when is not None and local_date(when, tz) not in dates:
                    dates.append(local_date(when, tz))
            if len(dates) <= 1:
                continue
            findings.add(
                DuplicateInvoiceSummary(
                    invoice_number=number,
                    count=group.count,
                    dates=dates,
                    details=[
                        InvoiceOccurrence(
                            invoice_date=local_date(r[labels.INVOICE_DATE], tz) if r[labels.INVOICE_DATE] else None,
                            taxable_value=r[labels.TAXABLE_VALUE],
                            party=r.get(labels.CUSTOMER_CODE, "Unknown"),
                        )
                        for r in group.rows
                    ],
                ),
                group.rows,
            )

        findings.sort(key=lambda e: e.invoice_number)
        return findings.to_result(decoded.errors)
