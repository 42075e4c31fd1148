from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from .. import diagnostics
from ..config import CustomerDaysOutstandingRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec, strip_leading_zeros
from ..predicates import round2
from ..registry import register_rule
from ..rule import Rule, template_dataset
from . import labels

LISTING = TemplateName.CUSTOMER_LISTING
SALES = TemplateName.SALES_REGISTER

_LISTING_FIELDS = (
    FieldSpec(labels.CUSTOMER_CODE),
    FieldSpec(labels.CUSTOMER_NAME),
    FieldSpec(labels.OUTSTANDING_VALUE, FieldKind.NUMBER),
)
_SALES_FIELDS = (
    FieldSpec(labels.CUSTOMER_CODE),
    FieldSpec(labels.INVOICE_VALUE, FieldKind.NUMBER, required=False),
    FieldSpec(labels.TAXABLE_VALUE, FieldKind.NUMBER, required=False),
)


class DaysOutstandingSummary(SummaryEntry):
    customer_code: str
    customer_name: Optional[str] = None
    total_revenue: Decimal
    total_receivable: Decimal
    days_outstanding: Decimal


@register_rule
class CUSTOMER_DAYS_OUTSTANDING(Rule):
    """Days of sales outstanding per customer.

    Receivables come from the Customer Listing, revenue from the Sales
    Register, joined on customer code (leading zeros ignored):
    days = receivable / revenue * period_of_transaction, rounded to 2 places.
    Customers without positive revenue cannot be measured and are skipped.
    """

    rule_id = "customer_days_outstanding"
    name = "Customer-wise Days of Sale Outstanding"
    description = (
        "Calculates the number of days of sales outstanding as receivable by mapping revenue and "
        "receivables at the customer level (flagged above {cut_off_days} days)"
    )
    category = Category.CUSTOMERS
    config_model = CustomerDaysOutstandingRuleConfig
    required_templates = (LISTING, SALES)

    def evaluate(self, data: Any, cfg: CustomerDaysOutstandingRuleConfig) -> RuleResult:
        listing = self.decode(template_dataset(data, LISTING), cfg, _LISTING_FIELDS, label=LISTING.value)
        sales = self.decode(template_dataset(data, SALES), cfg, _SALES_FIELDS, label=SALES.value)

        revenue: Dict[str, Decimal] = {}
        for row in sales.rows:
            code = strip_leading_zeros(row[labels.CUSTOMER_CODE])
            if not code:
                continue
            # Invoice Value falls back to Taxable Value, then zero.
            value = row[labels.INVOICE_VALUE]
            if value is None:
                value = row.get(labels.TAXABLE_VALUE, Decimal("0"))
            revenue[code] = revenue.get(code, Decimal("0")) + value

        receivables = group_rows(
            (row for row in listing.rows if row[labels.OUTSTANDING_VALUE] is not None),
            lambda r: strip_leading_zeros(r[labels.CUSTOMER_CODE]),
            amount=lambda r: r[labels.OUTSTANDING_VALUE],
        )

        period = Decimal(cfg.period_of_transaction)
        findings = FindingSet(self.rule_id)
        for code, group in receivables.items():
            total_revenue = revenue.get(code, Decimal("0"))
            if total_revenue <= 0:
                diagnostics.log(
                    f"Skipped customer without positive revenue: {code}",
                    type="info",
                    data={"customer_code": code, "total_revenue": str(total_revenue)},
                )
                continue
            days = round2(group.total / total_revenue * period)
            if days <= cfg.cut_off_days:
                continue
            findings.add(
                DaysOutstandingSummary(
                    customer_code=group.first[labels.CUSTOMER_CODE],
                    customer_name=group.first[labels.CUSTOMER_NAME],
                    total_revenue=total_revenue,
                    total_receivable=group.total,
                    days_outstanding=days,
                ),
                group.rows,
            )

        findings.sort(key=lambda e: (-e.days_outstanding, e.customer_code))
        return findings.to_result(listing.errors + sales.errors)
