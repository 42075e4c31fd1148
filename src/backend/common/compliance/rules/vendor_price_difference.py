from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ..config import VendorPriceDifferenceRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows, group_rows_nested
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec
from ..periods import month_key
from ..predicates import exceeds_threshold, mean, percentage_change, round2
from ..registry import register_rule
from ..rule import Rule
from . import labels


class VendorPriceSummary(SummaryEntry):
    item_code: str
    month: str
    vendor_number: str
    vendor_name: Optional[str] = None
    average_rate: Decimal
    comparison_rate: Decimal
    percentage_difference: Decimal


@register_rule
class VENDOR_PRICE_DIFFERENCE(Rule):
    """Per item and month, each vendor's average rate against the mean of all vendors' averages.

    Months where only one vendor supplied the item have nothing to compare with.
    """

    rule_id = "vendor_price_difference"
    name = "Vendor Price Variations"
    description = (
        "Checking if the rate of an item has been purchased at more or less than {threshold}% "
        "compared to its average purchase rate"
    )
    category = Category.PURCHASES
    config_model = VendorPriceDifferenceRuleConfig
    required_templates = (TemplateName.PURCHASE_REGISTER,)
    fields = (
        FieldSpec(labels.PURCHASE_REFERENCE_NUMBER),
        FieldSpec(labels.PURCHASE_REFERENCE_DATE, FieldKind.DATE),
        FieldSpec(labels.VENDOR_NUMBER),
        FieldSpec(labels.VENDOR_NAME),
        FieldSpec(labels.ITEM_CODE),
        FieldSpec(labels.ITEM_NAME),
        FieldSpec(labels.RATE, FieldKind.NUMBER),
    )

    def evaluate(self, data: Any, cfg: VendorPriceDifferenceRuleConfig) -> RuleResult:
        tz = self.timezone(cfg)
        decoded = self.decode(data, cfg)
        usable = [
            row
            for row in decoded.rows
            if row[labels.PURCHASE_REFERENCE_DATE] is not None and row[labels.RATE] is not None
        ]
        by_item_month = group_rows_nested(
            usable,
            lambda r: r[labels.ITEM_CODE],
            lambda r: month_key(r[labels.PURCHASE_REFERENCE_DATE], tz),
        )

        findings = FindingSet(self.rule_id)
        for item_code, months in by_item_month.items():
            for month, month_group in months.items():
                vendors = group_rows(
                    month_group.rows,
                    lambda r: r[labels.VENDOR_NUMBER],
                    amount=lambda r: r[labels.RATE],
                )
                if len(vendors) <= 1:
                    continue
                overall = mean(v.mean() for v in vendors.values())
                for vendor_number, vendor in vendors.items():
                    average = vendor.mean()
                    pct = percentage_change(average, overall)
                    if not exceeds_threshold(pct, cfg.threshold):
                        continue
                    findings.add(
                        VendorPriceSummary(
                            item_code=item_code,
                            month=month,
                            vendor_number=vendor_number,
                            vendor_name=vendor.first[labels.VENDOR_NAME],
                            average_rate=round2(average),
                            comparison_rate=round2(overall),
                            percentage_difference=round2(pct),
                        ),
                        vendor.rows,
                    )

        findings.sort(
            key=lambda e: (-abs(e.percentage_difference), e.item_code, e.month, e.vendor_number)
        )
        return findings.to_result(decoded.errors)
