from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from ..config import SuddenPurchasePriceSpikeRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows, pairwise
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec
from ..predicates import exceeds_threshold, percentage_change, round2
from ..registry import register_rule
from ..rule import Rule
from . import labels


class PriceSpikeSummary(SummaryEntry):
    item_code: str
    item_name: Optional[str] = None
    purchase_reference_number: Optional[str] = None
    purchase_reference_date: datetime
    previous_price: Decimal
    current_price: Decimal
    percentage_change: Decimal


@register_rule
class SUDDEN_PURCHASE_PRICE_SPIKE(Rule):
    """Each purchase of an item compared with the purchase of that item just before it."""

    rule_id = "sudden_purchase_price_spike"
    name = "Sudden Purchase Price Changes"
    description = (
        "Checking if the purchasing price has increased or decreased by more than {threshold}% "
        "compared to the previous purchase"
    )
    category = Category.PURCHASES
    config_model = SuddenPurchasePriceSpikeRuleConfig
    required_templates = (TemplateName.PURCHASE_REGISTER,)
    fields = (
        FieldSpec(labels.PURCHASE_REFERENCE_NUMBER),
        FieldSpec(labels.PURCHASE_REFERENCE_DATE, FieldKind.DATE),
        FieldSpec(labels.ITEM_CODE),
        FieldSpec(labels.ITEM_NAME),
        FieldSpec(labels.RATE, FieldKind.NUMBER),
    )

    def evaluate(self, data: Any, cfg: SuddenPurchasePriceSpikeRuleConfig) -> RuleResult:
        decoded = self.decode(data, cfg)
        usable = [
            row
            for row in decoded.rows
            if row[labels.PURCHASE_REFERENCE_DATE] is not None and row[labels.RATE] is not None
        ]
        groups = group_rows(usable, lambda r: r[labels.ITEM_CODE])

        findings = FindingSet(self.rule_id)
        for item_code, group in groups.items():
            # sorted() is stable: same-day purchases keep their upload order.
            history = sorted(group.rows, key=lambda r: r[labels.PURCHASE_REFERENCE_DATE])
            for previous, current in pairwise(history):
                pct = percentage_change(current[labels.RATE], previous[labels.RATE])
                if not exceeds_threshold(pct, cfg.threshold):
                    continue
                findings.add(
                    PriceSpikeSummary(
                        item_code=item_code,
                        item_name=current[labels.ITEM_NAME],
                        purchase_reference_number=current[labels.PURCHASE_REFERENCE_NUMBER],
                        purchase_reference_date=current[labels.PURCHASE_REFERENCE_DATE],
                        previous_price=previous[labels.RATE],
                        current_price=current[labels.RATE],
                        percentage_change=round2(pct),
                    ),
                    [current],
                )

        findings.sort(
            key=lambda e: (-abs(e.percentage_change), e.item_code, e.purchase_reference_date)
        )
        return findings.to_result(decoded.errors)
