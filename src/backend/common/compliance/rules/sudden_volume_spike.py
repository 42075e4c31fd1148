from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..config import SuddenVolumeSpikeRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows_nested, pairwise, sorted_periods
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec
from ..periods import PeriodType, period_key
from ..predicates import exceeds_threshold, percentage_change, round2
from ..registry import register_rule
from ..rule import Rule
from . import labels


class VolumeSpikeSummary(SummaryEntry):
    item_code: str
    period_type: PeriodType
    previous_period: str
    current_period: str
    previous_volume: Decimal
    current_volume: Decimal
    percentage_change: Decimal


@register_rule
class SUDDEN_VOLUME_SPIKE(Rule):
    """Item sales volume moving by more than the threshold between consecutive periods.

    Only periods with sales are compared; a period with zero volume is never
    used as a baseline.
    """

    rule_id = "sudden_volume_spike"
    name = "Sudden Volume Changes"
    description = (
        "Detects significant changes in sales volume (above {threshold}%) for products between {period_type}s"
    )
    category = Category.REVENUE
    config_model = SuddenVolumeSpikeRuleConfig
    required_templates = (TemplateName.SALES_REGISTER,)
    fields = (
        FieldSpec(labels.INVOICE_DATE, FieldKind.DATE),
        FieldSpec(labels.ITEM_CODE),
        FieldSpec(labels.SALE_QUANTITY, FieldKind.NUMBER),
    )

    def evaluate(self, data: Any, cfg: SuddenVolumeSpikeRuleConfig) -> RuleResult:
        tz = self.timezone(cfg)
        decoded = self.decode(data, cfg)
        usable = [
            row
            for row in decoded.rows
            if row[labels.INVOICE_DATE] is not None and row[labels.SALE_QUANTITY] is not None
        ]
        groups = group_rows_nested(
            usable,
            lambda r: r[labels.ITEM_CODE],
            lambda r: period_key(r[labels.INVOICE_DATE], cfg.period_type, tz),
            amount=lambda r: r[labels.SALE_QUANTITY],
        )

        findings = FindingSet(self.rule_id)
        for item_code, periods in groups.items():
            for (prev_key, prev), (cur_key, cur) in pairwise(sorted_periods(periods)):
                pct = percentage_change(cur.total, prev.total)
                if not exceeds_threshold(pct, cfg.threshold):
                    continue
                findings.add(
                    VolumeSpikeSummary(
                        item_code=item_code,
                        period_type=cfg.period_type,
                        previous_period=prev_key,
                        current_period=cur_key,
                        previous_volume=prev.total,
                        current_volume=cur.total,
                        percentage_change=round2(pct),
                    ),
                    cur.rows,
                )

        findings.sort(key=lambda e: (-abs(e.percentage_change), e.item_code, e.current_period))
        return findings.to_result(decoded.errors)
