from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..config import PayrollCostSpikeRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows_nested, pairwise, sorted_periods
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec
from ..periods import pay_period_key
from ..predicates import exceeds_threshold, percentage_change, round2
from ..registry import register_rule
from ..rule import Rule
from . import labels


class PayrollCostSpikeSummary(SummaryEntry):
    designation: str
    previous_month: str
    current_month: str
    previous_cost: Decimal
    current_cost: Decimal
    percentage_change: Decimal


@register_rule
class PAYROLL_COST_SPIKE(Rule):
    rule_id = "payroll_cost_spike"
    name = "Designation-wise Payroll Cost Spike"
    description = (
        "Checking if the total gross salary per designation has increased or decreased by more than "
        "{threshold}% compared to the previous month"
    )
    category = Category.PAY_DATA
    config_model = PayrollCostSpikeRuleConfig
    required_templates = (TemplateName.PAY_REGISTER,)
    fields = (
        FieldSpec(labels.PAY_PERIOD),
        FieldSpec(labels.EMPLOYEE_CODE),
        FieldSpec(labels.EMPLOYEE_NAME),
        FieldSpec(labels.DESIGNATION),
        FieldSpec(labels.GROSSPAY, FieldKind.NUMBER),
    )

    def evaluate(self, data: Any, cfg: PayrollCostSpikeRuleConfig) -> RuleResult:
        tz = self.timezone(cfg)
        decoded = self.decode(data, cfg)
        usable = [row for row in decoded.rows if row[labels.GROSSPAY] is not None]
        groups = group_rows_nested(
            usable,
            lambda r: r[labels.DESIGNATION],
            lambda r: pay_period_key(r[labels.PAY_PERIOD], tz),
            amount=lambda r: r[labels.GROSSPAY],
        )

        findings = FindingSet(self.rule_id)
        for designation, months in groups.items():
            for (prev_month, prev), (cur_month, cur) in pairwise(sorted_periods(months)):
                pct = percentage_change(cur.total, prev.total)
                if not exceeds_threshold(pct, cfg.threshold):
                    continue
                findings.add(
                    PayrollCostSpikeSummary(
                        designation=designation,
                        previous_month=prev_month,
                        current_month=cur_month,
                        previous_cost=prev.total,
                        current_cost=cur.total,
                        percentage_change=round2(pct),
                    ),
                    cur.rows,
                )

        findings.sort(key=lambda e: (-abs(e.percentage_change), e.designation, e.current_month))
        return findings.to_result(decoded.errors)
