from __future__ import annotations

from typing import Any

from ..config import DuplicateEmployeeCodeRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldSpec, strip_leading_zeros
from ..periods import pay_period_key
from ..registry import register_rule
from ..rule import Rule
from . import labels


class DuplicateEmployeeSummary(SummaryEntry):
    employee_code: str
    pay_period: str
    occurrences: int


@register_rule
class DUPLICATE_EMPLOYEE_CODE(Rule):
    rule_id = "duplicate_employee_code"
    name = "Duplicate Employee Code"
    description = "Checking for duplicate employee codes"
    category = Category.PAY_DATA
    config_model = DuplicateEmployeeCodeRuleConfig
    required_templates = (TemplateName.PAY_REGISTER,)
    fields = (
        FieldSpec(labels.EMPLOYEE_CODE),
        FieldSpec(labels.PAY_PERIOD),
    )

    def evaluate(self, data: Any, cfg: DuplicateEmployeeCodeRuleConfig) -> RuleResult:
        tz = self.timezone(cfg)
        decoded = self.decode(data, cfg)

        def key(row):
            code = strip_leading_zeros(row[labels.EMPLOYEE_CODE])
            period = pay_period_key(row[labels.PAY_PERIOD], tz)
            if not code or not period:
                return None
            return code, period

        findings = FindingSet(self.rule_id)
        for (code, period), group in group_rows(decoded.rows, key).items():
            if group.count <= 1:
                continue
            findings.add(
                DuplicateEmployeeSummary(employee_code=code, pay_period=period, occurrences=group.count),
                group.rows,
            )

        findings.sort(key=lambda e: (e.pay_period, e.employee_code))
        return findings.to_result(decoded.errors)
