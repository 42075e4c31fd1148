from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel

from ..config import DuplicatePanRuleConfig
from ..findings import FindingSet
from ..grouping import flatten, group_rows_nested
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldSpec, strip_leading_zeros
from ..periods import pay_period_key
from ..registry import register_rule
from ..rule import Rule
from . import labels


class PanHolder(BaseModel):
    employee_code: str
    employee_name: str


class DuplicatePanSummary(SummaryEntry):
    pan_number: str
    pay_period: str
    occurrences: List[PanHolder]


@register_rule
class DUPLICATE_PAN(Rule):
    """One PAN shared by different employees (code and name) within a pay period.

    The same employee appearing twice under one PAN is a duplicate employee,
    not a duplicate PAN, and is left to `duplicate_employee_code`.
    """

    rule_id = "duplicate_pan"
    name = "Duplicate PAN"
    description = "Checking for duplicate PAN numbers"
    category = Category.PAY_DATA
    config_model = DuplicatePanRuleConfig
    required_templates = (TemplateName.PAY_REGISTER,)
    fields = (
        FieldSpec(labels.EMPLOYEE_CODE),
        FieldSpec(labels.EMPLOYEE_NAME),
        FieldSpec(labels.PAN_NUMBER),
        FieldSpec(labels.PAY_PERIOD),
    )

    def evaluate(self, data: Any, cfg: DuplicatePanRuleConfig) -> RuleResult:
        tz = self.timezone(cfg)
        decoded = self.decode(data, cfg)

        def outer(row):
            pan = strip_leading_zeros(row[labels.PAN_NUMBER])
            period = pay_period_key(row[labels.PAY_PERIOD], tz)
            if not pan or not period:
                return None
            return pan, period

        def inner(row):
            code = strip_leading_zeros(row[labels.EMPLOYEE_CODE])
            name = row[labels.EMPLOYEE_NAME]
            if not code or not name:
                return None
            return code, name

        findings = FindingSet(self.rule_id)
        for (pan, period), employees in group_rows_nested(decoded.rows, outer, inner).items():
            if len(employees) <= 1:
                continue
            findings.add(
                DuplicatePanSummary(
                    pan_number=pan,
                    pay_period=period,
                    occurrences=[
                        PanHolder(
                            employee_code=group.first[labels.EMPLOYEE_CODE],
                            employee_name=group.first[labels.EMPLOYEE_NAME],
                        )
                        for group in employees.values()
                    ],
                ),
                flatten(employees.values()),
            )

        findings.sort(key=lambda e: (e.pay_period, e.pan_number))
        return findings.to_result(decoded.errors)
