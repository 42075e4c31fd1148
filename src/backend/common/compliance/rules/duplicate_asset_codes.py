from __future__ import annotations

from typing import Any, Optional

from ..config import DuplicateAssetCodesRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldSpec, strip_leading_zeros
from ..registry import register_rule
from ..rule import Rule
from . import labels


class DuplicateAssetSummary(SummaryEntry):
    asset_code: str
    asset_description: Optional[str] = None
    occurrences: int


@register_rule
class DUPLICATE_ASSET_CODES(Rule):
    rule_id = "duplicate_asset_codes"
    name = "Duplicate Asset Codes"
    description = "Identifying duplicate asset codes in the Asset Code column"
    category = Category.FIXED_ASSETS
    config_model = DuplicateAssetCodesRuleConfig
    required_templates = (TemplateName.FIXED_ASSETS_REGISTER,)
    fields = (
        FieldSpec(labels.ASSET_NUMBER),
        FieldSpec(labels.ASSET_CLASSIFICATION),
        FieldSpec(labels.ASSET_DESCRIPTION),
    )

    def evaluate(self, data: Any, cfg: DuplicateAssetCodesRuleConfig) -> RuleResult:
        decoded = self.decode(data, cfg)
        groups = group_rows(decoded.rows, lambda r: strip_leading_zeros(r[labels.ASSET_NUMBER]))

        findings = FindingSet(self.rule_id)
        for asset_code, group in groups.items():
            if group.count <= 1:
                continue
            findings.add(
                DuplicateAssetSummary(
                    asset_code=asset_code,
                    asset_description=group.first[labels.ASSET_DESCRIPTION],
                    occurrences=group.count,
                ),
                group.rows,
            )

        findings.sort(key=lambda e: (-e.occurrences, e.asset_code))
        return findings.to_result(decoded.errors)
