from __future__ import annotations

from typing import Any, List, Optional

from ..config import KeywordNarrationsRuleConfig
from ..findings import FindingSet
from ..grouping import group_rows
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldSpec
from ..predicates import match_keywords
from ..registry import register_rule
from ..rule import Rule
from . import labels


class KeywordNarrationSummary(SummaryEntry):
    asset_code: str
    asset_classification: Optional[str] = None
    matched_keywords: List[str]


@register_rule
class KEYWORD_NARRATIONS(Rule):
    """Assets whose description mentions a cost that should usually be expensed.

    Only the matching lines of an asset back its finding.
    """

    rule_id = "keyword_narrations"
    name = "Narrations with Certain Words"
    description = "Identifying asset codes with descriptions containing specific words"
    category = Category.FIXED_ASSETS
    config_model = KeywordNarrationsRuleConfig
    required_templates = (TemplateName.FIXED_ASSETS_REGISTER,)
    fields = (
        FieldSpec(labels.ASSET_NUMBER),
        FieldSpec(labels.ASSET_CLASSIFICATION),
        FieldSpec(labels.ASSET_DESCRIPTION),
    )

    def evaluate(self, data: Any, cfg: KeywordNarrationsRuleConfig) -> RuleResult:
        keywords = [k.strip() for k in cfg.keywords if k and k.strip()]
        if not keywords:
            return RuleResult.fatal(self.rule_id, "No valid keywords provided for search")
        decoded = self.decode(data, cfg)

        matches = {}
        for row in decoded.rows:
            found = match_keywords(row[labels.ASSET_DESCRIPTION], keywords, cfg.case_sensitive)
            if found:
                matches[row.index] = found

        groups = group_rows(
            (row for row in decoded.rows if row.index in matches),
            lambda r: r[labels.ASSET_NUMBER],
        )

        findings = FindingSet(self.rule_id)
        for asset_code, group in groups.items():
            matched: List[str] = []
            for row in group.rows:
                matched.extend(k for k in matches[row.index] if k not in matched)
            findings.add(
                KeywordNarrationSummary(
                    asset_code=asset_code,
                    asset_classification=group.first[labels.ASSET_CLASSIFICATION],
                    matched_keywords=matched,
                ),
                group.rows,
            )

        findings.sort(key=lambda e: e.asset_code)
        return findings.to_result(decoded.errors)
