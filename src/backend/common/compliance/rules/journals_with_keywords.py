from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from ..config import JournalsWithKeywordsRuleConfig
from ..findings import FindingSet
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec, date_sort_key
from ..predicates import match_keywords
from ..registry import register_rule
from ..rule import Rule
from . import labels


class KeywordJournalSummary(SummaryEntry):
    journal_entry_number: Optional[str] = None
    description: Optional[str] = None
    entry_date: Optional[datetime] = None
    user_prepared: Optional[str] = None
    matched_keywords: List[str]


@register_rule
class JOURNALS_WITH_KEYWORDS(Rule):
    rule_id = "journals_with_keywords"
    name = "Keyword Detection in Journals"
    description = "Searches for specific keywords in journal entries that might indicate unusual transactions"
    category = Category.MANAGEMENT_OVERRIDE
    config_model = JournalsWithKeywordsRuleConfig
    required_templates = (TemplateName.GENERAL_LEDGER,)
    fields = (
        FieldSpec(labels.JOURNAL_ENTRY_NUMBER),
        FieldSpec(labels.JOURNAL_DESCRIPTION),
        FieldSpec(labels.ENTRY_DATE, FieldKind.DATE),
        FieldSpec(labels.USER_PREPARED, required=False),
    )

    def evaluate(self, data: Any, cfg: JournalsWithKeywordsRuleConfig) -> RuleResult:
        decoded = self.decode(data, cfg)
        findings = FindingSet(self.rule_id)

        for row in decoded.rows:
            matched = match_keywords(row[labels.JOURNAL_DESCRIPTION], cfg.keywords, cfg.case_sensitive)
            if not matched:
                continue
            findings.add(
                KeywordJournalSummary(
                    journal_entry_number=row[labels.JOURNAL_ENTRY_NUMBER],
                    description=row[labels.JOURNAL_DESCRIPTION],
                    entry_date=row[labels.ENTRY_DATE],
                    user_prepared=row[labels.USER_PREPARED],
                    matched_keywords=matched,
                ),
                [row],
            )

        findings.sort(key=lambda e: (date_sort_key(e.entry_date), e.journal_entry_number or ""))
        return findings.to_result(decoded.errors)
