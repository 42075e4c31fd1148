from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..config import HolidayEntriesRuleConfig
from ..findings import FindingSet
from ..models import Category, RuleResult, SummaryEntry, TemplateName
from ..normalize import FieldKind, FieldSpec
from ..periods import local_date
from ..predicates import DAY_NAMES, is_holiday, weekday_index
from ..registry import register_rule
from ..rule import Rule
from . import labels


class HolidayEntrySummary(SummaryEntry):
    journal_entry_number: Optional[str] = None
    entry_date: datetime
    user_prepared: str = ""
    day_of_week: str
    is_holiday_date: bool
    is_sunday: bool


@register_rule
class HOLIDAY_ENTRIES(Rule):
    """Entries posted on a configured holiday weekday or holiday date.

    The weekday and calendar date are taken in the configured timezone, so a
    late-evening UTC posting can fall on the next local day.
    """

    rule_id = "holiday_entries"
    name = "Holiday Transaction Entries"
    description = "Detects journal entries recorded during holidays or non-business days"
    category = Category.MANAGEMENT_OVERRIDE
    config_model = HolidayEntriesRuleConfig
    required_templates = (TemplateName.GENERAL_LEDGER,)
    fields = (
        FieldSpec(labels.JOURNAL_ENTRY_NUMBER),
        FieldSpec(labels.ENTRY_DATE, FieldKind.DATE),
        FieldSpec(labels.USER_PREPARED, required=False),
    )

    def evaluate(self, data: Any, cfg: HolidayEntriesRuleConfig) -> RuleResult:
        tz = self.timezone(cfg)
        holiday_days = set(cfg.holiday_days)
        holiday_dates = set(cfg.holiday_dates)

        decoded = self.decode(data, cfg)
        findings = FindingSet(self.rule_id)

        for row in decoded.rows:
            entry_date = row[labels.ENTRY_DATE]
            if entry_date is None:
                continue
            if not is_holiday(entry_date, tz, holiday_days, holiday_dates):
                continue
            weekday = weekday_index(entry_date, tz)
            on_holiday_date = local_date(entry_date, tz) in holiday_dates
            findings.add(
                HolidayEntrySummary(
                    journal_entry_number=row[labels.JOURNAL_ENTRY_NUMBER],
                    entry_date=entry_date,
                    user_prepared=row.get(labels.USER_PREPARED, ""),
                    day_of_week=DAY_NAMES[weekday],
                    is_holiday_date=on_holiday_date,
                    is_sunday=weekday == 0,
                ),
                [row],
            )

        findings.sort(key=lambda e: (e.entry_date, e.journal_entry_number or ""))
        return findings.to_result(decoded.errors)
