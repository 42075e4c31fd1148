from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Mapping, Optional, Type, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .periods import PeriodType

T = TypeVar("T", bound="RuleConfigBase")

DayOfWeek = Annotated[int, Field(ge=0, le=6)]


class RuleConfigBase(BaseModel):
    # Overrides arrive either as snake_case or as the camelCase keys the UI posts.
    # Unknown keys are rejected so a misspelt override cannot fall back to the default.
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel, extra="forbid")

    # IANA timezone used when bucketing or comparing calendar dates. Unset means the engine default.
    timezone: Optional[str] = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value


# General Ledger


class DigitPatternRuleConfig(RuleConfigBase):
    # Number of trailing digits of the absolute amount to inspect.
    digit_count: int = Field(default=5, ge=1)


class RepeatingNumbersJournalRuleConfig(DigitPatternRuleConfig):
    pass


class LastDigitsRuleConfig(DigitPatternRuleConfig):
    pass


DEFAULT_JOURNAL_KEYWORDS = [
    "adjustment",
    "correction",
    "error",
    "reverse",
    "Fraud",
    "Bribe",
    "instruction of MD",
    "MD family",
    "Personal trip",
    "Secret",
]


class KeywordRuleConfig(RuleConfigBase):
    keywords: List[str] = Field(min_length=1)
    case_sensitive: bool = False


class JournalsWithKeywordsRuleConfig(KeywordRuleConfig):
    keywords: List[str] = Field(default_factory=lambda: list(DEFAULT_JOURNAL_KEYWORDS), min_length=1)


class EntriesBeforeDocDateRuleConfig(RuleConfigBase):
    pass


class HolidayEntriesRuleConfig(RuleConfigBase):
    # 0 = Sunday ... 6 = Saturday.
    holiday_days: List[DayOfWeek] = Field(default_factory=list)
    holiday_dates: List[date] = Field(default_factory=list)


class CompoundJournalEntriesRuleConfig(RuleConfigBase):
    # Journals with more line items than this are flagged.
    threshold: int = Field(default=5, ge=0)


# Sales / purchase


class DuplicateInvoicesRuleConfig(RuleConfigBase):
    pass


class MissingInvoiceSequenceRuleConfig(RuleConfigBase):
    prefix: str = "INV"
    # Cap on identifiers listed per gap; `missing_count` always carries the full size.
    max_missing_listed: int = Field(default=1000, ge=1)


class PercentThresholdRuleConfig(RuleConfigBase):
    # Percentage deviation that must be exceeded (strictly) to flag.
    threshold: Decimal = Field(default=Decimal("5"), ge=0)


class SuddenVolumeSpikeRuleConfig(PercentThresholdRuleConfig):
    threshold: Decimal = Field(default=Decimal("10"), ge=0)
    period_type: PeriodType = PeriodType.MONTH


class SuddenPurchasePriceSpikeRuleConfig(PercentThresholdRuleConfig):
    pass


class VendorPriceDifferenceRuleConfig(PercentThresholdRuleConfig):
    pass


# Payroll


class DuplicateEmployeeCodeRuleConfig(RuleConfigBase):
    pass


class DuplicatePanRuleConfig(RuleConfigBase):
    pass


class PayrollCostSpikeRuleConfig(PercentThresholdRuleConfig):
    pass


# Receivables


class CustomerDaysOutstandingRuleConfig(RuleConfigBase):
    # Customers whose days outstanding exceed this are flagged.
    cut_off_days: int = Field(default=365, ge=0)
    # Length of the revenue period in days (typically 90/180/270/365).
    period_of_transaction: int = Field(default=365, gt=0)


class LongOutstandingCustomersRuleConfig(RuleConfigBase):
    # Reference date for ageing; unset means today in the configured timezone.
    cut_off_date: Optional[date] = None
    cut_off_days: int = Field(default=365, ge=0)


class NegativeReceivablesRuleConfig(RuleConfigBase):
    pass


# Fixed assets

DEFAULT_NARRATION_KEYWORDS = [
    "interest",
    "processing fees",
    "transport",
    "insurance",
    "prepaid",
    "pre-operative",
]


class KeywordNarrationsRuleConfig(KeywordRuleConfig):
    keywords: List[str] = Field(default_factory=lambda: list(DEFAULT_NARRATION_KEYWORDS), min_length=1)


class DuplicateAssetCodesRuleConfig(RuleConfigBase):
    pass


class ClientRulesConfig(BaseModel):
    """Per-client overrides for all rules.

    Rules pull their typed config via `get_rule_config`; fields left out keep
    the model defaults.
    """

    rules: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    def overrides_for(self, rule_id: str) -> Dict[str, Any]:
        return dict(self.rules.get(rule_id, {}))

    def get_rule_config(
        self,
        rule_id: str,
        model: Type[T],
        default: Optional[T] = None,
    ) -> T:
        if rule_id not in self.rules:
            if default is not None:
                return default
            return model()  # type: ignore[call-arg]
        return build_config(model, self.rules[rule_id])


def build_config(model: Type[T], overrides: Optional[Mapping[str, Any] | BaseModel] = None) -> T:
    if overrides is None:
        return model()  # type: ignore[call-arg]
    if isinstance(overrides, model):
        return overrides
    if isinstance(overrides, BaseModel):
        overrides = overrides.model_dump(exclude_unset=True)
    return model.model_validate(dict(overrides))
