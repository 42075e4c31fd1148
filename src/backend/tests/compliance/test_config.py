from decimal import Decimal

import pytest
from pydantic import ValidationError

from common.compliance.config import (
    ClientRulesConfig,
    DEFAULT_JOURNAL_KEYWORDS,
    HolidayEntriesRuleConfig,
    JournalsWithKeywordsRuleConfig,
    LongOutstandingCustomersRuleConfig,
    MissingInvoiceSequenceRuleConfig,
    SuddenVolumeSpikeRuleConfig,
    build_config,
)
from common.compliance.periods import PeriodType


def test_defaults():
    assert SuddenVolumeSpikeRuleConfig().threshold == Decimal("10")
    assert SuddenVolumeSpikeRuleConfig().period_type == PeriodType.MONTH
    assert MissingInvoiceSequenceRuleConfig().prefix == "INV"
    assert LongOutstandingCustomersRuleConfig().cut_off_date is None
    assert JournalsWithKeywordsRuleConfig().keywords == DEFAULT_JOURNAL_KEYWORDS
    assert HolidayEntriesRuleConfig().holiday_days == []


def test_snake_and_camel_case_overrides():
    assert build_config(SuddenVolumeSpikeRuleConfig, {"periodType": "week"}).period_type == PeriodType.WEEK
    assert build_config(SuddenVolumeSpikeRuleConfig, {"period_type": "week"}).period_type == PeriodType.WEEK


def test_constraints():
    with pytest.raises(ValidationError):
        build_config(SuddenVolumeSpikeRuleConfig, {"threshold": -1})
    with pytest.raises(ValidationError):
        build_config(MissingInvoiceSequenceRuleConfig, {"max_missing_listed": 0})


def test_misspelt_override_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        build_config(SuddenVolumeSpikeRuleConfig, {"treshold": 20})
    assert excinfo.value.errors()[0]["type"] == "extra_forbidden"


def test_client_config_merges_overrides_over_defaults():
    client = ClientRulesConfig(rules={"sudden_volume_spike": {"threshold": "25"}})

    cfg = client.get_rule_config("sudden_volume_spike", SuddenVolumeSpikeRuleConfig)
    assert cfg.threshold == Decimal("25")
    assert cfg.period_type == PeriodType.MONTH

    fallback = SuddenVolumeSpikeRuleConfig(threshold=Decimal("1"))
    assert client.get_rule_config("other", SuddenVolumeSpikeRuleConfig, fallback) is fallback
    assert client.get_rule_config("other", SuddenVolumeSpikeRuleConfig).threshold == Decimal("10")
    assert client.overrides_for("missing") == {}


def test_build_config_passes_instances_through():
    cfg = SuddenVolumeSpikeRuleConfig()
    assert build_config(SuddenVolumeSpikeRuleConfig, cfg) is cfg
    assert build_config(SuddenVolumeSpikeRuleConfig, None) == cfg
