import logging

import pytest
from pydantic import ValidationError

from common.compliance.config import CompoundJournalEntriesRuleConfig
from common.compliance.models import Category, TemplateName
from common.compliance.rule import Rule, template_dataset
from common.compliance.rules.compound_journal_entries import COMPOUND_JOURNAL_ENTRIES


class _Exploding(Rule):
    rule_id = "exploding"
    name = "Exploding"
    description = "Always fails past {threshold} lines {unknown}"
    category = Category.MANAGEMENT_OVERRIDE
    config_model = CompoundJournalEntriesRuleConfig
    required_templates = (TemplateName.GENERAL_LEDGER,)

    def evaluate(self, data, cfg):
        raise RuntimeError("boom")


def test_unexpected_errors_become_a_single_error_entry(caplog):
    with caplog.at_level(logging.ERROR, logger="common.compliance"):
        res = _Exploding().run([])

    assert res.failed
    assert res.results == [] and res.summary == []
    assert [issue.message for issue in res.errors] == ["Error processing Exploding data: boom"]
    assert any(r.getMessage() == "Error processing Exploding data in exploding" for r in caplog.records)


def test_description_placeholders_keep_unknown_tokens():
    rule = _Exploding()
    assert rule.render_description() == "Always fails past 5 lines {unknown}"
    assert rule.render_description(CompoundJournalEntriesRuleConfig(threshold=9)).startswith(
        "Always fails past 9 lines"
    )


def test_rule_requires_identity():
    class _Anonymous(_Exploding):
        rule_id = ""

    with pytest.raises(ValueError):
        _Anonymous()


def test_accepts_a_built_config(gl_row):
    data = [gl_row("JE-1") for _ in range(3)]
    res = COMPOUND_JOURNAL_ENTRIES().run(data, CompoundJournalEntriesRuleConfig(threshold=2))
    assert [e.line_count for e in res.summary] == [3]


def test_configs_are_frozen():
    cfg = CompoundJournalEntriesRuleConfig()
    with pytest.raises(ValidationError):
        cfg.threshold = 1


def test_template_dataset_accepts_enum_or_label_keys():
    rows = [{"a": 1}]
    assert template_dataset({"Sales Register": rows}, TemplateName.SALES_REGISTER) is rows
    assert template_dataset({TemplateName.SALES_REGISTER: rows}, TemplateName.SALES_REGISTER) is rows
    assert template_dataset({}, TemplateName.SALES_REGISTER) is None
