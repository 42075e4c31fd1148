import pytest

from common.compliance import UnknownRuleError, registry
from common.compliance.catalog import build_catalog
from common.compliance.registry import RuleRegistry
from common.compliance.rules.compound_journal_entries import COMPOUND_JOURNAL_ENTRIES

BUILT_IN = {
    "repeating_numbers_journal",
    "last_5_digits",
    "journals_with_keywords",
    "entries_before_doc_date",
    "holiday_entries",
    "compound_journal_entries",
    "duplicate_invoices",
    "missing_invoice_sequence",
    "sudden_volume_spike",
    "sudden_purchase_price_spike",
    "vendor_price_difference",
    "duplicate_employee_code",
    "duplicate_pan",
    "payroll_cost_spike",
    "customer_days_outstanding",
    "long_outstanding_customers",
    "negative_receivables",
    "keyword_narrations",
    "duplicate_asset_codes",
}


def test_built_in_tests_are_registered():
    assert set(registry.ids()) == BUILT_IN
    assert len(registry) == len(BUILT_IN)
    assert "duplicate_pan" in registry


def test_entry_metadata():
    entry = registry.get("sudden_volume_spike")
    assert entry.name == "Sudden Volume Changes"
    assert entry.category == "Revenue Analytics"
    assert entry.description == (
        "Detects significant changes in sales volume (above 10%) for products between months"
    )
    assert entry.default_config["threshold"] == "10"
    assert registry.get("missing_invoice_sequence").default_config["prefix"] == "INV"


def test_unknown_id():
    with pytest.raises(UnknownRuleError) as excinfo:
        registry.get("nope")
    assert isinstance(excinfo.value, KeyError)
    assert str(excinfo.value) == "Unknown compliance test: nope"


def test_available_for_uploaded_templates():
    sales_only = {e.id for e in registry.available_for(["Sales Register"])}
    assert sales_only == {"duplicate_invoices", "missing_invoice_sequence", "sudden_volume_spike"}

    with_listing = {e.id for e in registry.available_for(["Sales Register", "Customer Listing"])}
    assert "customer_days_outstanding" in with_listing
    assert "long_outstanding_customers" in with_listing


def test_duplicate_registration_rejected():
    local = RuleRegistry()
    local.register(COMPOUND_JOURNAL_ENTRIES)
    with pytest.raises(ValueError):
        local.register(COMPOUND_JOURNAL_ENTRIES)


def test_default_config_is_read_only():
    entry = registry.get("sudden_purchase_price_spike")
    with pytest.raises(TypeError):
        entry.default_config["threshold"] = "99"
    with pytest.raises(AttributeError):
        registry.get("journals_with_keywords").default_config["keywords"].append("bonus")

    (listed,) = [e for e in build_catalog() if e.id == "sudden_purchase_price_spike"]
    assert listed.default_config["threshold"] == entry.default_config["threshold"] == "5"
