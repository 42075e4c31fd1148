import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest

from common.compliance.rules import labels


@pytest.fixture(autouse=True)
def default_engine_settings(monkeypatch):
    monkeypatch.delenv("COMPLIANCE_DEFAULT_TIMEZONE", raising=False)
    monkeypatch.delenv("COMPLIANCE_LOG_LEVEL", raising=False)


@pytest.fixture
def gl_row():
    def _make(
        number: str = "JE-1",
        *,
        entry_date="2024-01-15",
        document_date=None,
        debit=None,
        credit=None,
        description: str = "Monthly accrual",
        user: str = "alice",
        gl_code: str = "4000",
    ) -> dict:
        row = {
            labels.JOURNAL_ENTRY_NUMBER: number,
            labels.ENTRY_DATE: entry_date,
            labels.JOURNAL_DESCRIPTION: description,
            labels.USER_PREPARED: user,
            labels.GL_CODE: gl_code,
        }
        if document_date is not None:
            row[labels.DOCUMENT_DATE] = document_date
        if debit is not None:
            row[labels.DEBIT] = debit
        if credit is not None:
            row[labels.CREDIT] = credit
        return row

    return _make


@pytest.fixture
def sales_row():
    def _make(
        number: str = "INV001",
        *,
        invoice_date="2024-01-10",
        taxable_value=1000,
        invoice_value=None,
        customer_code=None,
        item_code: str = "ITEM-A",
        quantity=10,
    ) -> dict:
        row = {
            labels.INVOICE_NUMBER: number,
            labels.INVOICE_DATE: invoice_date,
            labels.TAXABLE_VALUE: taxable_value,
            labels.ITEM_CODE: item_code,
            labels.SALE_QUANTITY: quantity,
        }
        if invoice_value is not None:
            row[labels.INVOICE_VALUE] = invoice_value
        if customer_code is not None:
            row[labels.CUSTOMER_CODE] = customer_code
        return row

    return _make


@pytest.fixture
def purchase_row():
    def _make(
        item_code: str = "ITEM-A",
        *,
        rate=100,
        date="2024-01-05",
        reference: str = "PO-1",
        vendor_number: str = "V1",
        vendor_name: str = "Acme Supplies",
        item_name: str = "Widget",
    ) -> dict:
        return {
            labels.PURCHASE_REFERENCE_NUMBER: reference,
            labels.PURCHASE_REFERENCE_DATE: date,
            labels.VENDOR_NUMBER: vendor_number,
            labels.VENDOR_NAME: vendor_name,
            labels.ITEM_CODE: item_code,
            labels.ITEM_NAME: item_name,
            labels.RATE: rate,
        }

    return _make


@pytest.fixture
def pay_row():
    def _make(
        code: str = "A1",
        *,
        period="Jan 2024",
        name: str = "Asha Rao",
        pan: str = "ABCDE1234F",
        designation: str = "Manager",
        grosspay=50000,
    ) -> dict:
        return {
            labels.EMPLOYEE_CODE: code,
            labels.EMPLOYEE_NAME: name,
            labels.PAN_NUMBER: pan,
            labels.PAY_PERIOD: period,
            labels.DESIGNATION: designation,
            labels.GROSSPAY: grosspay,
        }

    return _make


@pytest.fixture
def listing_row():
    def _make(
        code: str = "C1",
        *,
        outstanding=1000,
        due_date="2024-06-30",
        name: str = "Northwind Traders",
    ) -> dict:
        return {
            labels.CUSTOMER_CODE: code,
            labels.CUSTOMER_NAME: name,
            labels.OUTSTANDING_VALUE: outstanding,
            labels.DUE_DATE: due_date,
        }

    return _make


@pytest.fixture
def asset_row():
    def _make(
        number: str = "FA001",
        *,
        description: str = "Office furniture",
        classification: str = "Furniture",
    ) -> dict:
        return {
            labels.ASSET_NUMBER: number,
            labels.ASSET_CLASSIFICATION: classification,
            labels.ASSET_DESCRIPTION: description,
        }

    return _make


@pytest.fixture
def sample_datasets(gl_row, sales_row, purchase_row, pay_row, listing_row, asset_row):
    """One dataset per template; with Sundays as holidays every built-in test has a finding."""
    general_ledger = [
        gl_row("JE-1", entry_date="2024-01-07", debit=300000, description="Reverse duplicate posting"),
        gl_row("JE-2", entry_date="2024-01-10", document_date="2024-01-12", credit=11111),
        gl_row("JE-3", entry_date="2024-01-26", debit=1234),
    ] + [gl_row("JE-4", debit=100 + i, gl_code=f"40{i}") for i in range(6)]
    sales_register = [
        sales_row("INV001", invoice_date="2024-01-10", customer_code="C1", quantity=100),
        sales_row("INV002", invoice_date="2024-01-12", customer_code="C2", quantity=100),
        sales_row("INV002", invoice_date="2024-02-12", customer_code="C2", quantity=50),
        sales_row("INV004", invoice_date="2024-02-15", customer_code="C1", quantity=200),
    ]
    purchase_register = [
        purchase_row("ITEM-A", rate=100, date="2024-01-05", reference="PO-1"),
        purchase_row("ITEM-A", rate=130, date="2024-01-20", reference="PO-2", vendor_number="V2"),
    ]
    pay_register = [
        pay_row("A1", period="Jan 2024", grosspay=1000),
        pay_row("A1", period="2024-01", grosspay=1000),
        pay_row("B2", period="Jan 2024", name="Ravi Kumar", grosspay=1000),
        pay_row("B2", period="Feb 2024", name="Ravi Kumar", grosspay=9000),
    ]
    customer_listing = [
        listing_row("C1", outstanding=-500, due_date="2020-01-31"),
        listing_row("C2", outstanding=90000, due_date="2020-03-31", name="Contoso"),
    ]
    fixed_assets_register = [
        asset_row("FA001", description="Interest capitalised on loan"),
        asset_row("FA001", description="Office chair"),
    ]
    return {
        "General Ledger": general_ledger,
        "Sales Register": sales_register,
        "Purchase Register": purchase_register,
        "Pay Register": pay_register,
        "Customer Listing": customer_listing,
        "Fixed Assets Register": fixed_assets_register,
    }
