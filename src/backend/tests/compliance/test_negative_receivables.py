from decimal import Decimal

from common.compliance.rules.negative_receivables import NEGATIVE_RECEIVABLES


def test_customer_balances_below_zero(listing_row):
    data = [
        listing_row("C1", outstanding=-500),
        listing_row("C1", outstanding=200),
        listing_row("C2", outstanding=-1000, name="Contoso"),
        listing_row("C3", outstanding=100),
        listing_row("007", outstanding=-10),
        listing_row("7", outstanding=20),
    ]
    res = NEGATIVE_RECEIVABLES().run(data)

    assert [(e.customer_code, e.receivable_balance) for e in res.summary] == [
        ("C2", Decimal("-1000")),
        ("C1", Decimal("-300")),
    ]
    assert res.summary[1].row_numbers == [0, 1]


def test_non_numeric_balance_is_skipped(listing_row):
    res = NEGATIVE_RECEIVABLES().run([listing_row("C1", outstanding="n/a")])
    assert res.summary == []
    assert [issue.message for issue in res.errors] == ["Outstanding Value must be a number"]
