from decimal import Decimal

from common.compliance.rules.sudden_purchase_price_spike import SUDDEN_PURCHASE_PRICE_SPIKE


def test_price_change_against_previous_purchase(purchase_row):
    data = [
        purchase_row("X", rate=106, date="2024-01-20", reference="PO-2"),
        purchase_row("X", rate=100, date="2024-01-05", reference="PO-1"),
        purchase_row("Y", rate=100, date="2024-01-05"),
        purchase_row("Y", rate=104, date="2024-01-20"),
        purchase_row("Z", rate=100, date="2024-01-05"),
        purchase_row("Z", rate=105, date="2024-01-20"),
    ]
    res = SUDDEN_PURCHASE_PRICE_SPIKE().run(data)

    assert len(res.summary) == 1
    spike = res.summary[0]
    assert spike.item_code == "X"
    assert spike.purchase_reference_number == "PO-2"
    assert (spike.previous_price, spike.current_price) == (Decimal("100"), Decimal("106"))
    assert spike.percentage_change == Decimal("6.00")
    assert spike.row_numbers == [0]
    assert res.results == [data[0]]


def test_price_drops_and_custom_threshold(purchase_row):
    data = [
        purchase_row("X", rate=100, date="2024-01-05"),
        purchase_row("X", rate=90, date="2024-02-05"),
        purchase_row("X", rate=120, date="2024-03-05"),
    ]
    res = SUDDEN_PURCHASE_PRICE_SPIKE().run(data, {"threshold": "20"})
    # 90 -> 120 is +33.33%; 100 -> 90 is within 20%.
    assert [e.percentage_change for e in res.summary] == [Decimal("33.33")]
    assert res.summary[0].row_numbers == [2]
