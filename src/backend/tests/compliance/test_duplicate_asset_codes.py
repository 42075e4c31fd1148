from common.compliance.rules.duplicate_asset_codes import DUPLICATE_ASSET_CODES


def test_repeated_asset_codes(asset_row):
    data = [
        asset_row("FA001", description="Lathe"),
        asset_row("FA002"),
        asset_row("FA001"),
        asset_row("0012", description="Server rack"),
        asset_row("12"),
        asset_row("12"),
    ]
    res = DUPLICATE_ASSET_CODES().run(data)

    assert [(e.asset_code, e.occurrences) for e in res.summary] == [("12", 3), ("FA001", 2)]
    assert res.summary[0].asset_description == "Server rack"
    assert res.summary[1].row_numbers == [0, 2]
    assert res.results == [data[3], data[4], data[5], data[0], data[2]]
