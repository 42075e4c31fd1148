import json

import pytest

from scripts.run_compliance_analysis import main


def test_cli_writes_json_and_markdown_reports(tmp_path, asset_row):
    dataset = tmp_path / "assets.json"
    dataset.write_text(json.dumps([asset_row("FA001"), asset_row("FA001")]))
    out_json = tmp_path / "report.json"
    out_md = tmp_path / "report.md"

    code = main(
        [
            "--dataset",
            f"Fixed Assets Register={dataset}",
            "--out",
            str(out_json),
            "--markdown",
            str(out_md),
        ]
    )

    assert code == 0
    report = json.loads(out_json.read_text())
    statuses = {o["rule_id"]: o["status"] for o in report["outcomes"]}
    assert statuses["duplicate_asset_codes"] == "COMPLETED"
    assert statuses["duplicate_invoices"] == "SKIPPED"
    markdown = out_md.read_text()
    assert "### duplicate_asset_codes: COMPLETED" in markdown
    assert "- Findings: 1 (2 records)" in markdown


def test_cli_applies_config_file(tmp_path, gl_row):
    dataset = tmp_path / "gl.json"
    dataset.write_text(json.dumps([gl_row("JE-1"), gl_row("JE-1"), gl_row("JE-1")]))
    overrides = tmp_path / "overrides.json"
    overrides.write_text(json.dumps({"compound_journal_entries": {"threshold": 2}}))
    out_json = tmp_path / "report.json"

    code = main(
        [
            "--dataset",
            f"General Ledger={dataset}",
            "--rule",
            "compound_journal_entries",
            "--config",
            str(overrides),
            "--out",
            str(out_json),
        ]
    )

    assert code == 0
    (outcome,) = json.loads(out_json.read_text())["outcomes"]
    assert outcome["config"]["threshold"] == 2
    assert outcome["result"]["summary"][0]["line_count"] == 3


def test_cli_rejects_unknown_test(tmp_path, capsys):
    dataset = tmp_path / "gl.json"
    dataset.write_text("[]")
    assert main(["--dataset", f"General Ledger={dataset}", "--rule", "nope"]) == 1
    assert "Unknown compliance test: nope" in capsys.readouterr().err


def test_cli_rejects_malformed_dataset_argument():
    with pytest.raises(SystemExit):
        main(["--dataset", "General Ledger"])
