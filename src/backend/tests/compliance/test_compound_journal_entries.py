from common.compliance.rules.compound_journal_entries import COMPOUND_JOURNAL_ENTRIES


def _journal(gl_row, number, lines, codes=("4000",)):
    return [gl_row(number, gl_code=codes[i % len(codes)]) for i in range(lines)]


def test_more_lines_than_threshold(gl_row):
    data = _journal(gl_row, "JE-1", 6, ("4000", "4100", "4000")) + _journal(gl_row, "JE-2", 5)
    res = COMPOUND_JOURNAL_ENTRIES().run(data)

    assert len(res.summary) == 1
    entry = res.summary[0]
    assert entry.journal_entry_number == "JE-1"
    assert entry.line_count == 6
    assert entry.distinct_gl_codes == 2
    assert entry.row_numbers == list(range(6))


def test_lower_threshold_orders_by_line_count(gl_row):
    data = _journal(gl_row, "JE-1", 3) + _journal(gl_row, "JE-2", 4) + _journal(gl_row, "JE-3", 2)
    res = COMPOUND_JOURNAL_ENTRIES().run(data, {"threshold": 2})
    assert [(e.journal_entry_number, e.line_count) for e in res.summary] == [("JE-2", 4), ("JE-1", 3)]


def test_description_shows_threshold():
    rule = COMPOUND_JOURNAL_ENTRIES()
    assert rule.render_description().endswith("(more than 5 items)")


def test_unknown_override_key_is_fatal(gl_row):
    res = COMPOUND_JOURNAL_ENTRIES().run(_journal(gl_row, "JE-1", 6), {"treshold": 2})
    assert res.failed
    assert res.summary == []
    assert res.errors[0].message.startswith("Invalid configuration: treshold")
