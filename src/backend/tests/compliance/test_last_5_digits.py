from common.compliance.rules.last_5_digits import LAST_5_DIGITS


def test_round_amount_flagged_near_miss_not(gl_row):
    data = [
        gl_row("JE-1", debit=300000),
        gl_row("JE-2", debit=300001),
        gl_row("JE-3", credit="1,500,000.00"),
    ]
    res = LAST_5_DIGITS().run(data)

    assert [e.journal_entry_number for e in res.summary] == ["JE-1", "JE-3"]
    assert res.summary[0].is_debit_round_number
    assert not res.summary[0].is_credit_round_number
    assert res.summary[1].is_credit_round_number
    assert res.summary[1].row_numbers == [2]


def test_shorter_digit_count(gl_row):
    data = [gl_row("JE-1", debit=4000), gl_row("JE-2", debit=4010)]
    res = LAST_5_DIGITS().run(data, {"digit_count": 3})
    assert [e.journal_entry_number for e in res.summary] == ["JE-1"]


def test_invalid_digit_count_is_fatal(gl_row):
    res = LAST_5_DIGITS().run([gl_row(debit=300000)], {"digit_count": 0})
    assert res.failed
    assert res.errors[0].message.startswith("Invalid configuration: ")
