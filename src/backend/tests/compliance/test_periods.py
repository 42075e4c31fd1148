from datetime import date, datetime, timezone

from common.compliance.normalize import parse_date
from common.compliance.periods import PeriodType, month_key, pay_period_key, period_key, week_key


def test_month_key_uses_local_calendar():
    late_utc = datetime(2024, 1, 31, 20, 0, tzinfo=timezone.utc)
    assert month_key(late_utc, "UTC") == "2024-01"
    # 01:30 on 1 February in India.
    assert month_key(late_utc, "Asia/Kolkata") == "2024-02"


def test_week_key_is_iso_week():
    assert week_key(datetime(2024, 1, 1, tzinfo=timezone.utc), "UTC") == "2024-W01"
    assert week_key(datetime(2024, 12, 30, tzinfo=timezone.utc), "UTC") == "2025-W01"


def test_period_key_dispatches_on_period_type():
    when = datetime(2024, 3, 15, tzinfo=timezone.utc)
    assert period_key(when, PeriodType.MONTH, "UTC") == "2024-03"
    assert period_key(when, PeriodType.WEEK, "UTC") == "2024-W11"


def test_keys_order_chronologically_as_strings():
    keys = [month_key(datetime(2024, m, 1, 12, tzinfo=timezone.utc), "UTC") for m in (11, 2, 10)]
    assert sorted(keys) == ["2024-02", "2024-10", "2024-11"]


def test_pay_period_key_normalizes_common_spellings():
    tz = "Asia/Kolkata"
    assert pay_period_key("Jan 2024", tz) == "2024-01"
    assert pay_period_key("January, 2024", tz) == "2024-01"
    assert pay_period_key("01/2024", tz) == "2024-01"
    assert pay_period_key("2024-1", tz) == "2024-01"
    assert pay_period_key("2024-01-15", tz) == "2024-01"
    assert pay_period_key(date(2024, 3, 5), tz) == "2024-03"


def test_pay_period_key_passes_through_unknown_labels():
    assert pay_period_key("  Q1 FY24 ", "UTC") == "Q1 FY24"
    assert pay_period_key("   ", "UTC") is None
    assert pay_period_key(None, "UTC") is None


def test_date_only_values_keep_their_month_west_of_utc():
    tz = "America/New_York"
    assert month_key(parse_date("2024-02-01", tz), tz) == "2024-02"
    assert week_key(parse_date("2024-01-01", tz), tz) == "2024-W01"
    assert pay_period_key("2024-03-01", tz) == "2024-03"
    assert pay_period_key(date(2024, 3, 1), tz) == "2024-03"
