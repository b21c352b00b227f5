from datetime import datetime, timedelta

from app.utils.periods import DateWindow, add_months, month_window, months_ago, resolve_period


def test_month_is_calendar_aligned():
    periods = resolve_period("month", datetime(2025, 11, 15, 12, 0))
    assert periods.current_start == datetime(2025, 11, 1)
    assert periods.current_end.date() == datetime(2025, 11, 30).date()
    assert periods.previous_start == datetime(2025, 10, 1)
    assert periods.previous_end.date() == datetime(2025, 10, 31).date()


def test_month_includes_the_whole_last_day():
    window = month_window(datetime(2025, 11, 3))
    assert window.contains(datetime(2025, 11, 30, 23, 59))
    assert not window.contains(datetime(2025, 12, 1))


def test_january_previous_month_rolls_back_a_year():
    periods = resolve_period("month", datetime(2025, 1, 20))
    assert periods.previous_start == datetime(2024, 12, 1)
    assert periods.previous_end.date() == datetime(2024, 12, 31).date()


def test_week_is_rolling_seven_days():
    reference = datetime(2025, 11, 15, 12, 0)
    periods = resolve_period("week", reference)
    assert periods.current_start == reference - timedelta(days=7)
    assert periods.current_end == reference
    assert periods.previous_start == reference - timedelta(days=14)
    assert periods.previous_end == reference - timedelta(days=7)


def test_year_window():
    periods = resolve_period("year", datetime(2025, 6, 1))
    assert periods.current_start == datetime(2025, 1, 1)
    assert periods.current_end.date() == datetime(2025, 12, 31).date()
    assert periods.previous_start == datetime(2024, 1, 1)
    assert periods.previous_end.date() == datetime(2024, 12, 31).date()


def test_unknown_period_falls_back_to_month():
    reference = datetime(2025, 3, 10)
    assert resolve_period("fortnight", reference) == resolve_period("month", reference)
    assert resolve_period(None, reference).period == "month"


def test_add_months_clamps_day():
    assert add_months(datetime(2025, 1, 31), 1) == datetime(2025, 2, 28)
    assert add_months(datetime(2024, 3, 31), -1) == datetime(2024, 2, 29)
    assert months_ago(datetime(2025, 2, 10), 12) == datetime(2024, 2, 10)


def test_open_ended_window():
    window = DateWindow(datetime(2025, 1, 1))
    assert window.contains(datetime(2030, 1, 1))
    assert not window.contains(datetime(2024, 12, 31))
