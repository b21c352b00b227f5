from datetime import datetime

from app.utils import aggregation as agg
from app.utils.periods import month_window

from conftest import expense, income

records = [
    expense(250.0, "food", datetime(2025, 11, 1, 12)),
    expense(1000.0, "housing", datetime(2025, 11, 2, 12)),
    expense(150.0, "food", datetime(2025, 11, 3, 12)),
    expense(1200.0, "shopping", datetime(2025, 11, 3, 18)),
    income(3000.0, "salary", datetime(2025, 11, 1, 9)),
    expense(80.0, "food", datetime(2025, 10, 30, 12)),
]


def test_group_by_category_with_average():
    november = month_window(datetime(2025, 11, 15))
    groups = agg.aggregate(agg.filter_by_type(records, "expense"), agg.by_category, november, with_avg=True)
    food = next(group for group in groups if group.key == "food")
    assert food.total == 400.0
    assert food.count == 2
    assert food.avg == 200.0


def test_sort_by_total_puts_largest_first():
    groups = agg.sort_by_total(agg.aggregate(agg.filter_by_type(records, "expense"), agg.by_category))
    assert [group.key for group in groups] == ["shopping", "housing", "food"]


def test_daily_buckets_are_chronological():
    groups = agg.aggregate(agg.filter_by_type(records, "expense"), agg.by_day)
    assert [group.key for group in groups] == [
        (2025, 10, 30),
        (2025, 11, 1),
        (2025, 11, 2),
        (2025, 11, 3),
    ]
    assert groups[-1].to_dict() == {
        "key": {"year": 2025, "month": 11, "day": 3},
        "total": 1350.0,
        "count": 2,
    }


def test_lookup_defaults_to_zero():
    groups = agg.aggregate(records, agg.by_type)
    assert agg.lookup_total(groups, "income") == 3000.0
    assert agg.lookup_total(groups, "refund") == 0
    assert agg.lookup_count(groups, "refund") == 0


def test_average_is_omitted_unless_requested():
    groups = agg.aggregate(records, agg.by_type)
    assert "avg" not in groups[0].to_dict()


def test_round2_rounds_half_away_from_zero():
    assert agg.round2(1.005) == 1.01
    assert agg.round2(-1.005) == -1.01
    assert agg.round2(33.3333) == 33.33


def test_round0_rounds_halves_up():
    assert agg.round0(2.5) == 3
    assert agg.round0(-12.5) == -12
    assert agg.round0(-12.6) == -13
