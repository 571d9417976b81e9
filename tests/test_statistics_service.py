from datetime import datetime, timedelta

from models.category import ExpenseCategory, IncomeCategory
from services.statistics_service import compute_statistics, month_window, week_window


def test_total_today_sums_records_on_reference_day(make_record, reference):
    records = [
        make_record(10.0, occurred_at=reference.replace(hour=8)),
        make_record(20.5, occurred_at=reference.replace(hour=23, minute=59)),
        make_record(5.0, occurred_at=reference - timedelta(days=1)),
    ]
    stats = compute_statistics(records, reference)
    assert stats.total_today == 30.5


def test_total_today_is_additive(make_record, reference):
    first = [make_record(12.0), make_record(3.25)]
    second = [make_record(7.75)]
    combined = compute_statistics(first + second, reference).total_today
    separate = (
        compute_statistics(first, reference).total_today
        + compute_statistics(second, reference).total_today
    )
    assert combined == separate == 23.0


def test_empty_input_yields_zeros_for_every_category(reference):
    stats = compute_statistics([], reference)
    assert stats.total_today == 0
    assert stats.total_this_week == 0
    assert stats.total_this_month == 0
    assert set(stats.category_breakdown) == set(ExpenseCategory)
    assert all(v == 0 for v in stats.category_breakdown.values())


def test_income_breakdown_uses_income_categories(make_record, reference):
    stats = compute_statistics(
        [make_record(1000.0, category="Salary", kind="income")], reference, kind="income"
    )
    assert set(stats.category_breakdown) == set(IncomeCategory)
    assert stats.category_breakdown[IncomeCategory.SALARY] == 1000.0


def test_week_boundaries(make_record, reference):
    week_start = datetime(2025, 8, 18)
    records = [
        make_record(1.0, occurred_at=week_start),                                 # included
        make_record(2.0, occurred_at=week_start - timedelta(seconds=1)),          # excluded
        make_record(4.0, occurred_at=datetime(2025, 8, 24, 23, 59, 59)),          # included
        make_record(8.0, occurred_at=datetime(2025, 8, 25)),                      # excluded
    ]
    assert compute_statistics(records, reference).total_this_week == 5.0


def test_week_follows_first_weekday(make_record, reference):
    sunday = datetime(2025, 8, 17, 23, 59, 59)
    records = [make_record(6.0, occurred_at=sunday)]
    assert compute_statistics(records, reference, first_weekday=0).total_this_week == 0
    assert compute_statistics(records, reference, first_weekday=6).total_this_week == 6.0


def test_month_boundaries(make_record, reference):
    last_instant = datetime(2025, 8, 31, 23, 59, 59)
    records = [
        make_record(3.0, occurred_at=last_instant),
        make_record(9.0, occurred_at=datetime(2025, 8, 1)),
        make_record(50.0, occurred_at=datetime(2025, 7, 31, 23, 59, 59)),
    ]
    assert compute_statistics(records, reference).total_this_month == 12.0
    assert compute_statistics(records, datetime(2025, 9, 5)).total_this_month == 0


def test_windows_at_calendar_edge_contribute_zero(make_record):
    edge = datetime(9999, 12, 31, 12, 0)
    stats = compute_statistics([make_record(42.0, occurred_at=edge)], edge)
    assert stats.total_today == 42.0
    assert stats.total_this_week == 0
    assert stats.total_this_month == 0
    assert month_window(edge) is None
    assert week_window(edge) is None


def test_custom_and_differently_cased_names_land_in_other(make_record, reference):
    records = [
        make_record(12.0, category="Groceries"),
        make_record(3.0, category="food"),
        make_record(5.0, category="Food"),
    ]
    breakdown = compute_statistics(records, reference).category_breakdown
    assert breakdown[ExpenseCategory.OTHER] == 15.0
    assert breakdown[ExpenseCategory.FOOD] == 5.0


def test_breakdown_share(make_record, reference):
    stats = compute_statistics(
        [make_record(30.0, category="Food"), make_record(10.0, category="Travel")], reference
    )
    assert stats.total == 40.0
    assert stats.breakdown_share(ExpenseCategory.FOOD) == 0.75
    assert stats.breakdown_share(ExpenseCategory.BILLS) == 0
