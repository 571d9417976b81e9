from datetime import datetime

from models.category import ExpenseCategory
from models.filter_state import FilterState, TimeScope


def _seed(tx_service):
    tx_service.add("expense", 10.0, "Food", datetime(2025, 8, 20, 12, 0), "Lunch")
    tx_service.add("expense", 25.0, "Travel", datetime(2025, 8, 20, 18, 0))
    tx_service.add("expense", 40.0, "Bills", datetime(2025, 8, 2, 9, 0))
    tx_service.add("income", 500.0, "Salary", datetime(2025, 8, 1, 9, 0))


def test_get_visible_applies_filters(tx_service, report_service, reference):
    _seed(tx_service)
    state = FilterState(time_scope=TimeScope.TODAY, category=ExpenseCategory.FOOD)
    visible = report_service.get_visible("expense", state, now=reference)
    assert [t.notes for t in visible] == ["Lunch"]
    assert len(report_service.get_visible("income", FilterState(), now=reference)) == 1


def test_statistics_can_ignore_filters(tx_service, report_service, reference):
    _seed(tx_service)
    state = FilterState(category=ExpenseCategory.FOOD)

    overall = report_service.get_statistics("expense", state, filtered=False, now=reference)
    assert overall.total_today == 35.0
    assert overall.total_this_month == 75.0

    filtered = report_service.get_statistics("expense", state, filtered=True, now=reference)
    assert filtered.total_today == 10.0
    assert filtered.category_breakdown[ExpenseCategory.TRAVEL] == 0


def test_statistics_use_custom_date_as_reference(tx_service, report_service, reference):
    _seed(tx_service)
    state = FilterState(time_scope=TimeScope.CUSTOM, custom_date=datetime(2025, 8, 2))
    stats = report_service.get_statistics("expense", state, filtered=False, now=reference)
    assert stats.total_today == 40.0
    assert stats.total_this_month == 75.0

    visible_only = report_service.get_statistics("expense", state, now=reference)
    assert visible_only.total_today == 40.0
    assert visible_only.total_this_month == 40.0


def test_statistics_honor_first_weekday(tx_service, report_service, settings, reference):
    tx_service.add("expense", 6.0, "Food", datetime(2025, 8, 17, 20, 0))
    assert report_service.get_statistics("expense", FilterState(), now=reference).total_this_week == 0
    settings.first_weekday = 6
    assert report_service.get_statistics("expense", FilterState(), now=reference).total_this_week == 6.0


def test_summary(tx_service, report_service):
    _seed(tx_service)
    assert report_service.get_summary() == {"income": 500.0, "expense": 75.0, "net": 425.0}


def test_statistics_follow_category_and_search_by_default(tx_service, report_service, reference):
    _seed(tx_service)
    tx_service.add("expense", 6.0, "Food", datetime(2025, 8, 20, 8, 0), "Coffee")
    state = FilterState(category=ExpenseCategory.FOOD, search="lunch")

    stats = report_service.get_statistics("expense", state, now=reference)
    assert stats.total_today == 10.0
    assert stats.total_this_week == 10.0
    assert stats.total_this_month == 10.0
    assert stats.category_breakdown[ExpenseCategory.FOOD] == 10.0
    assert stats.category_breakdown[ExpenseCategory.TRAVEL] == 0
